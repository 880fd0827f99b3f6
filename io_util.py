def get_i64(buf, offset: int) -> int:
  return int.from_bytes(buf[offset:offset + 8], byteorder="little")


def get_i32(buf, offset: int) -> int:
  return int.from_bytes(buf[offset:offset + 4], byteorder="little")


def get_i8(buf, offset: int) -> int:
  return buf[offset]


def read_into(file, view: memoryview) -> int:
  """Fills view from file. Returns the number of bytes read, which is less than len(view) only at end of file.

  Only blocking sources are supported: a read that returns None raises BlockingIOError.
  """
  readinto = getattr(file, "readinto", None)
  filled = 0
  while filled < len(view):
    if readinto is not None:
      n = readinto(view[filled:])
      if n is None:
        raise BlockingIOError("Source has no data available, only blocking sources are supported")
      if n == 0:
        break
    else:
      chunk = file.read(len(view) - filled)
      if chunk is None:
        raise BlockingIOError("Source has no data available, only blocking sources are supported")
      if not chunk:
        break
      n = len(chunk)
      view[filled:filled + n] = chunk
    filled += n
  return filled


class ReadAheadReader:
  """Wraps a source and reads from it in chunks of buffer_size to cut down the number of read calls."""

  def __init__(self, file, buffer_size: int):
    self.file = file
    self.buffer_size: int = buffer_size
    self._buffer: bytes = b""
    self._pos: int = 0

  def read(self, n_bytes: int) -> bytes:
    if self._pos >= len(self._buffer):
      if n_bytes >= self.buffer_size:
        # Nothing buffered and the request is large, skip the copy
        return self.file.read(n_bytes)
      data = self.file.read(self.buffer_size)
      if data is None:
        return None
      self._buffer = data
      self._pos = 0
    chunk = self._buffer[self._pos:self._pos + n_bytes]
    self._pos += len(chunk)
    return chunk

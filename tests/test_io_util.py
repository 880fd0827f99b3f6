import io

import pytest

from io_util import ReadAheadReader, get_i8, get_i32, get_i64, read_into


class TrickleReader:
  """Hands out at most one byte per read() and has no readinto()."""

  def __init__(self, data: bytes):
    self.data = data
    self.pos = 0
    self.num_reads = 0

  def read(self, n_bytes: int) -> bytes:
    self.num_reads += 1
    chunk = self.data[self.pos:self.pos + min(n_bytes, 1)]
    self.pos += len(chunk)
    return chunk


class CountingReader(io.BytesIO):
  def __init__(self, data: bytes):
    super().__init__(data)
    self.num_reads = 0

  def read(self, size=-1):
    self.num_reads += 1
    return super().read(size)


def test_little_endian_getters():
  buf = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09])
  assert get_i8(buf, 0) == 1
  assert get_i32(buf, 1) == 0x05040302
  assert get_i64(buf, 1) == 0x0908070605040302


def test_read_into_fills_view_from_short_reads():
  view = memoryview(bytearray(5))
  assert read_into(TrickleReader(b"abcdefg"), view) == 5
  assert bytes(view) == b"abcde"


def test_read_into_reports_end_of_file():
  view = memoryview(bytearray(5))
  assert read_into(io.BytesIO(b"abc"), view) == 3
  assert read_into(io.BytesIO(b""), view) == 0


def test_read_ahead_reader_batches_reads():
  data = bytes(range(256)) * 4
  source = CountingReader(data)
  reader = ReadAheadReader(source, 512)

  out = b""
  while True:
    chunk = reader.read(10)
    if not chunk:
      break
    out += chunk

  assert out == data
  # Two full chunks and one empty read at the end
  assert source.num_reads == 3


def test_read_ahead_reader_passes_large_reads_through():
  source = CountingReader(bytes(2000))
  reader = ReadAheadReader(source, 512)
  assert len(reader.read(1000)) == 1000
  assert source.num_reads == 1


class NonBlockingReader:
  def read(self, n_bytes: int):
    return None


class NonBlockingRawReader(io.RawIOBase):
  def readable(self):
    return True

  def readinto(self, b):
    return None


def test_read_into_rejects_non_blocking_read():
  with pytest.raises(BlockingIOError):
    read_into(NonBlockingReader(), memoryview(bytearray(5)))


def test_read_into_rejects_non_blocking_readinto():
  with pytest.raises(BlockingIOError):
    read_into(NonBlockingRawReader(), memoryview(bytearray(5)))


def test_read_ahead_reader_passes_none_through():
  assert ReadAheadReader(NonBlockingReader(), 512).read(10) is None

from __future__ import annotations  # to allow type references to self

import sys
from typing import Iterator, Optional, Tuple

from io_util import ReadAheadReader, get_i8, get_i32, get_i64, read_into

# https://tools.ietf.org/html/rfc3533
# https://tools.ietf.org/html/rfc7845

HEADER_SIZE = 27
CAPTURE_PATTERN = b"OggS"
SEGMENT_COUNT_OFFSET = 26
MAX_SEGMENT_SIZE = 255
MAX_PACKET_SIZE = MAX_SEGMENT_SIZE * 255
MAX_PAGE_SIZE = HEADER_SIZE + MAX_SEGMENT_SIZE + MAX_PACKET_SIZE

DEBUG = False


def debug(label: str, message: str):
  if DEBUG:
    print("[%s]: %s" % (label, message), file=sys.stderr)


class OggError(Exception):
  pass


class Truncated(OggError):
  """The source ended in the middle of a page (or, when collecting packets, in the middle of a packet)."""

  def __init__(self, what: str, expected: Optional[int], got: int):
    if expected is None:
      message = "Stream ended inside %s after %i bytes" % (what, got)
    else:
      message = "Stream ended inside %s: expected %i bytes but got %i" % (what, expected, got)
    super().__init__(message)
    self.what: str = what
    self.expected: Optional[int] = expected
    self.got: int = got


class InvalidCapturePattern(OggError):
  def __init__(self, pattern: bytes, header: bytes):
    super().__init__("Expected capture pattern but got: %r (header: %s)" % (pattern, header.hex(" ")))
    self.pattern: bytes = pattern
    self.header: bytes = header


class BadSegmentCount(OggError):
  def __init__(self, segment_count: int):
    super().__init__("Invalid segment table size: %i" % segment_count)
    self.segment_count: int = segment_count


class SinkWriteFailed(OggError):
  pass


class BufferTooSmall(OggError):
  def __init__(self, size: int):
    super().__init__("Buffer is too small: %i bytes, need at least %i" % (size, MAX_PAGE_SIZE))
    self.size: int = size


class PageHeader:
  def __init__(self, version, header_type, absolute_granule_position, stream_serial_number, page_sequence_number,
      page_checksum, segment_count):
    # Carried for diagnostics only, decoding never looks past segment_count
    self.version: int = version
    self.header_type: int = header_type
    self.absolute_granule_position: int = absolute_granule_position
    self.stream_serial_number: int = stream_serial_number
    self.page_sequence_number: int = page_sequence_number
    self.page_checksum: int = page_checksum
    self.segment_count: int = segment_count

  @staticmethod
  def parse(header) -> PageHeader:
    capture_pattern = bytes(header[:4])
    if capture_pattern != CAPTURE_PATTERN:
      raise InvalidCapturePattern(capture_pattern, bytes(header))
    return PageHeader(get_i8(header, 4), get_i8(header, 5), get_i64(header, 6), get_i32(header, 14),
                      get_i32(header, 18), get_i32(header, 22), get_i8(header, SEGMENT_COUNT_OFFSET))

  def __repr__(self):
    return "(Page %i in '%s'. %i segments)" \
           % (self.page_sequence_number, self.stream_serial_number, self.segment_count)


class Page:
  """One page whose segment table and payload are views into the reader's scratch buffer.

  The views are overwritten by the next read_page() call.
  """

  def __init__(self, header: PageHeader, segment_table: memoryview, payload: memoryview):
    self.header: PageHeader = header
    self.segment_table: memoryview = segment_table
    self.payload: memoryview = payload

  @property
  def payload_length(self) -> int:
    return len(self.payload)

  def __repr__(self):
    return "(%s, payload length: %i)" % (self.header, self.payload_length)


def _read_fully(file, view: memoryview, what: str):
  n = read_into(file, view)
  if n < len(view):
    raise Truncated(what, len(view), n)


class PageReader:

  def __init__(self, file, buffer: Optional[bytearray] = None):
    if buffer is None:
      buffer = bytearray(MAX_PAGE_SIZE)
    if len(buffer) < MAX_PAGE_SIZE:
      raise BufferTooSmall(len(buffer))
    self.file = file
    self.buffer: memoryview = memoryview(buffer)
    self.num_pages_read: int = 0
    self.bytes_consumed: int = 0

  def read_page(self) -> Optional[Page]:
    """Reads the next page, or returns None if the source ended exactly at a page boundary."""
    log_tag = "PageReader.read_page()"

    header_buf = self.buffer[:HEADER_SIZE]
    n = read_into(self.file, header_buf)
    if n == 0:
      debug(log_tag, "Reached end of stream after %i pages" % self.num_pages_read)
      return None
    if n < HEADER_SIZE:
      raise Truncated("page header", HEADER_SIZE, n)

    header = PageHeader.parse(header_buf)
    num_segments = header.segment_count
    if num_segments < 1:
      raise BadSegmentCount(num_segments)

    segment_table = self.buffer[HEADER_SIZE:HEADER_SIZE + num_segments]
    _read_fully(self.file, segment_table, "segment table")

    payload_start = HEADER_SIZE + num_segments
    payload = self.buffer[payload_start:payload_start + sum(segment_table)]
    _read_fully(self.file, payload, "page payload")

    self.num_pages_read += 1
    self.bytes_consumed += payload_start + len(payload)
    page = Page(header, segment_table, payload)
    debug(log_tag, "Read %s" % page)
    return page

  def iter_pages(self) -> Iterator[Page]:
    page = self.read_page()
    while page is not None:
      yield page
      page = self.read_page()


def iter_page_chunks(page: Page) -> Iterator[Tuple[memoryview, bool]]:
  """Splits a page's payload at packet boundaries.

  Yields (chunk, complete) pairs. complete is False only for the last chunk of a page that ends on a lacing value
  of 255, in which case the packet continues on the next page. Zero-length chunks are yielded too.
  """
  segment_table = page.segment_table
  payload = page.payload
  num_segments = len(segment_table)

  index = 0
  start = 0
  end = 0
  while index < num_segments:
    lacing_value = segment_table[index]
    end += lacing_value
    index += 1

    if lacing_value < MAX_SEGMENT_SIZE:
      yield payload[start:end], True
      start = end
    elif index == num_segments:
      yield payload[start:end], False


def write_packets(sink, page: Page) -> int:
  """Writes the packet data of one page to sink, one write per chunk. Returns the number of writes."""
  num_writes = 0
  for chunk, _ in iter_page_chunks(page):
    try:
      written = sink.write(chunk)
    except Exception as e:
      raise SinkWriteFailed("Failed to write a packet: %s" % e) from e
    if written is not None and written < len(chunk):
      raise SinkWriteFailed("Failed to write a packet: wrote %i of %i bytes" % (written, len(chunk)))
    num_writes += 1
  return num_writes


def decode_with_buffer(sink, source, buffer: bytearray):
  """Decodes the Ogg stream in source and writes the packet data to sink, using buffer as scratch space.

  A packet that spans several pages reaches the sink as one write per page. The memoryviews passed to
  sink.write() are only valid for the duration of the call.
  """
  log_tag = "decode()"

  if buffer is None:
    raise BufferTooSmall(0)
  reader = PageReader(source, buffer)
  num_writes = 0
  for page in reader.iter_pages():
    num_writes += write_packets(sink, page)
  debug(log_tag, "Decoded %i pages (%i bytes) into %i writes"
        % (reader.num_pages_read, reader.bytes_consumed, num_writes))


def decode(sink, source):
  decode_with_buffer(sink, source, bytearray(MAX_PAGE_SIZE))


def decode_buffered(sink, source):
  """Like decode(), but reads the source in MAX_PAGE_SIZE chunks to reduce the number of read calls."""
  decode(sink, ReadAheadReader(source, MAX_PAGE_SIZE))


def iter_packets(source, buffer: Optional[bytearray] = None) -> Iterator[bytes]:
  """Yields every complete packet in source, joined across page boundaries."""
  reader = PageReader(source, buffer)
  partial = bytearray()
  for page in reader.iter_pages():
    for chunk, complete in iter_page_chunks(page):
      partial += chunk
      if complete:
        yield bytes(partial)
        partial = bytearray()
  if partial:
    raise Truncated("packet", None, len(partial))

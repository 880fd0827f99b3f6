from typing import List


def build_page(segment_table: List[int], payload: bytes, page_sequence_number: int = 0, header_type: int = 0,
    absolute_granule_position: int = 0, stream_serial_number: int = 0x4f707573, capture_pattern: bytes = b"OggS") \
    -> bytes:
  header = capture_pattern + bytes([0, header_type]) \
           + absolute_granule_position.to_bytes(8, byteorder="little") \
           + stream_serial_number.to_bytes(4, byteorder="little") \
           + page_sequence_number.to_bytes(4, byteorder="little") \
           + bytes(4) \
           + bytes([len(segment_table)])
  return header + bytes(segment_table) + payload


def lacing_values(packet_length: int) -> List[int]:
  return [255] * (packet_length // 255) + [packet_length % 255]


def paginate(packets: List[bytes], max_segments: int = 255) -> bytes:
  # Split every packet into segments, then cut the segment sequence into pages
  segments = []
  for packet in packets:
    offset = 0
    for lacing_value in lacing_values(len(packet)):
      segments.append((lacing_value, packet[offset:offset + lacing_value]))
      offset += lacing_value

  pages = []
  for i in range(0, len(segments), max_segments):
    group = segments[i:i + max_segments]
    pages.append(build_page([lacing_value for lacing_value, _ in group], b"".join(data for _, data in group),
                            page_sequence_number=len(pages)))
  return b"".join(pages)


def packet(length: int, seed: int = 0) -> bytes:
  return bytes((seed + i * 7) % 256 for i in range(length))


class RecordingSink:
  def __init__(self):
    self.writes: List[bytes] = []

  def write(self, data) -> int:
    self.writes.append(bytes(data))
    return len(data)

  def getvalue(self) -> bytes:
    return b"".join(self.writes)

PACKET_SIZE = 188
HEADER_SIZE = 4
SYNC_BYTE = b'\x47'
STUFFING_BYTE = b'\xff'

NULL_PID = 0x1FFF

PCR_SIZE = 6
PCR_BASE_CYCLE = 2 ** 33
PCR_CYCLE = PCR_BASE_CYCLE * 300
PCR_EXTENSION_SCALE = 300
HZ = 90000
PCR_HZ = HZ * PCR_EXTENSION_SCALE

ADAPTATION_FIELD_CONTROL_NONE = 0x01
ADAPTATION_FIELD_CONTROL_ONLY = 0x02
ADAPTATION_FIELD_CONTROL_WITH_PAYLOAD = 0x03

PCR_FLAG = 0x10

def transport_error_indicator(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[1] & 0x80) != 0

def payload_unit_start_indicator(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[1] & 0x40) != 0

def transport_priority(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[1] & 0x20) != 0

def pid(packet: bytes | bytearray | memoryview) -> int:
  return ((packet[1] & 0x1F) << 8) | packet[2]

def transport_scrambling_control(packet: bytes | bytearray | memoryview) -> int:
  return (packet[3] & 0xC0) >> 6

def adaptation_field_control(packet: bytes | bytearray | memoryview) -> int:
  return (packet[3] & 0x30) >> 4

def has_adaptation_field(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[3] & 0x20) != 0

def has_payload(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[3] & 0x10) != 0

def continuity_counter(packet: bytes | bytearray | memoryview) -> int:
  return packet[3] & 0x0F

def adaptation_field_length(packet: bytes | bytearray | memoryview) -> int:
  return packet[HEADER_SIZE] if has_adaptation_field(packet) else 0

def payload_offset(packet: bytes | bytearray | memoryview) -> int:
  if has_adaptation_field(packet):
    return HEADER_SIZE + 1 + adaptation_field_length(packet)
  return HEADER_SIZE

def payload(packet: bytes | bytearray | memoryview) -> bytes | bytearray | memoryview:
  return packet[payload_offset(packet):]

def has_pcr(packet: bytes | bytearray | memoryview) -> bool:
  return has_adaptation_field(packet) and adaptation_field_length(packet) > 0 and (packet[HEADER_SIZE + 1] & PCR_FLAG) != 0

def decode_pcr(field: bytes | bytearray | memoryview) -> int:
  # 33 bit base, 6 reserved bits, 9 bit extension
  base = (field[0] << 25) | (field[1] << 17) | (field[2] << 9) | (field[3] << 1) | ((field[4] & 0x80) >> 7)
  extension = ((field[4] & 0x01) << 8) | field[5]
  return base * PCR_EXTENSION_SCALE + extension

def encode_pcr(value: int) -> bytes:
  base, extension = divmod(value % PCR_CYCLE, PCR_EXTENSION_SCALE)
  return bytes([
    (base >> 25) & 0xFF,
    (base >> 17) & 0xFF,
    (base >> 9) & 0xFF,
    (base >> 1) & 0xFF,
    ((base & 0x01) << 7) | 0x7E | ((extension >> 8) & 0x01),
    extension & 0xFF,
  ])

def pcr(packet: bytes | bytearray | memoryview) -> int | None:
  if not has_pcr(packet): return None
  begin = HEADER_SIZE + 2
  return decode_pcr(packet[begin: begin + PCR_SIZE])

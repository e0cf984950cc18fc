from totsplit.mpeg2ts import ts
from totsplit.mpeg2ts.tot import DateTimeKey, TOT_PID, TOT_TABLE_ID

PCR_PID = 0x0100

def dec_to_bcd(value: int) -> int:
  return ((value // 10) << 4) | (value % 10)

def header(pid: int, afc: int, pusi: bool = False, cc: int = 0) -> bytes:
  return bytes([
    0x47,
    (0x40 if pusi else 0x00) | ((pid >> 8) & 0x1F),
    pid & 0xFF,
    ((afc & 0x03) << 4) | (cc & 0x0F),
  ])

def null_packet(cc: int = 0) -> bytes:
  return header(ts.NULL_PID, ts.ADAPTATION_FIELD_CONTROL_NONE, cc=cc) + ts.STUFFING_BYTE * (ts.PACKET_SIZE - ts.HEADER_SIZE)

def pcr_packet(pcr: int, pid: int = PCR_PID, cc: int = 0) -> bytes:
  adaptation = bytes([ts.PCR_FLAG]) + ts.encode_pcr(pcr)
  adaptation += ts.STUFFING_BYTE * (ts.PACKET_SIZE - ts.HEADER_SIZE - 1 - len(adaptation))
  return header(pid, ts.ADAPTATION_FIELD_CONTROL_ONLY, cc=cc) + bytes([len(adaptation)]) + adaptation

def tot_section(key: DateTimeKey, table_id: int = TOT_TABLE_ID) -> bytes:
  hour, rest = divmod(key.time, 3600)
  minute, second = divmod(rest, 60)
  return bytes([
    table_id, 0x70, 0x0A,
    (key.MJD >> 8) & 0xFF, key.MJD & 0xFF,
    dec_to_bcd(hour), dec_to_bcd(minute), dec_to_bcd(second),
  ])

def tot_packet(key: DateTimeKey, pid: int = TOT_PID, table_id: int = TOT_TABLE_ID, pointer: bool = False, pointer_length: int = 0, adaptation: bytes | None = None) -> bytes:
  body = (bytes([pointer_length]) + ts.STUFFING_BYTE * pointer_length if pointer else b'') + tot_section(key, table_id)
  if adaptation is None:
    prefix = header(pid, ts.ADAPTATION_FIELD_CONTROL_NONE, pusi=pointer)
  else:
    prefix = header(pid, ts.ADAPTATION_FIELD_CONTROL_WITH_PAYLOAD, pusi=pointer) + bytes([len(adaptation)]) + adaptation
  packet = prefix + body
  return packet + ts.STUFFING_BYTE * (ts.PACKET_SIZE - len(packet))

def build_stream(
  count: int,
  ticks_per_packet: int,
  pcr_interval: int = 7,
  tot_interval: int = 500,
  tot_offset: int = 0,
  first_tot: DateTimeKey = DateTimeKey(58392, 9 * 3600),
  tot_step: int = 10,
) -> list[bytes]:
  """
  Packet i carries a TOT when (i - tot_offset) is a multiple of tot_interval,
  a PCR of i * ticks_per_packet when i is a multiple of pcr_interval,
  and stuffing otherwise.
  """
  packets: list[bytes] = []
  for i in range(count):
    if i >= tot_offset and (i - tot_offset) % tot_interval == 0:
      n = (i - tot_offset) // tot_interval
      packets.append(tot_packet(tot_key(first_tot, n, tot_step)))
    elif i % pcr_interval == 0:
      packets.append(pcr_packet(i * ticks_per_packet, cc=i))
    else:
      packets.append(null_packet(cc=i))
  return packets

def tot_key(first: DateTimeKey, n: int, step: int = 10) -> DateTimeKey:
  days, seconds = divmod(first.time + n * step, 24 * 60 * 60)
  return DateTimeKey(first.MJD + days, seconds)

from typing import NamedTuple
from datetime import date, datetime, timedelta

from totsplit.errors import DatetimeParseFailed
from totsplit.mpeg2ts import ts

TOT_PID = 0x0014
TOT_TABLE_ID = 0x73

MJD_EPOCH = date(1858, 11, 17)
SECONDS_PER_DAY = 24 * 60 * 60
DATETIME_FORMAT = '%Y/%m/%d-%H:%M:%S'

def bcd_to_dec(bcd: int) -> int:
  return (bcd & 0x0F) + ((bcd & 0xF0) >> 4) * 10

class DateTimeKey(NamedTuple):
  """Modified Julian Day plus seconds since midnight, ordered as one 64-bit key."""
  MJD: int
  time: int

  @property
  def key(self) -> int:
    return (self.MJD << 32) | self.time

  @classmethod
  def from_key(cls, key: int) -> 'DateTimeKey':
    return cls(key >> 32, key & 0xFFFFFFFF)

  @classmethod
  def from_datetime(cls, value: datetime) -> 'DateTimeKey':
    return cls((value.date() - MJD_EPOCH).days, value.hour * 3600 + value.minute * 60 + value.second)

  def to_datetime(self) -> datetime:
    return datetime.combine(MJD_EPOCH, datetime.min.time()) + timedelta(days=self.MJD, seconds=self.time)

  def seconds_until(self, target: 'DateTimeKey') -> int:
    days = target.MJD - self.MJD
    seconds = target.time - self.time
    if seconds < 0:
      days -= 1
      seconds += SECONDS_PER_DAY
    return days * SECONDS_PER_DAY + seconds

  def __str__(self) -> str:
    if self.time >= SECONDS_PER_DAY: return f'MJD {self.MJD} Time {self.time}'
    return self.to_datetime().strftime(DATETIME_FORMAT)

EARLIEST = DateTimeKey(0, 0)
LATEST = DateTimeKey(0xFFFF, 0xFFFFFFFF)

def parse_datetime(text: str) -> DateTimeKey:
  try:
    return DateTimeKey.from_datetime(datetime.strptime(text, DATETIME_FORMAT))
  except ValueError as e:
    raise DatetimeParseFailed(text) from e

def section_offset(packet: bytes | bytearray | memoryview) -> int | None:
  begin = ts.payload_offset(packet)
  if begin >= ts.PACKET_SIZE: return None

  # pointer_field precedes the section; a pointer of 0x73 must not be taken for the table id
  if ts.payload_unit_start_indicator(packet):
    pointed = begin + 1 + packet[begin]
    if pointed < ts.PACKET_SIZE and packet[pointed] == TOT_TABLE_ID: return pointed

  if packet[begin] == TOT_TABLE_ID: return begin
  return None

def try_decode(packet: bytes | bytearray | memoryview) -> DateTimeKey | None:
  if ts.pid(packet) != TOT_PID: return None
  if (begin := section_offset(packet)) is None: return None
  if begin + 8 > ts.PACKET_SIZE: return None

  MJD = (packet[begin + 3] << 8) | packet[begin + 4]
  hour = bcd_to_dec(packet[begin + 5])
  minute = bcd_to_dec(packet[begin + 6])
  second = bcd_to_dec(packet[begin + 7])
  return DateTimeKey(MJD, hour * 3600 + minute * 60 + second)

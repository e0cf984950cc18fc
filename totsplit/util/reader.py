from typing import BinaryIO, Iterator
from pathlib import Path

from totsplit.errors import InputOpenFailed, OutputOpenFailed, DesyncTerminated
from totsplit.mpeg2ts import ts

def open_input(path: str | Path) -> BinaryIO:
  try:
    return open(path, 'rb')
  except OSError as e:
    raise InputOpenFailed(path, e) from e

def open_output(path: str | Path) -> BinaryIO:
  try:
    return open(path, 'wb')
  except OSError as e:
    raise OutputOpenFailed(path, e) from e

class PacketReader:
  def __init__(self, reader: BinaryIO):
    self.reader = reader
    self.position: int = reader.tell() if reader.seekable() else 0

  def read(self) -> bytes | None:
    packet = self.reader.read(ts.PACKET_SIZE)
    if len(packet) < ts.PACKET_SIZE: return None
    if packet[0:1] != ts.SYNC_BYTE:
      raise DesyncTerminated(self.position, packet[0])
    self.position += ts.PACKET_SIZE
    return packet

  def seek(self, offset: int) -> None:
    self.reader.seek(offset)
    self.position = offset

  def __iter__(self) -> Iterator[bytes]:
    while (packet := self.read()) is not None:
      yield packet

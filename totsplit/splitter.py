import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import BinaryIO

from totsplit.config import SplitConfig
from totsplit.errors import BitrateUnmeasurable, DesyncTerminated
from totsplit.bitrate import estimate
from totsplit.mpeg2ts import ts
from totsplit.mpeg2ts import tot
from totsplit.mpeg2ts.tot import DateTimeKey
from totsplit.util.reader import PacketReader, open_input, open_output

logger = logging.getLogger(__name__)

class SplitState(Enum):
  LOCATING = auto()
  SEEKING_DONE = auto()
  WRITING = auto()
  CLOSED = auto()

@dataclass
class SplitWindow:
  start: DateTimeKey
  end: DateTimeKey
  state: SplitState = SplitState.LOCATING
  first_tot_seen: bool = False

  @property
  def writing(self) -> bool:
    return self.state is SplitState.WRITING

  @property
  def seeked(self) -> bool:
    return self.state is SplitState.SEEKING_DONE

  def contains(self, key: DateTimeKey) -> bool:
    return self.start <= key <= self.end

@dataclass
class SplitResult:
  bitrate: float
  packets: int = 0
  state: SplitState = SplitState.LOCATING
  seek_offset: int | None = None
  desynchronized: bool = False
  first_key: DateTimeKey | None = None
  last_key: DateTimeKey | None = None

class StreamSplitter:
  """
  Copies the packets between two TOT times of a TS file.

  The bitrate is measured from PCR first, so the scan can jump close to the
  start time instead of reading everything before it. The boundaries themselves
  are found exactly by decoding TOT packets after the jump.
  """

  def __init__(self, config: SplitConfig):
    self.config = config

  def seek_offset(self, bitrate: float, seconds: int) -> int:
    return int(bitrate / 8 * seconds * self.config.seek_undershoot / ts.PACKET_SIZE) * ts.PACKET_SIZE

  def split(self) -> SplitResult:
    with open_input(self.config.input) as reader:
      bitrate = estimate(PacketReader(reader), self.config.pcr_sample_count)
      if bitrate <= 0.0:
        raise BitrateUnmeasurable(self.config.input)
      logger.info('TS Bitrate = %f', bitrate)

      reader.seek(0)
      with open_output(self.config.output) as writer:
        result = self.scan(PacketReader(reader), writer, bitrate)

    logger.info('Total read TS packet = %d', result.packets)
    return result

  def scan(self, reader: PacketReader, writer: BinaryIO, bitrate: float) -> SplitResult:
    window = SplitWindow(self.config.start, self.config.end)
    result = SplitResult(bitrate)

    try:
      for packet in reader:
        if (key := tot.try_decode(packet)) is not None:
          self.update(window, key, reader, result)
          if window.state is SplitState.CLOSED: break

        if window.writing:
          writer.write(packet)
          result.packets += 1
    except DesyncTerminated as e:
      logger.warning('split stopped: %s', e)
      result.desynchronized = True

    if result.packets == 0:
      logger.warning('no TOT between %s and %s', window.start, window.end)
    window.state = SplitState.CLOSED
    result.state = window.state
    return result

  def update(self, window: SplitWindow, key: DateTimeKey, reader: PacketReader, result: SplitResult) -> None:
    if window.seeked:
      logger.debug('first TOT after seek: %s', key)

    if window.contains(key):
      if not window.writing:
        logger.info('Split start %s', key)
        result.first_key = key
      window.state = SplitState.WRITING
      result.last_key = key
    elif window.writing:
      logger.info('Split end %s', key)
      window.state = SplitState.CLOSED
    elif not window.first_tot_seen and key < window.start:
      seconds = key.seconds_until(window.start)
      offset = self.seek_offset(result.bitrate, seconds)
      logger.debug('First TOT %s, Diff Second = %d / Seek_Byte = %d', key, seconds, offset)
      reader.seek(offset)
      result.seek_offset = offset
      window.state = SplitState.SEEKING_DONE
    elif window.seeked:
      window.state = SplitState.LOCATING

    window.first_tot_seen = True

import logging
from dataclasses import dataclass
from typing import cast

from totsplit.config import BitrateConfig
from totsplit.errors import DesyncTerminated
from totsplit.mpeg2ts import ts
from totsplit.util.reader import PacketReader, open_input

logger = logging.getLogger(__name__)

@dataclass
class BitrateSample:
  pid: int
  start_pcr: int
  end_pcr: int
  packets: int = 0
  samples: int = 1

  def restart(self, pcr: int) -> None:
    self.start_pcr = self.end_pcr = pcr
    self.packets = 0
    self.samples = 1

  def push(self, pcr: int) -> None:
    self.end_pcr = pcr
    self.samples += 1

  def bitrate(self) -> float:
    if self.end_pcr <= self.start_pcr: return 0.0
    return (self.packets * ts.PACKET_SIZE * 8) / ((self.end_pcr - self.start_pcr) / ts.PCR_HZ)

def estimate(reader: PacketReader, sample_count: int) -> float:
  """
  Average bitrate (bps) over `sample_count` PCR values of the first PCR PID.
  Returns 0.0 when the stream ends before enough samples are seen.
  """
  if sample_count < 2:
    raise ValueError(f'sample_count must be at least 2, got {sample_count}')

  sample: BitrateSample | None = None
  try:
    for packet in reader:
      if sample is not None: sample.packets += 1
      if not ts.has_pcr(packet): continue

      PID = ts.pid(packet)
      PCR = cast(int, ts.pcr(packet))
      if sample is None:
        logger.debug('Start PCR = %d (PID 0x%04X)', PCR, PID)
        sample = BitrateSample(PID, PCR, PCR)
        continue
      if PID != sample.pid: continue

      if PCR < sample.start_pcr:
        logger.debug('PCR RESET %d => %d', sample.start_pcr, PCR)
        sample.restart(PCR)
        continue

      sample.push(PCR)
      if sample.samples >= sample_count:
        logger.debug('End PCR = %d / Total = %d', sample.end_pcr, sample.packets)
        return sample.bitrate()
  except DesyncTerminated as e:
    logger.warning('bitrate scan stopped: %s', e)

  if sample is None:
    logger.debug('no PCR found')
  else:
    logger.debug('stream ended after %d of %d PCR samples', sample.samples, sample_count)
  return 0.0

def estimate_file(config: BitrateConfig) -> float:
  with open_input(config.input) as reader:
    return estimate(PacketReader(reader), config.pcr_sample_count)

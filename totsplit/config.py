from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from totsplit.mpeg2ts.tot import DateTimeKey, EARLIEST, LATEST

# PCR samples used when only the bitrate is asked for
BITRATE_PCR_COUNT = 1000
# PCR samples used by the split's own bitrate pass
SPLIT_PCR_COUNT = 100
# seek slightly short of the estimated offset so the start TOT is not skipped
SEEK_UNDERSHOOT = 0.999

class BitrateConfig(BaseModel):
  model_config = ConfigDict(frozen=True)

  input: Path
  pcr_sample_count: int = Field(default=BITRATE_PCR_COUNT, ge=2)

class SplitConfig(BaseModel):
  model_config = ConfigDict(frozen=True)

  input: Path
  output: Path
  start: DateTimeKey = EARLIEST
  end: DateTimeKey = LATEST
  pcr_sample_count: int = Field(default=SPLIT_PCR_COUNT, ge=2)
  seek_undershoot: float = Field(default=SEEK_UNDERSHOOT, gt=0.0, le=1.0)

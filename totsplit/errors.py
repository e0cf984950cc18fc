from pathlib import Path

class TotSplitError(Exception):
  pass

class InputOpenFailed(TotSplitError):
  def __init__(self, path: str | Path, reason: OSError):
    super().__init__(f'IN File open error. [{path}]: {reason.strerror or reason}')
    self.path = path

class OutputOpenFailed(TotSplitError):
  def __init__(self, path: str | Path, reason: OSError):
    super().__init__(f'OUT File open error. [{path}]: {reason.strerror or reason}')
    self.path = path

class BitrateUnmeasurable(TotSplitError):
  def __init__(self, path: str | Path):
    super().__init__(f'Error calc bitrate. [{path}]')
    self.path = path

class DatetimeParseFailed(TotSplitError):
  def __init__(self, text: str):
    super().__init__(f'datetime format error, expected YYYY/MM/DD-HH:MM:SS: {text!r}')
    self.text = text

class DesyncTerminated(TotSplitError):
  def __init__(self, offset: int, byte: int):
    super().__init__(f'sync byte not found at offset {offset} (0x{byte:02X})')
    self.offset = offset
    self.byte = byte

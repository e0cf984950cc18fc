#!/usr/bin/env python3

import argparse
import logging
import sys

from pathlib import Path

from pydantic import ValidationError

from totsplit.bitrate import estimate_file
from totsplit.config import BitrateConfig, SplitConfig, BITRATE_PCR_COUNT, SPLIT_PCR_COUNT, SEEK_UNDERSHOOT
from totsplit.errors import TotSplitError, BitrateUnmeasurable
from totsplit.mpeg2ts.tot import parse_datetime, EARLIEST, LATEST
from totsplit.splitter import StreamSplitter

logger = logging.getLogger('totsplit')

def bitrate(args: argparse.Namespace) -> None:
  config = BitrateConfig(input=args.input, pcr_sample_count=args.count)
  value = estimate_file(config)
  if value <= 0.0:
    raise BitrateUnmeasurable(config.input)
  print(f'{value:.0f}')

def split(args: argparse.Namespace) -> None:
  config = SplitConfig(
    input=args.input,
    output=args.output,
    start=parse_datetime(args.start) if args.start is not None else EARLIEST,
    end=parse_datetime(args.end) if args.end is not None else LATEST,
    pcr_sample_count=args.count,
    seek_undershoot=args.undershoot,
  )
  logger.info('IN File = %s', config.input)
  logger.info('OUT File = %s', config.output)
  StreamSplitter(config).split()

def main(argv: list[str] | None = None) -> int:
  parser = argparse.ArgumentParser(description=('totsplit: cut TS files by TOT time'))
  parser.add_argument('-v', '--verbose', action='store_true')
  subparsers = parser.add_subparsers(dest='command', required=True)

  bitrate_parser = subparsers.add_parser('bitrate', help='measure the TS bitrate from PCR')
  bitrate_parser.add_argument('-i', '--input', type=Path, required=True)
  bitrate_parser.add_argument('-n', '--count', type=int, nargs='?', default=BITRATE_PCR_COUNT, help='PCR samples to measure, at least 2 (the first PCR counts as one)')
  bitrate_parser.set_defaults(handler=bitrate)

  split_parser = subparsers.add_parser('split', help='extract the packets between two TOT times')
  split_parser.add_argument('-i', '--input', type=Path, required=True)
  split_parser.add_argument('-o', '--output', type=Path, required=True)
  split_parser.add_argument('-s', '--start', type=str, nargs='?', help='exp 2018/01/02-09:00:00')
  split_parser.add_argument('-e', '--end', type=str, nargs='?', help='exp 2018/01/02-09:15:00')
  split_parser.add_argument('-n', '--count', type=int, nargs='?', default=SPLIT_PCR_COUNT, help='PCR samples for the bitrate pass, at least 2 (the first PCR counts as one)')
  split_parser.add_argument('--undershoot', type=float, nargs='?', default=SEEK_UNDERSHOOT)
  split_parser.set_defaults(handler=split)

  args = parser.parse_args(argv)
  if args.command == 'split' and args.start is None and args.end is None:
    parser.error('split needs at least one of --start / --end')

  logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    stream=sys.stderr,
  )

  try:
    args.handler(args)
  except (TotSplitError, ValidationError) as e:
    logger.error('%s', e)
    return 1
  return 0

if __name__ == '__main__':
  sys.exit(main())

"""Entry point: convert a MIDI file to keyframe curves and log a summary."""

import argparse
import logging
import sys

from midi_curves import convert_midi_file
from midi_curves.errors import MidiCurvesError
from midi_curves.log_config import setup_logging
from midi_curves.midi import DEFAULT_SAMPLE_RATE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Convert a MIDI file into keyframe curves.')
    parser.add_argument('path', help='MIDI file to convert')
    parser.add_argument('--bpm', type=float, default=None, help='tempo (default: from file)')
    parser.add_argument('--rate', type=float, default=DEFAULT_SAMPLE_RATE, help='steps per second')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def summarize(curves) -> list[str]:
    """One line per curve: name, key count and time span."""
    lines = []
    for name, curve in curves.items():
        if len(curve):
            lines.append(f'{name}: {len(curve)} keys, {curve.start_time:.3f}s - {curve.end_time:.3f}s')
        else:
            lines.append(f'{name}: 0 keys')
    return lines


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    log = logging.getLogger("midi_curves.main")
    try:
        curves = convert_midi_file(args.path, bpm=args.bpm, sample_rate=args.rate)
    except (OSError, EOFError, MidiCurvesError) as e:
        log.error("Conversion failed: %s", e)
        return 1
    for line in summarize(curves):
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())

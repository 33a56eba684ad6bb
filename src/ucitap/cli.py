"""
Command-line entry points.

Usage:
    ucitap2json --log engine.log            # -> engine.json
    ucitap2json --log engine.log -c         # -> engine.zst
    ucitap --config config.json             # run the tap
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import UciTapError
from .parser import parse_transcript
from .records import RecordSink, output_path
from .tap import DEFAULT_CONFIG, load_config, run_tap


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def convert(log_path: Path, compress: bool = False, out_dir: Optional[Path] = None) -> Path:
    """Parse `log_path` and write its records; returns the output path."""
    final_path = output_path(log_path, compress=compress, out_dir=out_dir)

    print(f"Parsing UCI log: {log_path}")
    records = parse_transcript(
        log_path, on_progress=lambda n: print(f"Parsed {n} lines...")
    )
    print(f"Parsing complete: {len(records)} positions captured")

    sink = RecordSink(records)
    print("Serializing JSON objects...")
    data = sink.serialize()
    print("JSON serialization complete")
    if compress:
        print("Compressing JSON (max level)...")
        data = sink.compress(data)
    print(f"Writing output file: {final_path}")
    sink.write_bytes(final_path, data)
    print(f"Done! Wrote {len(sink)} positions")
    return final_path


def main_convert(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Convert a tapped UCI log to JSON search records.")
    ap.add_argument("-l", "--log", type=Path, required=True, help="Input UCI log file")
    ap.add_argument("-c", "--compress", action="store_true", help="Compress output to .zst")
    ap.add_argument("-o", "--output-dir", type=Path, default=None,
                    help="Directory for the output file (default: current directory)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        convert(args.log, compress=args.compress, out_dir=args.output_dir)
    except (OSError, UciTapError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def main_tap(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run a UCI engine and log all protocol traffic.")
    ap.add_argument("--config", type=Path, default=Path(DEFAULT_CONFIG),
                    help=f"Tap config file (default: {DEFAULT_CONFIG})")
    args = ap.parse_args(argv)

    try:
        config = load_config(args.config)
        return run_tap(config)
    except (OSError, UciTapError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main_convert())

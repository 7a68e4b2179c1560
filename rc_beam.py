#!/usr/bin/env python3
"""
Betonarme kiriş kesiti -> DXF.

Usage:
    rc-beam beam.toml beam.dxf
    rc-beam beam.toml beam.dxf --polyline-outline -v
"""
import argparse
import logging
import sys
from typing import List, Optional

from beam_config import load_beam_spec
from beam_model import ConfigValidationError, FormatError
from dxf_out import write_beam

log = logging.getLogger("rc_beam.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rc-beam",
        description="Draw a reinforced-concrete beam cross-section as a DXF file.")
    parser.add_argument("input_file", help="beam description (TOML)")
    parser.add_argument("output_file", help="DXF file to write")
    parser.add_argument("--polyline-outline", action="store_true",
                        help="draw the concrete outline as one closed polyline")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        spec = load_beam_spec(args.input_file)
        log.info("height: %g, width: %g",
                 spec.dimension.beam_height, spec.dimension.beam_width)
        write_beam(spec, args.output_file, outline_as_polyline=args.polyline_outline)
    except (ConfigValidationError, FormatError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    log.info("DXF written: %s", args.output_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Entry point: python -m nbe2ivil --scanner NAME --timestamp TS --infile FILE.nbe"""
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

from . import __version__
from .core.config import ConfigLoadError, load_config
from .core.parser import parse_lines
from .ivil import writer

logger = logging.getLogger("nbe2ivil")

_REQUIRED_OPTIONS = ("scanner", "timestamp", "infile")
_TIMESTAMP_RE = re.compile(r"\d{14}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nbe2ivil",
        description="Convert NBE scanner output into IVIL XML",
    )
    p.add_argument("--scan", help="Scan name written to the addressee block")
    p.add_argument("--scanner", help="Name of the scanner that produced the file (required)")
    p.add_argument("--scannerversion", help="Version of the scanner")
    p.add_argument("--workspace", help="Workspace name; adds an addressee block when given")
    p.add_argument("--timestamp", help="Scan timestamp, YYYYMMDDhhmmss (required)")
    p.add_argument("--infile", help="NBE file to convert (required)")
    p.add_argument("--outfile", help="Output file (default: infile without .nbe plus .ivil.xml)")
    p.add_argument("--config", type=Path, help="YAML file with default option values")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (repeatable)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def default_outfile(infile: str) -> str:
    stem = infile[:-len(".nbe")] if infile.endswith(".nbe") else infile
    return stem + ".ivil.xml"


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(stream=sys.stderr, level=level, format="%(levelname)s: %(message)s", force=True)


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    _configure_logging(args.verbose)

    # Config file values fill in options not given on the command line
    if args.config:
        try:
            defaults = load_config(args.config)
        except ConfigLoadError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        for key, value in defaults.items():
            if getattr(args, key) is None:
                setattr(args, key, value)

    for option in _REQUIRED_OPTIONS:
        if not getattr(args, option):
            print(f"You must specify the --{option} option")
            parser.print_help(sys.stdout)
            return 2

    if not _TIMESTAMP_RE.fullmatch(args.timestamp):
        logger.warning("timestamp %r is not in YYYYMMDDhhmmss format", args.timestamp)

    outfile = args.outfile or default_outfile(args.infile)

    try:
        logger.info("Opening file %s for input", args.infile)
        infile = open(args.infile, encoding="utf-8", errors="replace", newline="\n")
    except OSError as e:
        print(f"error: cannot open input file {args.infile}: {e.strerror}", file=sys.stderr)
        return 1

    with infile:
        try:
            logger.info("Opening file %s for output", outfile)
            out = open(outfile, "w", encoding="utf-8")
        except OSError as e:
            print(f"error: cannot open output file {outfile}: {e.strerror}", file=sys.stderr)
            return 1

        with out:
            out.write(writer.xml_header())
            out.write(writer.xml_open())
            if args.workspace:
                out.write(writer.xml_add_addressee(args.workspace, args.scan))
            out.write(writer.xml_add_sender(args.scanner, args.scannerversion, args.timestamp))

            result = parse_lines(infile, args.scanner)
            logger.info(
                "Read %d lines: %d results records, %d ignored",
                result.lines_read, result.results_lines, result.ignored_lines,
            )
            if not result.findings:
                logger.warning("no results records found in %s", args.infile)

            out.write(writer.xml_add_findings(result.findings))
            out.write(writer.xml_close())

    logger.info("Wrote %d findings to %s", len(result.findings), outfile)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""CLI interface for dataset-masker.

Usage:
    # Mask an XML dataset with values and seeds from spreadsheets
    dataset-masker dataset.xml datatomask.xlsx seeds.xlsx outputname.xml

    # Reuse the mapping of an earlier run (VALUES and SEEDS are not read)
    dataset-masker dataset.xml - - outputname.xml --mapping maskedValuesOUT.txt

Exit status: 0 on success, 3 for bad arguments, 45 when the seed file cannot
be read, 1 for any other fatal error.
"""

from __future__ import annotations
import argparse
import logging
import sys
from datetime import timedelta
from pathlib import Path

from .config import create_pipeline, default_audit_file, load_config, load_from_yaml
from .errors import EXIT_FAILURE, EXIT_USAGE, MaskerError
from .vault import MaskMap

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with the usage status instead of 2."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="dataset-masker",
        description="Replace sensitive values in a line-based dataset with deterministic masks",
        epilog="example usage: > dataset-masker dataset.xml datatomask.xlsx seeds.xlsx outputname.xml",
    )
    parser.add_argument("dataset", help="Dataset to mask (XML or any line-based text)")
    parser.add_argument("values", help="Values to replace, without headers (xlsx/csv/txt)")
    parser.add_argument("seeds", help="Seed table: first character -> seed (xlsx/csv/txt)")
    parser.add_argument("output", help="Filename of the masked output")
    parser.add_argument("--audit-file", default=None,
                        help=f"Where to write 'token: mask' lines (default {default_audit_file()})")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--mapping", default=None,
                        help="Reuse an audit file from an earlier run instead of resolving")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def format_duration(d: timedelta) -> str:
    """Format as ``1m02.0045s`` or ``2.0500s`` (milliseconds, zero-padded to four digits)."""
    ms_total = round(d.total_seconds() * 1000)
    m, rest = divmod(ms_total, 60_000)
    s, ms = divmod(rest, 1000)
    if m > 0:
        return f"{m}m{s:02d}.{ms:04d}s"
    return f"{s}.{ms:04d}s"


def _check_inputs(args: argparse.Namespace) -> None:
    paths = [args.dataset] if args.mapping else [args.dataset, args.values]
    for p in paths:
        if not Path(p).expanduser().is_file():
            raise MaskerError("input file not found", path=p)


def run(args: argparse.Namespace) -> int:
    config = load_from_yaml(args.config) if args.config else load_config({})
    if args.audit_file:
        config["audit_file"] = args.audit_file
    if args.no_progress:
        config["progress"] = False
    pipeline = create_pipeline(config)

    _check_inputs(args)
    print("Command line arguments parsed...", file=sys.stderr)

    mask_map = None
    if args.mapping:
        mask_map = MaskMap.load_audit(args.mapping)
        print(f"Loaded {mask_map.size} masked values from {args.mapping}", file=sys.stderr)

    stats = pipeline.run(args.dataset, args.values, args.seeds, args.output, mask_map=mask_map)

    print(f"Masking complete, processed {stats.lines} lines", file=sys.stderr)
    print(f"Output in: {args.output}", file=sys.stderr)
    if stats.audit_path:
        print(f"Masked values in: {stats.audit_path}", file=sys.stderr)
    print(f"Took {format_duration(timedelta(seconds=stats.elapsed))}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return run(args)
    except MaskerError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except (OSError, ValueError) as exc:
        logger.error("masking aborted: %s", exc)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())

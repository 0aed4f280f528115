"""Input readers for the values-to-mask list and the seed table.

Both inputs are header-less sheets.  Spreadsheets (``.xlsx``, ``.xlsm``,
``.xls``) and CSV files are read with pandas; anything else is treated as
plain UTF-8 text, one value per line (seed files: ``key<TAB>seed``).
"""

from __future__ import annotations
import logging
from pathlib import Path

import pandas as pd

from .errors import SeedFileError, ValuesFileError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
_CHUNK = 32 * 1024


def _read_frame(path: Path) -> pd.DataFrame | None:
    """Read the first sheet as strings, or None for a plain text file."""
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(
            path, sheet_name=0, header=None, dtype=str, keep_default_na=False, na_filter=False,
        )
    if suffix == ".csv":
        return pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    return None


def read_values(path: str | Path) -> list[str]:
    """Read every non-empty cell, row by row, from the values file."""
    path = Path(path).expanduser()
    try:
        frame = _read_frame(path)
        if frame is None:
            with open(path, encoding="utf-8") as f:
                values = [line.rstrip("\r\n") for line in f]
        else:
            values = [
                cell
                for row in frame.itertuples(index=False)
                for cell in row
                if isinstance(cell, str)
            ]
    except (OSError, ValueError) as exc:
        raise ValuesFileError(f"cannot read values: {exc}", path=str(path)) from exc

    values = [v for v in values if v]
    logger.info("read %d values from %s", len(values), path)
    return values


def read_seeds(path: str | Path) -> dict[str, str]:
    """Read the seed table: first column is a single character, second its seed."""
    path = Path(path).expanduser()
    try:
        frame = _read_frame(path)
        if frame is None:
            with open(path, encoding="utf-8") as f:
                rows = [line.rstrip("\r\n").split("\t", 1) for line in f]
        else:
            rows = [list(row[:2]) for row in frame.itertuples(index=False)]
    except (OSError, ValueError) as exc:
        raise SeedFileError(f"cannot read seeds: {exc}", path=str(path)) from exc

    seeds: dict[str, str] = {}
    for lineno, row in enumerate(rows, start=1):
        key = row[0] if row else None
        if not isinstance(key, str) or not key:
            logger.warning("seed row %d has no key, skipped", lineno)
            continue
        if len(key) != 1:
            logger.warning("seed key %r on row %d is longer than one character", key, lineno)
        seed = row[1] if len(row) > 1 else ""
        seeds[key] = seed if isinstance(seed, str) else ""
    logger.info("read %d seeds from %s", len(seeds), path)
    return seeds


def count_lines(path: str | Path) -> int:
    """Count newline bytes in a file, reading it in fixed-size chunks."""
    count = 0
    with open(Path(path).expanduser(), "rb") as f:
        while chunk := f.read(_CHUNK):
            count += chunk.count(b"\n")
    return count

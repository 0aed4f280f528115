"""Streaming masker — rewrites a dataset line by line with a final MaskMap.

Each line goes through two steps, always in this order:

    <Description>Alice lives here</Description>
      →  <Description>MASKED_DESCRIPTION</Description>      (field blanking)
    AliceSmith works with Alice
      →  Y2 works with X1                                   (longest match first)

Blanked fields are left alone by the replacer, so nothing inside them is
masked a second time.

Usage:
    masker = StreamingMasker(mask_map)
    with open(src) as reader, open(dst, "w") as writer:
        lines = masker.mask_stream(reader, writer, total=count_lines(src))
"""

from __future__ import annotations
import logging
import re
from collections.abc import Mapping
from typing import IO, Iterable

from tqdm import tqdm

logger = logging.getLogger(__name__)

DEFAULT_FIELD_TAG = "Description"
DEFAULT_SENTINEL = "MASKED_DESCRIPTION"


class LongestFirstReplacer:
    """Single-pass multi-pattern replacer.

    Matches are leftmost and non-overlapping; where several keys match at
    the same position, the longest one wins.
    """

    __slots__ = ("_mapping", "_pattern")

    def __init__(self, mapping: Mapping[str, str]) -> None:
        keys = sorted((k for k in mapping if k), key=len, reverse=True)
        self._mapping = {k: mapping[k] for k in keys}
        # Alternation tries branches in order, so longest keys go first
        self._pattern = re.compile("|".join(map(re.escape, keys))) if keys else None

    def __len__(self) -> int:
        return len(self._mapping)

    def replace(self, text: str) -> str:
        if self._pattern is None or not text:
            return text
        return self._pattern.sub(lambda m: self._mapping[m.group()], text)


class StreamingMasker:
    """Applies field blanking and token replacement to a line stream."""

    __slots__ = ("_replacer", "_field", "_blanked")

    def __init__(
        self,
        mapping: Mapping[str, str],
        *,
        field_tag: str = DEFAULT_FIELD_TAG,
        sentinel: str = DEFAULT_SENTINEL,
    ) -> None:
        self._replacer = LongestFirstReplacer(mapping)
        tag = re.escape(field_tag)
        self._field = re.compile(f"<{tag}>(.*)</{tag}>")
        self._blanked = f"<{field_tag}>{sentinel}</{field_tag}>"

    def mask_line(self, line: str) -> str:
        """Blank the marked field, then mask everything outside it."""
        out_parts: list[str] = []
        pos = 0
        for m in self._field.finditer(line):
            out_parts.append(self._replacer.replace(line[pos:m.start()]))
            out_parts.append(self._blanked)
            pos = m.end()
        out_parts.append(self._replacer.replace(line[pos:]))
        return "".join(out_parts)

    def mask_lines(self, lines: Iterable[str]) -> Iterable[str]:
        for line in lines:
            yield self.mask_line(_strip_terminator(line))

    def mask_stream(
        self,
        reader: IO[str],
        writer: IO[str],
        *,
        total: int | None = None,
        progress: bool = True,
    ) -> int:
        """Mask ``reader`` into ``writer``, one ``\\n``-terminated line at a time.

        ``total`` is the expected line count, used only for the progress bar,
        which advances in one-percent steps.  Returns the number of lines
        written.  I/O errors propagate; a line is never skipped.
        """
        step = max((total or 0) // 100, 1)
        count = 0
        with tqdm(
            total=total,
            desc="Masking Progress",
            unit="line",
            disable=not progress,
        ) as bar:
            for masked in self.mask_lines(reader):
                writer.write(masked + "\n")
                count += 1
                if count % step == 0:
                    bar.update(step)
            bar.update(count - bar.n)
        logger.debug("masked %d lines", count)
        return count


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line

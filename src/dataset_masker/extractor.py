"""Value extractor — turns raw cell values into maskable tokens.

XML escapes the characters ``< > & ' "``, so a raw value containing them
never appears verbatim in the dataset.  Values are split around those
characters and each piece is masked on its own.  Line breaks split values
too: the dataset is masked one line at a time, so a multi-line cell can
only ever match piece by piece.
"""

from __future__ import annotations
import logging
import re
from typing import Iterable

from .types import Token

logger = logging.getLogger(__name__)

SPECIAL_CHARACTERS = re.compile(r"[<>&'\"\r\n]")
DEFAULT_MIN_LENGTH = 2  # pieces this short are punctuation remnants, not data


def split_value(value: str, *, min_length: int = DEFAULT_MIN_LENGTH) -> list[str]:
    """Split one raw value into candidate tokens.

    A value with no special characters is kept whole, however short.  When
    it does split, only pieces longer than ``min_length`` survive.
    """
    pieces = SPECIAL_CHARACTERS.split(value)
    if len(pieces) == 1:
        return pieces
    return [p for p in pieces if len(p) > min_length]


def extract_tokens(
    values: Iterable[object],
    *,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> dict[str, Token]:
    """Build the deduplicated token set from raw values.

    Blank values are ignored.  A value that cannot be turned into text is
    logged and skipped; extraction carries on with the rest.
    """
    tokens: dict[str, Token] = {}
    for raw in values:
        if raw is None:
            continue
        try:
            value = raw if isinstance(raw, str) else str(raw)
        except Exception as exc:
            logger.warning("skipping unreadable value %r: %s", raw, exc)
            continue
        if not value:
            continue
        for piece in split_value(value, min_length=min_length):
            if piece and piece not in tokens:
                tokens[piece] = Token.new(piece)
    logger.debug("extracted %d tokens", len(tokens))
    return tokens

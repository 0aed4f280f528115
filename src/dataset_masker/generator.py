"""Mask generator — one opaque, run-unique string per call.

Three mask families, told apart by shape:

    integers      77100377        delimiter, counter, delimiter
    generic       JX1004M         seed, counter, trailing "M"
    short         ~Ab~            two letters bracketed by punctuation

Every call consumes one value of a counter owned by the generator, so two
calls never share a counter.
"""

from __future__ import annotations
import re
import string

from .extractor import DEFAULT_MIN_LENGTH

DEFAULT_COUNTER_START = 1000
DEFAULT_INT_DELIMITER = 77

_INTEGER = re.compile(r"[+-]?[0-9]+")

# Letters for the short family, low digit first
SHORT_ALPHABET = string.ascii_uppercase + string.ascii_lowercase
SHORT_DELIMITERS = "-_~^]#},!="
SHORT_OVERFLOW_DELIMITER = "|"
SHORT_CAPACITY = len(SHORT_ALPHABET) ** 2 * len(SHORT_DELIMITERS)


def is_integer(text: str) -> bool:
    return _INTEGER.fullmatch(text) is not None


def integer_mask(counter: int, delimiter: int = DEFAULT_INT_DELIMITER) -> str:
    return f"{delimiter}{counter}{delimiter}"


def seeded_mask(seed: str, counter: int) -> str:
    return f"{seed}{counter}M"


def short_mask(counter: int) -> str:
    """Compact mask for very short text.

    Counters below ``SHORT_CAPACITY`` (27040) map to exactly four
    characters.  Past that the full counter is spelled in base-52 between
    ``|`` delimiters; those masks are five characters or longer, so the two
    shapes never collide.
    """
    if counter < 0:
        raise ValueError(f"counter must be non-negative, got {counter}")
    base = len(SHORT_ALPHABET)
    if counter < SHORT_CAPACITY:
        low = SHORT_ALPHABET[counter % base]
        high = SHORT_ALPHABET[(counter // base) % base]
        delim = SHORT_DELIMITERS[counter // (base * base)]
        return f"{delim}{low}{high}{delim}"

    digits: list[str] = []
    n = counter
    while n:
        n, rem = divmod(n, base)
        digits.append(SHORT_ALPHABET[rem])
    return SHORT_OVERFLOW_DELIMITER + "".join(digits) + SHORT_OVERFLOW_DELIMITER


class MaskGenerator:
    """Generates masks from a seed table and a run-scoped counter."""

    __slots__ = ("_seeds", "_counter", "_int_delimiter", "_min_length")

    def __init__(
        self,
        seeds: dict[str, str] | None = None,
        *,
        counter_start: int = DEFAULT_COUNTER_START,
        int_delimiter: int = DEFAULT_INT_DELIMITER,
        min_length: int = DEFAULT_MIN_LENGTH,
    ) -> None:
        if counter_start < 0:
            raise ValueError(f"counter_start must be non-negative, got {counter_start}")
        self._seeds = dict(seeds or {})
        self._counter = counter_start
        self._int_delimiter = int_delimiter
        self._min_length = min_length

    @property
    def counter(self) -> int:
        """The next counter value to be handed out."""
        return self._counter

    def seed_for(self, text: str) -> str:
        return self._seeds.get(text[:1], "")

    def generate(self, text: str, *, integers: bool = True) -> str:
        """Return a fresh mask for ``text`` and advance the counter.

        With ``integers=False`` numeric text is masked like any other text;
        the resolver uses this for pieces of a partially resolved token.
        """
        counter = self._counter
        self._counter += 1
        if integers and is_integer(text):
            return integer_mask(counter, self._int_delimiter)
        if len(text) > self._min_length:
            return seeded_mask(self.seed_for(text), counter)
        return short_mask(counter)

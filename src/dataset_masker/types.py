"""Core types."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Pending:
    """Literal text that has not been masked yet."""
    text: str


@dataclass(frozen=True, slots=True)
class Resolved:
    """A final mask, either generated for this token or cascaded from a shorter one."""
    mask: str


Fragment = Union[Pending, Resolved]


@dataclass(frozen=True, slots=True)
class Token:
    """A maskable unit of sensitive text and its pending representation.

    Tokens are immutable: substituting a resolved mask returns a new Token.
    """
    value: str
    fragments: tuple[Fragment, ...] = ()

    @classmethod
    def new(cls, value: str) -> "Token":
        return cls(value, (Pending(value),) if value else ())

    @property
    def resolved(self) -> bool:
        return all(isinstance(f, Resolved) for f in self.fragments)

    @property
    def text(self) -> str:
        """Current form: pending text and masks joined in order."""
        return "".join(
            f.text if isinstance(f, Pending) else f.mask for f in self.fragments
        )

    def substitute(self, needle: str, mask: str) -> "Token":
        """Replace every occurrence of ``needle`` in pending fragments with ``mask``.

        Resolved fragments are never searched.  Occurrences are found leftmost
        first and do not overlap.
        """
        if not needle:
            return self
        out: list[Fragment] = []
        changed = False
        for frag in self.fragments:
            if isinstance(frag, Pending) and needle in frag.text:
                out.extend(_split_pending(frag.text, needle, mask))
                changed = True
            else:
                out.append(frag)
        if not changed:
            return self
        return Token(self.value, tuple(out))


def _split_pending(text: str, needle: str, mask: str) -> list[Fragment]:
    parts: list[Fragment] = []
    rest = text
    while True:
        idx = rest.find(needle)
        if idx == -1:
            break
        if idx > 0:
            parts.append(Pending(rest[:idx]))
        parts.append(Resolved(mask))
        rest = rest[idx + len(needle):]
    if rest:
        parts.append(Pending(rest))
    return parts


@dataclass(slots=True)
class RunStats:
    """Result of a masking run."""
    lines: int
    tokens: int
    elapsed: float                              # seconds
    audit_path: str | None = None

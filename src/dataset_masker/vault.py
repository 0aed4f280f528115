"""MaskMap — the final token → mask mapping of one resolution run.

Design goals:
  - Immutable: a token's mask never changes once it is in the map
  - Auditable: the whole map can be written out and read back
  - Fast: dict lookups only, no scanning
"""

from __future__ import annotations
from collections.abc import Iterator, Mapping
from pathlib import Path

# Audit file line format: "token: mask"
_AUDIT_SEP = ": "


class MaskMap(Mapping[str, str]):
    """Read-only token → mask store, iterated shortest token first."""

    __slots__ = ("_token_to_mask",)

    def __init__(self, pairs: Mapping[str, str] | None = None) -> None:
        items = sorted((pairs or {}).items(), key=lambda kv: len(kv[0]))
        self._token_to_mask: dict[str, str] = dict(items)    # "Alice" → "JX1004M"

    # ------------------------------------------------------------------
    # Mapping API
    # ------------------------------------------------------------------

    def __getitem__(self, token: str) -> str:
        return self._token_to_mask[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self._token_to_mask)

    def __len__(self) -> int:
        return len(self._token_to_mask)

    def __repr__(self) -> str:
        return f"MaskMap({len(self)} tokens)"

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def lookup_token(self, token: str) -> str | None:
        """Look up the mask for a token."""
        return self._token_to_mask.get(token)

    @property
    def size(self) -> int:
        return len(self._token_to_mask)

    def dump(self) -> dict[str, str]:
        """Return a copy of the token→mask mapping."""
        return dict(self._token_to_mask)

    # ------------------------------------------------------------------
    # Audit file
    # ------------------------------------------------------------------

    def audit_lines(self) -> Iterator[str]:
        for token, mask in self._token_to_mask.items():
            yield f"{token}{_AUDIT_SEP}{mask}"

    def write_audit(self, path: str | Path) -> Path:
        """Write every token and its mask, one per line, shortest token first."""
        path = Path(path).expanduser()
        if path.parent != Path("."):
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for line in self.audit_lines():
                f.write(line + "\n")
        return path

    @classmethod
    def load_audit(cls, path: str | Path) -> "MaskMap":
        """Read a map back from an audit file written by ``write_audit``.

        Lines are split at the last ``": "`` so tokens may contain it.
        """
        pairs: dict[str, str] = {}
        with open(Path(path).expanduser(), encoding="utf-8", newline="") as f:
            for lineno, raw in enumerate(f, start=1):
                line = raw.rstrip("\r\n")
                if not line:
                    continue
                token, sep, mask = line.rpartition(_AUDIT_SEP)
                if not sep:
                    raise ValueError(f"{path}:{lineno}: not a 'token: mask' line")
                pairs[token] = mask
        return cls(pairs)

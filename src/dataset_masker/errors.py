"""Exception hierarchy.

Every fatal error carries the process exit status the CLI terminates with.
"""

from __future__ import annotations


EXIT_FAILURE = 1
EXIT_USAGE = 3
EXIT_SEEDS = 45


class MaskerError(Exception):
    """Base class for all dataset-masker errors."""

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class ConfigurationError(MaskerError):
    """Invalid arguments or configuration values."""

    exit_code = EXIT_USAGE


class ValuesFileError(MaskerError):
    """The values-to-mask input could not be read."""


class SeedFileError(MaskerError):
    """The seed table could not be read."""

    exit_code = EXIT_SEEDS


class UnresolvedTokenError(MaskerError):
    """A token finished resolution with pending text left in it.

    This is a defect in the resolver, never an input problem.
    """

    def __init__(self, tokens: list[str]) -> None:
        preview = ", ".join(repr(t) for t in tokens[:5])
        super().__init__(f"{len(tokens)} token(s) left unresolved: {preview}")
        self.tokens = tokens

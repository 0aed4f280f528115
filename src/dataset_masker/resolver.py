"""Mask resolver — the main API.  Turns a token set into a final MaskMap.

Usage:
    from dataset_masker import MaskResolver

    resolver = MaskResolver()
    masks = resolver.resolve(["Alice", "AliceSmith"], seeds={"A": "JX"})
    masks["Alice"]        # "JX1000M"
    masks["AliceSmith"]   # "JX1000M1001M"  (embeds the mask of "Alice")

Tokens are resolved shortest first.  A token can only contain strictly
shorter tokens, so by the time a token is reached every token inside it
already has its final mask, and that mask has been cascaded into it.
"""

from __future__ import annotations
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .errors import UnresolvedTokenError
from .extractor import DEFAULT_MIN_LENGTH, extract_tokens
from .generator import (
    DEFAULT_COUNTER_START,
    DEFAULT_INT_DELIMITER,
    MaskGenerator,
    is_integer,
)
from .types import Pending, Resolved, Token
from .vault import MaskMap

logger = logging.getLogger(__name__)


@dataclass
class ResolverConfig:
    """Configuration for the MaskResolver."""
    min_length: int = DEFAULT_MIN_LENGTH          # text this short gets a short mask
    int_delimiter: int = DEFAULT_INT_DELIMITER    # wraps the counter in integer masks
    counter_start: int = DEFAULT_COUNTER_START


class MaskResolver:
    """Assigns every token a mask, keeping shorter tokens' masks inside longer ones."""

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or ResolverConfig()

    def new_generator(self, seeds: Mapping[str, str] | None) -> MaskGenerator:
        return MaskGenerator(
            dict(seeds or {}),
            counter_start=self.config.counter_start,
            int_delimiter=self.config.int_delimiter,
            min_length=self.config.min_length,
        )

    def resolve(
        self,
        tokens: Mapping[str, Token] | Iterable[str],
        seeds: Mapping[str, str] | None = None,
    ) -> MaskMap:
        """Resolve a token set into its final mapping.

        ``tokens`` is either the output of ``extract_tokens`` or plain raw
        values, which are extracted first.  Each call uses its own counter,
        so the same input and seeds always give the same map.
        """
        if not isinstance(tokens, Mapping):
            tokens = extract_tokens(tokens, min_length=self.config.min_length)

        generator = self.new_generator(seeds)
        order = sorted(tokens, key=len)
        pending: dict[str, Token] = {value: tokens[value] for value in order}
        resolved: dict[str, str] = {}

        logger.info("resolving %d tokens", len(order))
        for i, value in enumerate(order):
            token = pending[value]
            if is_integer(value):
                # numbers are masked whole, never split around shorter tokens
                token = Token(value, (Resolved(generator.generate(value)),))
            else:
                token = _mask_fragments(token, generator)
            pending[value] = token
            mask = token.text
            resolved[value] = mask

            if not value:
                continue
            cascaded = 0
            for later in order[i + 1:]:
                before = pending[later]
                after = before.substitute(value, mask)
                if after is not before:
                    pending[later] = after
                    cascaded += 1
            if cascaded:
                logger.debug("cascaded %r into %d longer tokens", value, cascaded)

        leftover = [v for v, t in pending.items() if not t.resolved]
        if leftover:
            raise UnresolvedTokenError(leftover)

        logger.info("resolved %d tokens, next counter %d", len(resolved), generator.counter)
        return MaskMap(resolved)


def _mask_fragments(token: Token, generator: MaskGenerator) -> Token:
    """Mask each remaining pending fragment of a token."""
    fragments = []
    for frag in token.fragments:
        if isinstance(frag, Pending):
            if not frag.text:
                continue
            frag = Resolved(generator.generate(frag.text, integers=False))
        fragments.append(frag)
    return Token(token.value, tuple(fragments))

"""One masking run, end to end.

Usage:
    pipeline = MaskingPipeline.create()
    stats = pipeline.run("dataset.xml", "values.xlsx", "seeds.xlsx", "masked.xml")

The mask map is fully resolved and written to the audit file before the
dataset is opened, so streaming always works from the final mapping.
"""

from __future__ import annotations
import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .extractor import extract_tokens
from .loaders import count_lines, read_seeds, read_values
from .resolver import MaskResolver, ResolverConfig
from .streaming import DEFAULT_FIELD_TAG, DEFAULT_SENTINEL, StreamingMasker
from .types import RunStats
from .vault import MaskMap

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_FILE = "maskedValuesOUT.txt"


@dataclass
class MaskingPipeline:
    """Resolver plus streaming settings for a run."""

    resolver: MaskResolver = field(default_factory=MaskResolver)
    field_tag: str = DEFAULT_FIELD_TAG
    sentinel: str = DEFAULT_SENTINEL
    audit_path: str | None = DEFAULT_AUDIT_FILE
    progress: bool = True

    @classmethod
    def create(cls, *, config: ResolverConfig | None = None, **kwargs) -> "MaskingPipeline":
        """Factory — builds a pipeline around a fresh resolver."""
        return cls(resolver=MaskResolver(config), **kwargs)

    def build_mapping(
        self,
        values: Iterable[object],
        seeds: Mapping[str, str] | None = None,
    ) -> MaskMap:
        """Extract tokens from raw values and resolve them."""
        tokens = extract_tokens(values, min_length=self.resolver.config.min_length)
        return self.resolver.resolve(tokens, seeds)

    def write_audit(self, mask_map: MaskMap) -> str | None:
        if not self.audit_path:
            return None
        path = mask_map.write_audit(self.audit_path)
        logger.info("wrote %d mappings to %s", mask_map.size, path)
        return str(path)

    def masker(self, mask_map: Mapping[str, str]) -> StreamingMasker:
        return StreamingMasker(mask_map, field_tag=self.field_tag, sentinel=self.sentinel)

    def mask_file(
        self,
        dataset_path: str | Path,
        output_path: str | Path,
        mask_map: Mapping[str, str],
    ) -> int:
        """Stream the dataset through the masker into the output file."""
        total = count_lines(dataset_path)
        logger.info("the file is %d lines long", total)
        masker = self.masker(mask_map)
        with open(dataset_path, encoding="utf-8", newline="\n") as reader, \
                open(output_path, "w", encoding="utf-8", newline="") as writer:
            return masker.mask_stream(reader, writer, total=total, progress=self.progress)

    def run(
        self,
        dataset_path: str | Path,
        values_path: str | Path | None,
        seeds_path: str | Path | None,
        output_path: str | Path,
        *,
        mask_map: MaskMap | None = None,
    ) -> RunStats:
        """Resolve (unless ``mask_map`` is given), write the audit file, mask the dataset."""
        start = time.monotonic()
        if mask_map is None:
            seeds = read_seeds(seeds_path)
            values = read_values(values_path)
            mask_map = self.build_mapping(values, seeds)
        audit = self.write_audit(mask_map)
        lines = self.mask_file(dataset_path, output_path, mask_map)
        return RunStats(
            lines=lines,
            tokens=mask_map.size,
            elapsed=time.monotonic() - start,
            audit_path=audit,
        )

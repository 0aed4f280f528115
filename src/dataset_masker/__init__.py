"""Dataset Masker — deterministic, nesting-preserving masking for line-based datasets."""

from .extractor import extract_tokens
from .generator import MaskGenerator
from .resolver import MaskResolver, ResolverConfig
from .vault import MaskMap
from .streaming import LongestFirstReplacer, StreamingMasker
from .pipeline import MaskingPipeline
from .config import create_pipeline, load_config, load_from_yaml
from .types import Pending, Resolved, Token, RunStats
from .errors import MaskerError, SeedFileError, UnresolvedTokenError, ValuesFileError

__all__ = [
    "extract_tokens",
    "MaskGenerator",
    "MaskResolver", "ResolverConfig",
    "MaskMap",
    "LongestFirstReplacer", "StreamingMasker",
    "MaskingPipeline",
    "create_pipeline", "load_config", "load_from_yaml",
    "Pending", "Resolved", "Token", "RunStats",
    "MaskerError", "SeedFileError", "UnresolvedTokenError", "ValuesFileError",
]
__version__ = "0.1.0"

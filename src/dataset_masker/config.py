"""YAML/dict config loader for dataset-masker.

Supports loading from a YAML file or a plain dict (for embedding in a
larger config).

Example YAML:

    dataset_masker:
      min_length: 2              # shorter pieces get a 4-character mask
      int_delimiter: 77
      counter_start: 1000
      field_tag: Description     # <Description>...</Description> is always blanked
      sentinel: MASKED_DESCRIPTION
      audit_file: maskedValuesOUT.txt
      progress: true
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .extractor import DEFAULT_MIN_LENGTH
from .generator import DEFAULT_COUNTER_START, DEFAULT_INT_DELIMITER
from .pipeline import DEFAULT_AUDIT_FILE, MaskingPipeline
from .resolver import ResolverConfig
from .streaming import DEFAULT_FIELD_TAG, DEFAULT_SENTINEL


def default_audit_file() -> str:
    return os.environ.get("DATASET_MASKER_AUDIT_FILE", DEFAULT_AUDIT_FILE)


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "dataset_masker" key or flat
    if "dataset_masker" in data:
        data = data["dataset_masker"] or {}

    cfg = {
        "min_length": data.get("min_length", DEFAULT_MIN_LENGTH),
        "int_delimiter": data.get("int_delimiter", DEFAULT_INT_DELIMITER),
        "counter_start": data.get("counter_start", DEFAULT_COUNTER_START),
        "field_tag": data.get("field_tag", DEFAULT_FIELD_TAG),
        "sentinel": data.get("sentinel", DEFAULT_SENTINEL),
        "audit_file": data.get("audit_file", default_audit_file()),
        "progress": bool(data.get("progress", True)),
    }
    _validate(cfg)
    return cfg


def _validate(cfg: dict[str, Any]) -> None:
    for key in ("min_length", "int_delimiter", "counter_start"):
        if not isinstance(cfg[key], int) or isinstance(cfg[key], bool):
            raise ConfigurationError(f"{key} must be an integer, got {cfg[key]!r}")
    if cfg["min_length"] < 1:
        raise ConfigurationError(f"min_length must be >= 1, got {cfg['min_length']}")
    if cfg["counter_start"] < 0:
        raise ConfigurationError(f"counter_start must be >= 0, got {cfg['counter_start']}")
    if not cfg["field_tag"] or not isinstance(cfg["field_tag"], str):
        raise ConfigurationError("field_tag must be a non-empty string")
    if not isinstance(cfg["sentinel"], str):
        raise ConfigurationError("sentinel must be a string")


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    try:
        with open(Path(path).expanduser(), encoding="utf-8") as f:
            return load_config(yaml.safe_load(f))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot load config: {exc}", path=str(path)) from exc


def create_pipeline(config: dict[str, Any] | None = None) -> MaskingPipeline:
    """Create a fully configured pipeline from a config dict."""
    cfg = load_config(config) if config is None or "min_length" not in config else config

    return MaskingPipeline.create(
        config=ResolverConfig(
            min_length=cfg["min_length"],
            int_delimiter=cfg["int_delimiter"],
            counter_start=cfg["counter_start"],
        ),
        field_tag=cfg["field_tag"],
        sentinel=cfg["sentinel"],
        audit_path=cfg["audit_file"],
        progress=cfg["progress"],
    )

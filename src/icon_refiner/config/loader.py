"""Configuration loader utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import (
    Config,
    ContourConfig,
    DetectionConfig,
    LineConfig,
    LoggingConfig,
    ModelConfig,
    OverlayConfig,
    PipelineConfig,
)


def _normalize_path(path: Path | str) -> Path:
    return path if isinstance(path, Path) else Path(path)


def _load_raw_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    suffix = config_path.suffix.lower()
    with config_path.open("r", encoding="utf-8") as stream:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(stream) or {}
        if suffix == ".json":
            return json.load(stream)
        raise ValueError(f"Unsupported config format: {suffix}")


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")
    return dict(value)


def load_config(config_path: Path | str) -> Config:
    """Load configuration file and construct Config dataclass."""

    config_path = _normalize_path(config_path)
    raw = _load_raw_config(config_path)
    return config_from_dict(raw, base_dir=config_path.parent)


def config_from_dict(raw: Dict[str, Any], base_dir: Path | None = None) -> Config:
    """Build Config from an already-parsed mapping; relative paths resolve against base_dir."""

    base_dir = _normalize_path(base_dir) if base_dir is not None else Path.cwd()

    model_raw = _section(raw, "model")
    # Normalize weights path relative to config file for predictable behaviour.
    weights_path = model_raw.get("weights_path")
    if weights_path:
        model_raw["weights_path"] = (base_dir / weights_path).resolve()
    labels = model_raw.get("labels")
    if labels and not str(labels).startswith(("http://", "https://")):
        model_raw["labels"] = str((base_dir / labels).resolve())
    model = ModelConfig(**model_raw)

    logging_raw = _section(raw, "logging")
    log_path = logging_raw.get("filepath")
    if log_path:
        logging_raw["filepath"] = (base_dir / log_path).resolve()
    logging = LoggingConfig(**logging_raw)

    return Config(
        model=model,
        detection=DetectionConfig(**_section(raw, "detection")),
        contour=ContourConfig(**_section(raw, "contour")),
        lines=LineConfig(**_section(raw, "lines")),
        pipeline=PipelineConfig(**_section(raw, "pipeline")),
        overlay=OverlayConfig(**_section(raw, "overlay")),
        logging=logging,
    )

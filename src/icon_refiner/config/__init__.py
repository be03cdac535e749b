"""Gói cấu hình phục vụ pipeline tinh chỉnh icon."""

from .loader import config_from_dict, load_config
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

__all__ = [
    "Config",
    "ContourConfig",
    "DetectionConfig",
    "LineConfig",
    "LoggingConfig",
    "ModelConfig",
    "OverlayConfig",
    "PipelineConfig",
    "config_from_dict",
    "load_config",
]

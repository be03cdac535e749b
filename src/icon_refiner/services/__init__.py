"""Tầng dịch vụ: điều phối pipeline và vẽ lớp phủ kết quả."""

from .pipeline import IconPipeline, run_pipeline
from .renderer import draw_overlay

__all__ = ["IconPipeline", "draw_overlay", "run_pipeline"]

"""Định nghĩa các thực thể cốt lõi dùng trong hệ thống."""

from .detection import BoundingBox, Detection
from .region import Mask, Region
from .result import PipelineReport, PipelineResult, SkippedDetection
from .shape import Defect, LineSegment, Point, ShapeAnalysis

__all__ = [
    "BoundingBox",
    "Defect",
    "Detection",
    "LineSegment",
    "Mask",
    "PipelineReport",
    "PipelineResult",
    "Point",
    "Region",
    "ShapeAnalysis",
    "SkippedDetection",
]

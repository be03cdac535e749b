"""Kết quả đầu ra của pipeline cho từng phát hiện."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .detection import Detection
from .region import Mask, Region
from .shape import Defect, LineSegment, ShapeAnalysis


@dataclass(frozen=True)
class PipelineResult:
    """Gói kết quả của một phát hiện: mặt nạ, bao lồi, khuyết lồi và đoạn thẳng."""

    detection: Detection
    region: Region
    mask: Mask
    shape: ShapeAnalysis
    lines: List[LineSegment]

    @property
    def contour(self):
        return self.shape.contour

    @property
    def hull(self):
        return self.shape.hull

    @property
    def defects(self) -> List[Defect]:
        return self.shape.defects

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detection": self.detection.to_dict(),
            "region": {"x": self.region.x, "y": self.region.y, "w": self.region.width, "h": self.region.height},
            "threshold": self.mask.threshold,
            "hull": [list(p.as_tuple()) for p in self.hull],
            "defects": [d.to_dict() for d in self.defects],
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class SkippedDetection:
    """Phát hiện bị bỏ qua kèm lý do (chẩn đoán, không phải lỗi dừng pipeline)."""

    index: int
    detection: Detection
    reason: str
    error: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "detection": self.detection.to_dict(), "reason": self.reason}


@dataclass
class PipelineReport:
    """Tổng hợp một lần chạy: kết quả thành công và các phát hiện bị bỏ qua."""

    results: List[PipelineResult] = field(default_factory=list)
    skipped: List[SkippedDetection] = field(default_factory=list)
    inference_time_ms: float = 0.0

    def __len__(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inference_time_ms": round(self.inference_time_ms, 2),
            "results": [r.to_dict() for r in self.results],
            "skipped": [s.to_dict() for s in self.skipped],
        }

"""Chiến lược loại bỏ hộp chồng lấn sau khi lọc theo ngưỡng điểm."""

from __future__ import annotations

import abc
from typing import List, Sequence

from icon_refiner.config.models import DetectionConfig
from icon_refiner.core.entities import Detection


class SuppressionStrategy(abc.ABC):
    @abc.abstractmethod
    def apply(self, detections: Sequence[Detection]) -> List[Detection]:
        """Trả về các phát hiện được giữ lại, theo thứ tự đầu vào."""


class NoSuppression(SuppressionStrategy):
    """Giữ nguyên mọi hộp, kể cả hộp chồng lấn nhau."""

    def apply(self, detections: Sequence[Detection]) -> List[Detection]:
        return list(detections)


class NonMaxSuppression(SuppressionStrategy):
    """NMS tham lam: duyệt theo điểm giảm dần, loại hộp có IoU >= ngưỡng với hộp đã giữ.

    Kết quả vẫn giữ thứ tự giải mã ban đầu.
    """

    def __init__(self, iou_threshold: float = 0.5, class_aware: bool = True) -> None:
        self.iou_threshold = iou_threshold
        self.class_aware = class_aware

    def apply(self, detections: Sequence[Detection]) -> List[Detection]:
        order = sorted(range(len(detections)), key=lambda i: detections[i].score, reverse=True)
        kept: List[int] = []
        for idx in order:
            candidate = detections[idx]
            if any(self._overlaps(detections[k], candidate) for k in kept):
                continue
            kept.append(idx)
        return [detections[i] for i in sorted(kept)]

    def _overlaps(self, kept: Detection, candidate: Detection) -> bool:
        if self.class_aware and kept.class_id != candidate.class_id:
            return False
        return kept.bbox.iou(candidate.bbox) >= self.iou_threshold


def build_suppression(config: DetectionConfig) -> SuppressionStrategy:
    if config.suppression == "nms":
        return NonMaxSuppression(config.iou_threshold, class_aware=config.class_aware)
    return NoSuppression()

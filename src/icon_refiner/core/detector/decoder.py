"""Giải mã output thô của mô hình thành danh sách Detection theo tọa độ pixel."""

from __future__ import annotations

import logging
from typing import List, Optional

from icon_refiner.core.entities import BoundingBox, Detection

from .base import RawDetections
from .labels import LabelTable
from .suppression import NoSuppression, SuppressionStrategy

logger = logging.getLogger("detector.decoder")

DEFAULT_SCORE_THRESHOLD = 0.25


class DetectionDecoder:
    """Lọc ứng viên theo ngưỡng điểm, đổi hộp chuẩn hóa sang pixel và gán nhãn."""

    def __init__(
        self,
        label_table: LabelTable,
        score_threshold: float = DEFAULT_SCORE_THRESHOLD,
        suppression: Optional[SuppressionStrategy] = None,
        clamp_to_image: bool = True,
    ) -> None:
        self._labels = label_table
        self._score_threshold = score_threshold
        self._suppression = suppression or NoSuppression()
        self._clamp = clamp_to_image

    def decode(self, raw: RawDetections, width: int, height: int) -> List[Detection]:
        detections: List[Detection] = []
        for i in range(len(raw)):
            score = float(raw.scores[i])
            if not score > self._score_threshold:
                continue
            y_min, x_min, y_max, x_max = (float(v) for v in raw.boxes[i])
            if x_max <= x_min or y_max <= y_min:
                # Inverted or zero-size box: nothing to refine.
                logger.debug("Dropping degenerate box %s for candidate %d", raw.boxes[i].tolist(), i)
                continue
            bbox = BoundingBox(
                x=x_min * width,
                y=y_min * height,
                width=(x_max - x_min) * width,
                height=(y_max - y_min) * height,
            )
            if self._clamp:
                bbox = _clamp_box(bbox, width, height)
            class_id = int(round(float(raw.class_ids[i])))
            detections.append(
                Detection(class_id=class_id, label=self._labels.lookup(class_id), score=score, bbox=bbox)
            )

        kept = self._suppression.apply(detections)
        logger.debug(
            "Decoded %d/%d candidates above %.2f (%d after suppression)",
            len(detections),
            len(raw),
            self._score_threshold,
            len(kept),
        )
        return kept


def _clamp_box(bbox: BoundingBox, width: int, height: int) -> BoundingBox:
    x1 = min(max(bbox.x, 0.0), float(width))
    y1 = min(max(bbox.y, 0.0), float(height))
    x2 = min(max(bbox.x2, 0.0), float(width))
    y2 = min(max(bbox.y2, 0.0), float(height))
    if x2 <= x1 or y2 <= y1:
        # No overlap with the image: leave it for the region stage to reject.
        logger.warning("Detection box %s lies outside the %dx%d image", bbox, width, height)
        return bbox
    if (x1, y1, x2, y2) == (bbox.x, bbox.y, bbox.x2, bbox.y2):
        return bbox
    return BoundingBox(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

"""Vẽ lớp phủ minh họa: hộp, nhãn, bao lồi, khuyết lồi và đoạn thẳng."""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from icon_refiner.config.models import OverlayConfig
from icon_refiner.core.entities import PipelineReport, PipelineResult

BOX_COLOR = (255, 255, 0)  # cyan (BGR)
TEXT_COLOR = (0, 0, 0)
HULL_COLOR = (0, 0, 255)
DEFECT_CHORD_COLOR = (255, 0, 0)
DEFECT_POINT_COLOR = (255, 255, 255)
LINE_COLOR = (0, 200, 0)
SKIPPED_COLOR = (0, 165, 255)


def draw_overlay(image: np.ndarray, report: PipelineReport, options: Optional[OverlayConfig] = None) -> np.ndarray:
    """Trả về bản sao BGR của ``image`` đã vẽ kết quả; ảnh gốc không bị thay đổi."""
    options = options or OverlayConfig()
    annotated = _as_bgr(image)

    for result in report.results:
        _draw_shape(annotated, result, options)

    for skipped in report.skipped:
        if options.draw_boxes:
            bbox = skipped.detection.bbox
            cv2.rectangle(
                annotated,
                (int(bbox.x), int(bbox.y)),
                (int(bbox.x2), int(bbox.y2)),
                SKIPPED_COLOR,
                1,
            )

    # Captions last so they stay on top.
    if options.draw_boxes:
        for result in report.results:
            _draw_box_and_caption(annotated, result, options)
    return annotated


def _as_bgr(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image.copy()


def _draw_shape(canvas: np.ndarray, result: PipelineResult, options: OverlayConfig) -> None:
    dx, dy = result.region.x, result.region.y

    if options.draw_hulls and len(result.hull) >= 2:
        hull = np.array([p.offset(dx, dy).as_tuple() for p in result.hull], dtype=np.int32)
        cv2.polylines(canvas, [hull.reshape(-1, 1, 2)], True, HULL_COLOR, 1, cv2.LINE_AA)

    if options.draw_lines:
        for line in result.lines:
            cv2.line(canvas, line.start.offset(dx, dy).as_tuple(), line.end.offset(dx, dy).as_tuple(), LINE_COLOR, 1)

    if options.draw_defects:
        for defect in result.defects:
            cv2.line(
                canvas,
                defect.start.offset(dx, dy).as_tuple(),
                defect.end.offset(dx, dy).as_tuple(),
                DEFECT_CHORD_COLOR,
                2,
                cv2.LINE_AA,
            )
            cv2.circle(canvas, defect.far_point.offset(dx, dy).as_tuple(), 3, DEFECT_POINT_COLOR, -1)


def _draw_box_and_caption(canvas: np.ndarray, result: PipelineResult, options: OverlayConfig) -> None:
    bbox = result.detection.bbox
    x, y = int(bbox.x), int(bbox.y)
    cv2.rectangle(canvas, (x, y), (int(bbox.x2), int(bbox.y2)), BOX_COLOR, options.box_thickness)

    caption = result.detection.caption()
    (text_w, text_h), baseline = cv2.getTextSize(caption, cv2.FONT_HERSHEY_SIMPLEX, options.font_scale, 1)
    cv2.rectangle(canvas, (x, y), (x + text_w + 4, y + text_h + baseline + 4), BOX_COLOR, -1)
    cv2.putText(
        canvas,
        caption,
        (x + 2, y + text_h + 2),
        cv2.FONT_HERSHEY_SIMPLEX,
        options.font_scale,
        TEXT_COLOR,
        1,
        cv2.LINE_AA,
    )

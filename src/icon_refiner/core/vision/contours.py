"""Trích đường viền ngoài, bao lồi và các khuyết lồi của mặt nạ nhị phân.

Đường viền được dò bằng ``cv2.findContours`` với phân cấp hai mức
(``RETR_CCOMP``: biên ngoài và lỗ bên trong); chỉ biên ngoài được xét.
Bao lồi trả về dưới dạng chỉ số vào đường viền, sắp tăng dần, nên các đỉnh
bao lồi luôn là dãy con của đường viền và thỏa điều kiện đơn điệu mà
``cv2.convexityDefects`` yêu cầu. Độ sâu khuyết được đổi từ số cố định
(nhân 256) của OpenCV sang pixel dạng số thực.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import cv2
import numpy as np

from icon_refiner.config.models import ContourSelection
from icon_refiner.core.entities import Defect, Mask, Point, ShapeAnalysis
from icon_refiner.core.errors import NoContourFoundError

logger = logging.getLogger("vision.contours")

DEPTH_FIXED_POINT_SCALE = 256.0


def find_outer_contours(mask: Mask) -> List[np.ndarray]:
    """Các biên ngoài theo thứ tự dò, mỗi biên có dạng ``[N, 2]`` int32."""
    if cv2.countNonZero(mask.pixels) == 0:
        raise NoContourFoundError("Mask has no foreground pixels")
    contours, hierarchy = cv2.findContours(mask.pixels, cv2.RETR_CCOMP, cv2.CHAIN_APPROX_SIMPLE)
    if not contours:
        raise NoContourFoundError("No contour traced in mask")
    # hierarchy[0][i] = [next, previous, first_child, parent]
    outer = [c.reshape(-1, 2) for c, h in zip(contours, hierarchy[0]) if h[3] < 0]
    return outer


def select_contour(contours: Sequence[np.ndarray], selection: ContourSelection = "first") -> np.ndarray:
    if not contours:
        raise NoContourFoundError("No outer contour to analyze")
    if selection == "largest":
        return max(contours, key=lambda c: cv2.contourArea(c.reshape(-1, 1, 2)))
    if selection == "first":
        return contours[0]
    raise ValueError(f"Unsupported contour selection: {selection}")


def convex_hull_indices(contour: np.ndarray) -> np.ndarray:
    if len(contour) < 3:
        return np.arange(len(contour), dtype=np.int32)
    hull = cv2.convexHull(contour.reshape(-1, 1, 2), clockwise=False, returnPoints=False)
    return np.sort(hull.reshape(-1)).astype(np.int32)


def convexity_defects(contour: np.ndarray, hull_indices: np.ndarray, min_depth: float = 0.0) -> List[Defect]:
    if len(contour) < 4 or len(hull_indices) < 3:
        return []
    raw = cv2.convexityDefects(contour.reshape(-1, 1, 2), hull_indices.reshape(-1, 1))
    if raw is None:
        return []

    def point(idx: int) -> Point:
        return Point(int(contour[idx][0]), int(contour[idx][1]))

    defects: List[Defect] = []
    for start_idx, end_idx, far_idx, fixpt_depth in raw.reshape(-1, 4):
        depth = float(fixpt_depth) / DEPTH_FIXED_POINT_SCALE
        if depth < min_depth:
            continue
        defects.append(
            Defect(
                start_index=int(start_idx),
                end_index=int(end_idx),
                far_index=int(far_idx),
                start=point(start_idx),
                end=point(end_idx),
                far_point=point(far_idx),
                depth=depth,
            )
        )
    return defects


def analyze_contour(
    mask: Mask,
    selection: ContourSelection = "first",
    min_defect_depth: float = 0.0,
) -> ShapeAnalysis:
    """Phân tích một đường viền của mặt nạ: bao lồi và khuyết lồi."""
    outer = find_outer_contours(mask)
    contour = select_contour(outer, selection)
    hull_indices = convex_hull_indices(contour)
    defects = convexity_defects(contour, hull_indices, min_defect_depth)
    if len(outer) > 1:
        logger.debug("Mask has %d outer contours; analyzing the %s one", len(outer), selection)
    return ShapeAnalysis(
        contour=contour,
        hull_indices=tuple(int(i) for i in hull_indices),
        defects=defects,
    )

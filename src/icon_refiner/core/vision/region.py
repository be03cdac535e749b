"""Cắt vùng ảnh theo bounding box thành một bộ đệm riêng."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from icon_refiner.core.entities import BoundingBox, Region
from icon_refiner.core.errors import EmptyRegionError


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def pixel_bounds(bbox: BoundingBox, width: int, height: int) -> Tuple[int, int, int, int]:
    """Quy đổi hộp số thực sang (x0, y0, x1, y1) nguyên, đã cắt theo biên ảnh."""
    x0 = _round_half_up(bbox.x)
    y0 = _round_half_up(bbox.y)
    x1 = x0 + _round_half_up(bbox.width)
    y1 = y0 + _round_half_up(bbox.height)
    x0, x1 = (min(max(v, 0), width) for v in (x0, x1))
    y0, y1 = (min(max(v, 0), height) for v in (y0, y1))
    return x0, y0, x1, y1


def extract_region(image: np.ndarray, bbox: BoundingBox) -> Region:
    """Sao chép trực tiếp (không nội suy) các điểm ảnh trong ``bbox``.

    Vùng trả về không dùng chung bộ nhớ với ``image`` vì các bước sau ghi đè lên nó.
    """
    height, width = image.shape[:2]
    if not all(math.isfinite(v) for v in (bbox.x, bbox.y, bbox.width, bbox.height)):
        raise EmptyRegionError(f"Bounding box has non-finite coordinates: {bbox}")
    x0, y0, x1, y1 = pixel_bounds(bbox, width, height)
    if x1 <= x0 or y1 <= y0:
        raise EmptyRegionError(f"Bounding box {bbox} has no area inside the {width}x{height} image")
    return Region(pixels=np.array(image[y0:y1, x0:x1], copy=True), x=x0, y=y0)

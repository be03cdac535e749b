"""Mô tả hình dạng: điểm, khuyết lồi, đoạn thẳng và kết quả phân tích đường viền."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def offset(self, dx: int, dy: int) -> "Point":
        """Dời điểm, dùng khi đổi từ tọa độ vùng sang tọa độ ảnh nguồn."""
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Defect:
    """Chỗ lõm giữa hai đỉnh bao lồi.

    ``start_index``/``end_index``/``far_index`` là chỉ số trong đường viền;
    ``depth`` là khoảng cách (pixel, số thực) từ ``far_point`` tới dây cung bao lồi.
    """

    start_index: int
    end_index: int
    far_index: int
    start: Point
    end: Point
    far_point: Point
    depth: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_index": self.start_index,
            "end_index": self.end_index,
            "far_point": list(self.far_point.as_tuple()),
            "depth": round(self.depth, 3),
        }


@dataclass(frozen=True)
class LineSegment:
    """Đoạn thẳng theo tọa độ cục bộ của vùng ảnh."""

    start: Point
    end: Point

    def length(self) -> float:
        return float(np.hypot(self.end.x - self.start.x, self.end.y - self.start.y))

    def to_dict(self) -> Dict[str, Any]:
        return {"start": list(self.start.as_tuple()), "end": list(self.end.as_tuple())}


@dataclass(frozen=True)
class ShapeAnalysis:
    """Đường viền được chọn, bao lồi (chỉ số + điểm) và danh sách khuyết lồi."""

    contour: np.ndarray
    hull_indices: Tuple[int, ...]
    defects: List[Defect] = field(default_factory=list)

    @property
    def hull(self) -> List[Point]:
        return [Point(int(self.contour[i][0]), int(self.contour[i][1])) for i in self.hull_indices]

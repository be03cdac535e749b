"""Các thực thể liên quan tới kết quả nhận diện."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class BoundingBox:
    """Hình chữ nhật căn theo trục, gốc tại góc trên-trái, đơn vị pixel ảnh nguồn."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    def area(self) -> float:
        """Diện tích hộp; hộp suy biến có diện tích 0."""
        return max(0.0, self.width) * max(0.0, self.height)

    def iou(self, other: "BoundingBox") -> float:
        """Tỉ lệ giao trên hợp (IoU) giữa hai hộp, nằm trong [0, 1]."""
        iw = min(self.x2, other.x2) - max(self.x, other.x)
        ih = min(self.y2, other.y2) - max(self.y, other.y)
        if iw <= 0 or ih <= 0:
            return 0.0
        inter = iw * ih
        return inter / (self.area() + other.area() - inter + 1e-9)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.width, "h": self.height}


@dataclass(frozen=True)
class Detection:
    """Một kết quả nhận diện duy nhất do bộ giải mã trả về."""

    class_id: int
    label: str
    score: float
    bbox: BoundingBox

    def caption(self) -> str:
        """Chuỗi hiển thị dạng ``label 97.50%``."""
        return f"{self.label} {100.0 * self.score:.2f}%"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_id": self.class_id,
            "label": self.label,
            "score": round(float(self.score), 4),
            "bbox": self.bbox.to_dict(),
        }

"""Vùng ảnh cắt ra từ ảnh nguồn và mặt nạ nhị phân tương ứng."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Region:
    """Bản sao điểm ảnh trong một bounding box; (x, y) là gốc trong ảnh nguồn."""

    pixels: np.ndarray
    x: int
    y: int

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


@dataclass(frozen=True)
class Mask:
    """Mặt nạ một kênh: tiền cảnh 255, nền 0. ``threshold`` là ngưỡng Otsu đã dùng."""

    pixels: np.ndarray
    threshold: float

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def foreground_ratio(self) -> float:
        """Tỉ lệ điểm ảnh tiền cảnh trên toàn mặt nạ."""
        if self.pixels.size == 0:
            return 0.0
        return float(np.count_nonzero(self.pixels)) / float(self.pixels.size)

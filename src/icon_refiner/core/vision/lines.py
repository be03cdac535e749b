"""Dò cạnh (Canny) và trích đoạn thẳng bằng biến đổi Hough xác suất."""

from __future__ import annotations

import logging
from typing import List, Optional

import cv2
import numpy as np

from icon_refiner.config.models import LineConfig
from icon_refiner.core.entities import LineSegment, Point, Region

from .binarize import to_gray

logger = logging.getLogger("vision.lines")


def detect_edges(region: Region, config: Optional[LineConfig] = None) -> np.ndarray:
    """Nhị phân hóa với ngưỡng cố định rồi chạy Canny; trả về bản đồ cạnh uint8."""
    config = config or LineConfig()
    gray = to_gray(region.pixels)
    _, binary = cv2.threshold(gray, config.binary_threshold, config.binary_max, cv2.THRESH_BINARY)
    return cv2.Canny(binary, config.canny_low, config.canny_high)


def extract_lines(region: Region, config: Optional[LineConfig] = None) -> List[LineSegment]:
    config = config or LineConfig()
    edges = detect_edges(region, config)
    if cv2.countNonZero(edges) == 0:
        return []
    raw = cv2.HoughLinesP(
        edges,
        rho=config.hough_rho,
        theta=np.deg2rad(config.hough_theta_deg),
        threshold=config.hough_threshold,
        minLineLength=config.min_line_length,
        maxLineGap=config.max_line_gap,
    )
    if raw is None:
        return []
    segments = [
        LineSegment(start=Point(int(x1), int(y1)), end=Point(int(x2), int(y2)))
        for x1, y1, x2, y2 in raw.reshape(-1, 4)
    ]
    logger.debug("Extracted %d line segments from %dx%d region", len(segments), region.width, region.height)
    return segments

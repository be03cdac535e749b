"""Nhị phân hóa vùng ảnh bằng ngưỡng Otsu (đảo: vùng tối là tiền cảnh)."""

from __future__ import annotations

import logging

import cv2
import numpy as np

from icon_refiner.core.entities import Mask, Region

logger = logging.getLogger("vision.binarize")


def to_gray(pixels: np.ndarray) -> np.ndarray:
    """Chuyển ảnh BGR/BGRA/xám sang ảnh xám uint8 bằng trọng số cố định của OpenCV."""
    if pixels.dtype != np.uint8:
        pixels = np.clip(pixels, 0, 255).astype(np.uint8)
    if pixels.ndim == 2:
        return pixels.copy()
    channels = pixels.shape[2]
    if channels == 1:
        return pixels[:, :, 0].copy()
    if channels == 4:
        return cv2.cvtColor(pixels, cv2.COLOR_BGRA2GRAY)
    if channels == 3:
        return cv2.cvtColor(pixels, cv2.COLOR_BGR2GRAY)
    raise ValueError(f"Unsupported channel count: {channels}")


def binarize(region: Region) -> Mask:
    gray = to_gray(region.pixels)
    threshold, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV | cv2.THRESH_OTSU)
    # Uniform regions give threshold 0 and a flat mask; callers accept that.
    logger.debug("Otsu threshold %.1f for %dx%d region", threshold, region.width, region.height)
    return Mask(pixels=binary, threshold=float(threshold))

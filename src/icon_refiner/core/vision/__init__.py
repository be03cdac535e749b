"""Các bước xử lý ảnh cho từng vùng phát hiện."""

from .binarize import binarize, to_gray
from .contours import analyze_contour, convex_hull_indices, convexity_defects, find_outer_contours
from .lines import detect_edges, extract_lines
from .region import extract_region, pixel_bounds

__all__ = [
    "analyze_contour",
    "binarize",
    "convex_hull_indices",
    "convexity_defects",
    "detect_edges",
    "extract_lines",
    "extract_region",
    "find_outer_contours",
    "pixel_bounds",
    "to_gray",
]

"""Giao diện mô hình, bảng nhãn và bộ giải mã phát hiện.

``YoloModel`` nằm ở ``icon_refiner.core.detector.yolo_detector`` và chỉ được
import khi cần để tránh nạp Ultralytics không cần thiết.
"""

from .base import InferenceModel, RawDetections
from .decoder import DEFAULT_SCORE_THRESHOLD, DetectionDecoder
from .graph_model import GraphOutputModel, to_input_tensor
from .labels import LabelEntry, LabelTable, load_label_table
from .suppression import NoSuppression, NonMaxSuppression, SuppressionStrategy, build_suppression

__all__ = [
    "DEFAULT_SCORE_THRESHOLD",
    "DetectionDecoder",
    "GraphOutputModel",
    "InferenceModel",
    "LabelEntry",
    "LabelTable",
    "NoSuppression",
    "NonMaxSuppression",
    "RawDetections",
    "SuppressionStrategy",
    "build_suppression",
    "load_label_table",
    "to_input_tensor",
]

"""Định nghĩa giao diện mô hình và cấu trúc output thô của bộ phát hiện."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from icon_refiner.core.errors import InferenceError

from .labels import LabelTable

# Vị trí các tensor trong output của đồ thị mô hình đã export (hợp đồng cố định).
SCORES_OUTPUT_INDEX = 5
BOXES_OUTPUT_INDEX = 6
CLASSES_OUTPUT_INDEX = 7
MIN_GRAPH_OUTPUTS = 8


@dataclass(frozen=True)
class RawDetections:
    """Output thô của một lần suy luận, đã bỏ trục batch.

    ``boxes`` có dạng ``[N, 4]`` chuẩn hóa về [0, 1] theo thứ tự
    ``(yMin, xMin, yMax, xMax)``; ``scores`` và ``class_ids`` có dạng ``[N]``.
    """

    boxes: np.ndarray
    scores: np.ndarray
    class_ids: np.ndarray
    inference_time_ms: float = 0.0

    def __post_init__(self) -> None:
        boxes = np.asarray(self.boxes, dtype=np.float64)
        scores = np.asarray(self.scores, dtype=np.float64).reshape(-1)
        class_ids = np.asarray(self.class_ids).reshape(-1)
        if boxes.size == 0:
            boxes = boxes.reshape(0, 4)
        if boxes.ndim != 2 or boxes.shape[1] != 4:
            raise InferenceError(f"Boxes must have shape [N, 4], got {boxes.shape}")
        if not (len(boxes) == len(scores) == len(class_ids)):
            raise InferenceError(
                f"Misaligned outputs: {len(boxes)} boxes, {len(scores)} scores, {len(class_ids)} class ids"
            )
        object.__setattr__(self, "boxes", boxes)
        object.__setattr__(self, "scores", scores)
        object.__setattr__(self, "class_ids", class_ids)

    def __len__(self) -> int:
        return len(self.scores)

    @classmethod
    def empty(cls) -> "RawDetections":
        return cls(boxes=np.zeros((0, 4)), scores=np.zeros(0), class_ids=np.zeros(0, dtype=np.int64))

    @classmethod
    def from_graph_outputs(cls, outputs: Sequence[np.ndarray], inference_time_ms: float = 0.0) -> "RawDetections":
        """Đọc scores/boxes/classes từ các chỉ số 5/6/7 của output đồ thị mô hình."""
        if outputs is None or len(outputs) < MIN_GRAPH_OUTPUTS:
            count = 0 if outputs is None else len(outputs)
            raise InferenceError(f"Model returned {count} outputs, expected at least {MIN_GRAPH_OUTPUTS}")

        scores = np.asarray(outputs[SCORES_OUTPUT_INDEX])
        boxes = np.asarray(outputs[BOXES_OUTPUT_INDEX])
        classes = np.asarray(outputs[CLASSES_OUTPUT_INDEX])

        if scores.ndim == 2 and scores.shape[0] == 1:
            scores = scores[0]
        if boxes.ndim == 3 and boxes.shape[0] == 1:
            boxes = boxes[0]
        if classes.ndim == 2 and classes.shape[0] == 1:
            classes = classes[0]
        if scores.ndim != 1 or classes.ndim != 1:
            raise InferenceError(
                f"Unexpected output shapes: scores {scores.shape}, classes {classes.shape}"
            )
        return cls(boxes=boxes, scores=scores, class_ids=classes, inference_time_ms=inference_time_ms)


class InferenceModel(abc.ABC):
    """Lớp cơ sở cho mọi mô hình phát hiện icon."""

    def warmup(self) -> None:
        """Nạp trọng số, cấp phát bộ nhớ; mặc định không làm gì."""

    @abc.abstractmethod
    def infer(self, image: np.ndarray) -> RawDetections:
        """Chạy suy luận trên ảnh BGR đầu vào và trả về output thô."""

    def label_table(self) -> Optional[LabelTable]:
        """Bảng nhãn đi kèm mô hình (nếu có)."""
        return None

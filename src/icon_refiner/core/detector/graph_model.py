"""Bọc một hàm suy luận trả về output dạng đồ thị (tám tensor) thành InferenceModel."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Optional, Sequence

import cv2
import numpy as np

from icon_refiner.core.errors import InferenceError

from .base import InferenceModel, RawDetections
from .labels import LabelTable

logger = logging.getLogger("detector.graph")

GraphFn = Callable[[np.ndarray], Sequence[np.ndarray]]


def to_input_tensor(image: np.ndarray) -> np.ndarray:
    """Ảnh BGR/BGRA/gray -> tensor int32 ``[1, H, W, 3]`` thứ tự kênh RGB."""
    if image.ndim == 2:
        rgb = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    elif image.shape[2] == 4:
        rgb = cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    else:
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    return np.expand_dims(rgb.astype(np.int32), axis=0)


class GraphOutputModel(InferenceModel):
    """Mô hình có hàm suy luận trả về danh sách output, scores/boxes/classes ở chỉ số 5/6/7."""

    def __init__(self, fn: GraphFn, labels: Optional[LabelTable] = None) -> None:
        self._fn = fn
        self._labels = labels

    def infer(self, image: np.ndarray) -> RawDetections:
        tensor = to_input_tensor(image)
        start = perf_counter()
        try:
            outputs = self._fn(tensor)
        except InferenceError:
            raise
        except Exception as exc:
            raise InferenceError(f"Model inference failed: {exc}") from exc
        elapsed_ms = (perf_counter() - start) * 1000.0
        raw = RawDetections.from_graph_outputs(outputs, inference_time_ms=elapsed_ms)
        logger.debug("Graph model produced %d candidates (%.1f ms)", len(raw), elapsed_ms)
        return raw

    def label_table(self) -> Optional[LabelTable]:
        return self._labels

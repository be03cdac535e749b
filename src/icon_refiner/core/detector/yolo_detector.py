"""Triển khai mô hình phát hiện icon dựa trên thư viện Ultralytics."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional

import numpy as np

try:
    from ultralytics import YOLO
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise ImportError(
        "Ultralytics package is required for YoloModel. Install with `pip install ultralytics`."
    ) from exc

from icon_refiner.config.models import ModelConfig
from icon_refiner.core.errors import InferenceError

from .base import InferenceModel, RawDetections
from .labels import LabelTable

logger = logging.getLogger("detector.yolo")


class YoloModel(InferenceModel):
    """Mô hình YOLO; thiết bị chạy (cpu/cuda/mps) lấy từ cấu hình, không dùng trạng thái toàn cục."""

    def __init__(self, config: ModelConfig) -> None:
        """Nhận cấu hình mô hình và chuẩn bị trường nội bộ."""
        self._config = config
        self._model: YOLO | None = None
        self._labels: Optional[LabelTable] = None

    def warmup(self) -> None:
        """Nạp trọng số YOLO một lần trước khi suy luận."""
        if self._model is not None:
            return
        weights = self._config.resolved_weights()
        logger.info("Loading YOLO weights from %s (device=%s)", weights, self._config.device)
        try:
            self._model = YOLO(str(weights))
        except Exception as exc:
            raise InferenceError(f"Unable to load model weights from {weights}: {exc}") from exc
        names = getattr(self._model, "names", None)
        if isinstance(names, dict):
            self._labels = LabelTable.from_names(names)
        elif isinstance(names, (list, tuple)):
            self._labels = LabelTable.from_names(dict(enumerate(names)))

    def infer(self, image: np.ndarray) -> RawDetections:
        """Chạy suy luận YOLO và trả về hộp chuẩn hóa theo thứ tự (yMin, xMin, yMax, xMax)."""
        self.warmup()
        assert self._model is not None

        half = self._config.half and self._config.device != "cpu"
        predict_kwargs = dict(
            source=image,
            conf=self._config.confidence_floor,
            device=self._config.device,
            max_det=self._config.max_det,
            half=half,
            iou=self._config.nms_iou,
            verbose=False,
        )
        if self._config.image_size:
            predict_kwargs["imgsz"] = self._config.image_size

        start = perf_counter()
        try:
            results = self._model.predict(**predict_kwargs)
        except Exception as exc:
            raise InferenceError(f"YOLO inference failed: {exc}") from exc
        elapsed_ms = (perf_counter() - start) * 1000.0

        boxes = getattr(results[0], "boxes", None) if results else None
        if boxes is None or boxes.xyxyn is None or len(boxes) == 0:
            return RawDetections.empty()

        xyxyn = boxes.xyxyn.cpu().numpy()
        raw = RawDetections(
            boxes=xyxyn[:, [1, 0, 3, 2]],
            scores=boxes.conf.cpu().numpy(),
            class_ids=boxes.cls.cpu().numpy().astype(int),
            inference_time_ms=elapsed_ms,
        )
        logger.debug("YOLO inference produced %d candidates (%.1f ms)", len(raw), elapsed_ms)
        return raw

    def label_table(self) -> Optional[LabelTable]:
        self.warmup()
        return self._labels

"""Điều phối pipeline: giải mã phát hiện rồi tinh chỉnh hình dạng từng vùng.

Lỗi trước bước xử lý từng phát hiện (suy luận, bảng nhãn, giải mã) là lỗi
dừng cả lần chạy và được ném ra cho bên gọi. Lỗi trong phạm vi một phát hiện
(``RefinementError``, ``cv2.error``) chỉ làm phát hiện đó bị bỏ qua và được
ghi lại trong ``PipelineReport.skipped``.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from icon_refiner.config.models import Config
from icon_refiner.core.detector import (
    DetectionDecoder,
    InferenceModel,
    LabelTable,
    RawDetections,
    build_suppression,
    load_label_table,
)
from icon_refiner.core.entities import Detection, PipelineReport, PipelineResult, SkippedDetection
from icon_refiner.core.errors import LabelTableError, RefinementError
from icon_refiner.core.vision import analyze_contour, binarize, extract_lines, extract_region

logger = logging.getLogger("services.pipeline")

LabelSource = Union[LabelTable, str, Path, None]
_Outcome = Union[PipelineResult, SkippedDetection]


class IconPipeline:
    """Chạy tuần tự: decode -> cắt vùng -> nhị phân hóa -> đường viền -> đoạn thẳng."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self._config = config or Config()

    @property
    def config(self) -> Config:
        return self._config

    # Public API ---------------------------------------------------------------

    def run(
        self,
        image: np.ndarray,
        model: InferenceModel,
        label_table: Optional[LabelTable] = None,
    ) -> PipelineReport:
        """Suy luận trên ``image`` rồi tinh chỉnh mọi phát hiện vượt ngưỡng."""
        labels = self._resolve_labels(label_table, model)
        raw = model.infer(image)
        return self.refine(image, raw, labels)

    async def arun(self, image: np.ndarray, model: InferenceModel, labels: LabelSource = None) -> PipelineReport:
        """Chờ nạp bảng nhãn và suy luận (ngoài event loop), sau đó xử lý đồng bộ đến hết."""
        if isinstance(labels, (str, Path)):
            timeout_s = self._config.model.labels_timeout_s
            label_table = await asyncio.to_thread(load_label_table, labels, timeout_s)
        else:
            # Config URL fetch or model warmup may block.
            label_table = await asyncio.to_thread(self._resolve_labels, labels, model)
        raw = await asyncio.to_thread(model.infer, image)
        return self.refine(image, raw, label_table)

    def refine(self, image: np.ndarray, raw: RawDetections, label_table: LabelTable) -> PipelineReport:
        """Giải mã output thô và tinh chỉnh từng phát hiện; không còn điểm chờ nào."""
        source = _read_only_view(image)
        height, width = source.shape[:2]
        decoder = DetectionDecoder(
            label_table,
            score_threshold=self._config.detection.score_threshold,
            suppression=build_suppression(self._config.detection),
            clamp_to_image=self._config.detection.clamp_to_image,
        )
        detections = decoder.decode(raw, width, height)
        logger.info("Refining %d detections (inference %.1f ms)", len(detections), raw.inference_time_ms)

        report = PipelineReport(inference_time_ms=raw.inference_time_ms)
        for outcome in self._process_all(source, detections):
            if isinstance(outcome, SkippedDetection):
                report.skipped.append(outcome)
            else:
                report.results.append(outcome)
        logger.info("Pipeline finished: %d refined, %d skipped", len(report.results), len(report.skipped))
        return report

    def refine_detection(self, image: np.ndarray, detection: Detection) -> PipelineResult:
        """Các bước cho một phát hiện; mọi bộ đệm đều cục bộ trong lời gọi này."""
        region = extract_region(image, detection.bbox)
        mask = binarize(region)
        shape = analyze_contour(
            mask,
            selection=self._config.contour.selection,
            min_defect_depth=self._config.contour.min_defect_depth,
        )
        lines = extract_lines(region, self._config.lines)
        return PipelineResult(detection=detection, region=region, mask=mask, shape=shape, lines=lines)

    # Internal -----------------------------------------------------------------

    def _process_all(self, image: np.ndarray, detections: Sequence[Detection]) -> List[_Outcome]:
        jobs: List[Tuple[int, Detection]] = list(enumerate(detections))
        workers = min(self._config.pipeline.max_workers, len(jobs))
        if workers <= 1:
            return [self._process_one(image, index, detection) for index, detection in jobs]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="IconRefine") as pool:
            return list(pool.map(lambda job: self._process_one(image, *job), jobs))

    def _process_one(self, image: np.ndarray, index: int, detection: Detection) -> _Outcome:
        try:
            return self.refine_detection(image, detection)
        except (RefinementError, cv2.error) as exc:
            logger.warning("Skipping detection #%d (%s): %s", index, detection.label, exc)
            return SkippedDetection(index=index, detection=detection, reason=str(exc), error=exc)

    def _resolve_labels(self, label_table: Optional[LabelTable], model: InferenceModel) -> LabelTable:
        if label_table is not None:
            return label_table
        if self._config.model.labels:
            return load_label_table(self._config.model.labels, self._config.model.labels_timeout_s)
        table = model.label_table()
        if table is None:
            raise LabelTableError("No label table configured and the model does not provide one")
        return table


def _read_only_view(image: np.ndarray) -> np.ndarray:
    view = image.view()
    view.setflags(write=False)
    return view


def run_pipeline(
    image: np.ndarray,
    model: InferenceModel,
    label_table: Optional[LabelTable] = None,
    config: Optional[Config] = None,
) -> PipelineReport:
    """Hàm tiện ích: ``IconPipeline(config).run(image, model, label_table)``."""
    return IconPipeline(config).run(image, model, label_table)

"""Điểm vào dòng lệnh: phát hiện icon trên một ảnh chụp màn hình và tinh chỉnh hình dạng."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Sequence

import cv2

from icon_refiner.config import Config, ModelConfig, load_config
from icon_refiner.core.detector import InferenceModel, LabelTable, load_label_table
from icon_refiner.core.entities import PipelineReport
from icon_refiner.core.errors import IconRefinerError
from icon_refiner.infra import configure_logging
from icon_refiner.services import IconPipeline, draw_overlay

logger = logging.getLogger("app.main")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Phân tích tham số dòng lệnh."""
    parser = argparse.ArgumentParser(description="Detect UI icons and refine their outlines.")
    parser.add_argument("image", type=Path, help="Ảnh chụp màn hình cần phân tích.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Đường dẫn tới file cấu hình YAML/JSON (mặc định: cấu hình dựng sẵn).",
    )
    parser.add_argument("--labels", type=str, default=None, help="File JSON hoặc URL của bảng nhãn.")
    parser.add_argument("--weights", type=Path, default=None, help="Ghi đè đường dẫn trọng số mô hình.")
    parser.add_argument("--output", type=Path, default=None, help="Lưu ảnh có lớp phủ kết quả.")
    parser.add_argument("--json", dest="json_path", type=Path, default=None, help="Lưu tóm tắt kết quả dạng JSON.")
    parser.add_argument("--window", type=str, default="Icon Refiner", help="Tên cửa sổ hiển thị OpenCV.")
    parser.add_argument("--no-window", action="store_true", help="Không mở cửa sổ OpenCV.")
    parser.add_argument("--verbose", action="store_true", help="Ghi log mức DEBUG.")
    return parser.parse_args(argv)


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    model = config.model
    if args.weights is not None:
        model = replace(model, weights_path=args.weights.expanduser().resolve())
    if args.labels is not None:
        model = replace(model, labels=args.labels)
    return replace(config, model=model)


ModelFactory = Callable[[ModelConfig], InferenceModel]


def _yolo_model(config: ModelConfig) -> InferenceModel:
    # Ultralytics is only imported when a real model is needed.
    from icon_refiner.core.detector.yolo_detector import YoloModel

    return YoloModel(config)


def bootstrap(config: Config, args: argparse.Namespace, model_factory: ModelFactory = _yolo_model) -> int:
    """Nạp ảnh và mô hình, chạy pipeline, xuất kết quả. Trả về mã thoát."""
    image = cv2.imread(str(args.image), cv2.IMREAD_COLOR)
    if image is None:
        logger.error("Unable to load image at %s", args.image)
        return 1
    logger.info("Loaded %s (%dx%d)", args.image, image.shape[1], image.shape[0])

    pipeline = IconPipeline(config)
    try:
        model = model_factory(config.model)
        labels: Optional[LabelTable] = None
        if config.model.labels:
            labels = load_label_table(config.model.labels, config.model.labels_timeout_s)
        model.warmup()
        report = pipeline.run(image, model, labels)
    except IconRefinerError as exc:
        logger.error("Pipeline run failed: %s", exc)
        return 1

    _log_report(report)

    if args.json_path is not None:
        args.json_path.parent.mkdir(parents=True, exist_ok=True)
        args.json_path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        logger.info("Summary written to %s", args.json_path)

    annotated = draw_overlay(image, report, config.overlay)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(args.output), annotated):
            logger.error("Failed to write annotated image to %s", args.output)
            return 1
        logger.info("Annotated image written to %s", args.output)

    if not args.no_window:
        _show(args.window, annotated)
    return 0


def _log_report(report: PipelineReport) -> None:
    for result in report.results:
        logger.info(
            "%s at (%.0f, %.0f, %.0f, %.0f): %d hull points, %d defects, %d lines",
            result.detection.caption(),
            result.detection.bbox.x,
            result.detection.bbox.y,
            result.detection.bbox.width,
            result.detection.bbox.height,
            len(result.hull),
            len(result.defects),
            len(result.lines),
        )
    for skipped in report.skipped:
        logger.warning("Skipped detection #%d (%s): %s", skipped.index, skipped.detection.label, skipped.reason)


def _show(window_name: str, image) -> None:
    try:
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
        cv2.imshow(window_name, image)
    except cv2.error as exc:
        logger.warning("OpenCV GUI unavailable (%s). Skipping display.", exc)
        return
    try:
        while True:
            key = cv2.waitKey(50) & 0xFF
            if key in (27, ord("q")):
                logger.info("Exit requested by user input.")
                break
            if cv2.getWindowProperty(window_name, cv2.WND_PROP_VISIBLE) < 1:
                break
    except KeyboardInterrupt:
        logger.info("Interrupted by user (Ctrl+C).")
    finally:
        cv2.destroyAllWindows()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Nạp cấu hình, cấu hình logging và chạy bootstrap."""
    args = parse_args(argv)
    try:
        config = load_config(args.config) if args.config else Config()
        config = _apply_overrides(config, args)
    except (OSError, ValueError, TypeError) as exc:
        print(f"Unable to read configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.logging, level_override="DEBUG" if args.verbose else None)
    if args.config:
        logger.info("Configuration loaded from %s", args.config)
    sys.exit(bootstrap(config, args))


if __name__ == "__main__":
    main()

"""Định nghĩa các dataclass cấu hình cho pipeline tinh chỉnh icon."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

SuppressionMode = Literal["none", "nms"]
ContourSelection = Literal["first", "largest"]


@dataclass(frozen=True)
class ModelConfig:
    """Cấu hình cho mô hình phát hiện YOLO và nguồn bảng nhãn."""

    weights_path: Path = Path("weights/icon_detector.pt")
    device: Literal["cpu", "cuda", "mps"] = "cpu"
    image_size: Optional[int] = None
    confidence_floor: float = 0.05
    max_det: int = 100
    half: bool = False
    labels: Optional[str] = None
    labels_timeout_s: float = 10.0
    # IoU passed to Ultralytics predict; 1.0 turns its built-in NMS into a no-op
    # so overlap handling stays with detection.suppression.
    nms_iou: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.nms_iou <= 1.0:
            raise ValueError("model.nms_iou must be in (0, 1]")

    def resolved_weights(self) -> Path:
        """Chuẩn hóa đường dẫn tới file trọng số trên hệ thống."""
        path = self.weights_path if isinstance(self.weights_path, Path) else Path(self.weights_path)
        return path.expanduser().resolve()


@dataclass(frozen=True)
class DetectionConfig:
    """Ngưỡng điểm tin cậy và chiến lược loại bỏ hộp chồng lấn."""

    score_threshold: float = 0.25
    suppression: SuppressionMode = "none"
    iou_threshold: float = 0.5
    class_aware: bool = True
    clamp_to_image: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.score_threshold <= 1.0:
            raise ValueError(f"score_threshold must be within [0, 1], got {self.score_threshold}")
        if self.suppression not in ("none", "nms"):
            raise ValueError(f"Unsupported suppression mode: {self.suppression}")
        if not 0.0 < self.iou_threshold <= 1.0:
            raise ValueError(f"iou_threshold must be within (0, 1], got {self.iou_threshold}")


@dataclass(frozen=True)
class ContourConfig:
    """Chọn đường viền để phân tích và ngưỡng lọc nhiễu cho khuyết lồi."""

    selection: ContourSelection = "first"
    min_defect_depth: float = 0.0

    def __post_init__(self) -> None:
        if self.selection not in ("first", "largest"):
            raise ValueError(f"Unsupported contour selection: {self.selection}")
        if self.min_defect_depth < 0:
            raise ValueError("min_defect_depth must be non-negative")


@dataclass(frozen=True)
class LineConfig:
    """Ngưỡng cố định cho bước nhị phân hóa, Canny và Hough xác suất."""

    binary_threshold: int = 127
    binary_max: int = 255
    canny_low: float = 50.0
    canny_high: float = 150.0
    hough_rho: float = 1.0
    hough_theta_deg: float = 1.0
    hough_threshold: int = 10
    min_line_length: float = 0.0
    max_line_gap: float = 0.0

    def __post_init__(self) -> None:
        if self.canny_low > self.canny_high:
            raise ValueError("canny_low must not exceed canny_high")
        if self.hough_threshold < 1:
            raise ValueError("hough_threshold must be at least 1")


@dataclass(frozen=True)
class PipelineConfig:
    """Số luồng xử lý song song các phát hiện (1 = tuần tự)."""

    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")


@dataclass(frozen=True)
class OverlayConfig:
    """Tùy chọn vẽ lớp phủ minh họa kết quả."""

    draw_boxes: bool = True
    draw_hulls: bool = True
    draw_defects: bool = True
    draw_lines: bool = True
    box_thickness: int = 4
    font_scale: float = 0.5


@dataclass(frozen=True)
class LoggingConfig:
    """Thiết lập ghi log: mức độ, đường dẫn, dung lượng xoay vòng."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    filepath: Path = Path("logs/icon_refiner.log")
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    console: bool = True

    def resolved_path(self) -> Path:
        """Trả về đường dẫn log tuyệt đối sau khi mở rộng ~."""
        return Path(self.filepath).expanduser().resolve()


@dataclass(frozen=True)
class Config:
    """Đối tượng cấu hình gốc tập hợp mọi nhóm thiết lập của ứng dụng."""

    model: ModelConfig = field(default_factory=ModelConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    contour: ContourConfig = field(default_factory=ContourConfig)
    lines: LineConfig = field(default_factory=LineConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

"""icon_refiner: phát hiện icon trên ảnh chụp giao diện và tinh chỉnh hình dạng từng vùng."""

from .core.entities import Detection, PipelineReport, PipelineResult
from .services import IconPipeline, run_pipeline

__all__ = ["Detection", "IconPipeline", "PipelineReport", "PipelineResult", "run_pipeline"]

__version__ = "0.1.0"

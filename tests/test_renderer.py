"""Tests for the cosmetic overlay renderer."""

import numpy as np

from icon_refiner.config import OverlayConfig
from icon_refiner.core.entities import BoundingBox, Detection, PipelineReport, SkippedDetection
from icon_refiner.services import IconPipeline, draw_overlay


def test_overlay_is_a_modified_copy(screenshot, graph_model_factory):
    report = IconPipeline().run(screenshot, graph_model_factory([[0.1, 0.1, 0.2, 0.2]], [0.9], [1]))
    before = screenshot.copy()

    annotated = draw_overlay(screenshot, report)

    assert annotated.shape == screenshot.shape
    np.testing.assert_array_equal(screenshot, before)
    assert not np.array_equal(annotated, screenshot)


def test_gray_input_gives_bgr_output():
    image = np.full((50, 50), 255, dtype=np.uint8)
    assert draw_overlay(image, PipelineReport()).shape == (50, 50, 3)


def test_skipped_detections_are_outlined():
    image = np.full((50, 50, 3), 255, dtype=np.uint8)
    detection = Detection(class_id=1, label="clock", score=0.5, bbox=BoundingBox(10, 10, 20, 20))
    report = PipelineReport(skipped=[SkippedDetection(index=0, detection=detection, reason="empty")])

    annotated = draw_overlay(image, report)
    assert not np.array_equal(annotated, image)

    hidden = draw_overlay(image, report, OverlayConfig(draw_boxes=False))
    np.testing.assert_array_equal(hidden, image)

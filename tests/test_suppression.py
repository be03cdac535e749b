"""Tests for the overlap suppression strategies."""

from icon_refiner.config import DetectionConfig
from icon_refiner.core.detector import NoSuppression, NonMaxSuppression, build_suppression
from icon_refiner.core.entities import BoundingBox, Detection


def det(class_id, score, x, y, w=20.0, h=20.0):
    return Detection(class_id=class_id, label=f"c{class_id}", score=score, bbox=BoundingBox(x, y, w, h))


class TestBoundingBox:
    def test_iou_identical(self):
        box = BoundingBox(0, 0, 10, 10)
        assert abs(box.iou(box) - 1.0) < 1e-6

    def test_iou_disjoint(self):
        assert BoundingBox(0, 0, 10, 10).iou(BoundingBox(10, 10, 5, 5)) == 0.0

    def test_iou_half_overlap(self):
        assert abs(BoundingBox(0, 0, 10, 10).iou(BoundingBox(5, 0, 10, 10)) - 1 / 3) < 1e-6


class TestNonMaxSuppression:
    def test_keeps_highest_score_and_decode_order(self):
        detections = [det(1, 0.5, 0, 0), det(1, 0.9, 2, 2), det(2, 0.4, 100, 100)]

        kept = NonMaxSuppression(iou_threshold=0.5).apply(detections)

        assert kept == [detections[1], detections[2]]

    def test_class_aware_keeps_other_classes(self):
        detections = [det(1, 0.9, 0, 0), det(2, 0.8, 1, 1)]
        assert NonMaxSuppression(0.5, class_aware=True).apply(detections) == detections
        assert NonMaxSuppression(0.5, class_aware=False).apply(detections) == [detections[0]]

    def test_no_suppression_returns_copy(self):
        detections = [det(1, 0.9, 0, 0), det(1, 0.8, 0, 0)]
        kept = NoSuppression().apply(detections)
        assert kept == detections
        assert kept is not detections


def test_build_suppression_from_config():
    assert isinstance(build_suppression(DetectionConfig()), NoSuppression)
    strategy = build_suppression(DetectionConfig(suppression="nms", iou_threshold=0.7))
    assert isinstance(strategy, NonMaxSuppression)
    assert strategy.iou_threshold == 0.7

"""Tests for the Ultralytics adapter, with the YOLO class replaced by a fake."""

import numpy as np
import pytest

pytest.importorskip("ultralytics")

from icon_refiner.config import ModelConfig
from icon_refiner.core.detector import yolo_detector
from icon_refiner.core.errors import InferenceError


class FakeTensor:
    def __init__(self, values):
        self._values = np.asarray(values, dtype=np.float32)

    def cpu(self):
        return self

    def numpy(self):
        return self._values


class FakeBoxes:
    def __init__(self, xyxyn, conf, cls):
        self.xyxyn = FakeTensor(xyxyn)
        self.conf = FakeTensor(conf)
        self.cls = FakeTensor(cls)

    def __len__(self):
        return len(self.conf.numpy())


class FakeResult:
    def __init__(self, boxes):
        self.boxes = boxes


class FakeYOLO:
    instances = []

    def __init__(self, weights):
        self.weights = weights
        self.names = {0: "clock", 1: "settings"}
        self.predict_kwargs = None
        FakeYOLO.instances.append(self)

    def predict(self, **kwargs):
        self.predict_kwargs = kwargs
        return [FakeResult(FakeBoxes([[0.1, 0.2, 0.3, 0.4]], [0.9], [1.0]))]


@pytest.fixture
def fake_yolo(monkeypatch):
    FakeYOLO.instances = []
    monkeypatch.setattr(yolo_detector, "YOLO", FakeYOLO)
    return FakeYOLO


class TestYoloModel:
    def test_builtin_nms_is_disabled_by_default(self, fake_yolo):
        model = yolo_detector.YoloModel(ModelConfig())

        model.infer(np.zeros((10, 10, 3), dtype=np.uint8))

        kwargs = fake_yolo.instances[0].predict_kwargs
        assert kwargs["iou"] == 1.0
        assert kwargs["device"] == "cpu"
        assert kwargs["conf"] == pytest.approx(0.05)

    def test_nms_iou_comes_from_config(self, fake_yolo):
        model = yolo_detector.YoloModel(ModelConfig(nms_iou=0.7))
        model.infer(np.zeros((10, 10, 3), dtype=np.uint8))
        assert fake_yolo.instances[0].predict_kwargs["iou"] == pytest.approx(0.7)

    def test_boxes_are_reordered_to_y_first(self, fake_yolo):
        raw = yolo_detector.YoloModel(ModelConfig()).infer(np.zeros((10, 10, 3), dtype=np.uint8))

        np.testing.assert_allclose(raw.boxes[0], [0.2, 0.1, 0.4, 0.3], rtol=1e-6)
        assert list(raw.class_ids) == [1]

    def test_label_table_comes_from_model_names(self, fake_yolo):
        table = yolo_detector.YoloModel(ModelConfig()).label_table()
        assert table.lookup(1) == "settings"

    def test_weight_loading_failure(self, monkeypatch):
        def broken(weights):
            raise FileNotFoundError(weights)

        monkeypatch.setattr(yolo_detector, "YOLO", broken)
        with pytest.raises(InferenceError):
            yolo_detector.YoloModel(ModelConfig()).warmup()

"""Pytest configuration and shared fixtures for the icon refinement pipeline."""

from __future__ import annotations

import logging
from typing import List, Sequence

import cv2
import numpy as np
import pytest

from icon_refiner.core.detector import GraphOutputModel, InferenceModel, LabelEntry, LabelTable, RawDetections
from icon_refiner.core.entities import Mask

logging.getLogger("ultralytics").setLevel(logging.WARNING)

WHITE = (255, 255, 255)
GRAY = (128, 128, 128)


def graph_outputs(boxes: Sequence[Sequence[float]], scores: Sequence[float], classes: Sequence[int]) -> List[np.ndarray]:
    """Build the eight-slot output list of the exported detection graph."""
    outputs: List[np.ndarray] = [np.zeros(1, dtype=np.float32) for _ in range(8)]
    outputs[5] = np.asarray([scores], dtype=np.float32)
    outputs[6] = np.asarray([boxes], dtype=np.float32).reshape(1, -1, 4)
    outputs[7] = np.asarray(classes, dtype=np.float32)
    return outputs


class StaticModel(InferenceModel):
    """Model returning a fixed RawDetections and recording what it was given."""

    def __init__(self, raw: RawDetections, labels: LabelTable | None = None) -> None:
        self.raw = raw
        self.labels = labels
        self.calls = 0

    def infer(self, image: np.ndarray) -> RawDetections:
        self.calls += 1
        return self.raw

    def label_table(self):
        return self.labels


@pytest.fixture
def label_table() -> LabelTable:
    return LabelTable(
        [
            LabelEntry(id=1, name="clock"),
            LabelEntry(id=2, name="settings"),
            LabelEntry(id=3, name="search"),
        ]
    )


@pytest.fixture
def screenshot() -> np.ndarray:
    """White 400x888 screenshot with a uniform gray disc inside the 0.1-0.2 normalized box."""
    image = np.full((888, 400, 3), 255, dtype=np.uint8)
    cv2.circle(image, (60, 133), 15, GRAY, -1)
    return image


@pytest.fixture
def graph_model_factory(label_table):
    def _factory(boxes, scores, classes, labels: LabelTable | None = label_table) -> GraphOutputModel:
        outputs = graph_outputs(boxes, scores, classes)
        return GraphOutputModel(lambda tensor: outputs, labels=labels)

    return _factory


def make_mask(height: int, width: int) -> np.ndarray:
    return np.zeros((height, width), dtype=np.uint8)


@pytest.fixture
def rectangle_mask() -> Mask:
    pixels = make_mask(40, 50)
    pixels[5:25, 10:30] = 255
    return Mask(pixels=pixels, threshold=127.0)


@pytest.fixture
def u_shape_mask() -> Mask:
    """A U opening downwards: the notch is about 60 px deep."""
    pixels = make_mask(100, 100)
    pixels[10:91, 10:91] = 255
    pixels[30:91, 35:66] = 0
    return Mask(pixels=pixels, threshold=127.0)

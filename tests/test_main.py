"""Tests for the command-line entry point, driven with in-memory models."""

import json
from pathlib import Path

import cv2
import numpy as np
import pytest

from icon_refiner import main as cli
from icon_refiner.config import Config
from icon_refiner.core.detector import RawDetections
from icon_refiner.core.errors import InferenceError

from conftest import StaticModel

SCENARIO_BOX = [0.1, 0.1, 0.2, 0.2]
OUTSIDE_BOX = [1.1, 1.1, 1.3, 1.3]


class FailingModel(StaticModel):
    def infer(self, image):
        raise InferenceError("backend crashed")


@pytest.fixture
def screenshot_path(tmp_path: Path, screenshot) -> Path:
    path = tmp_path / "screen.png"
    assert cv2.imwrite(str(path), screenshot)
    return path


@pytest.fixture
def factory(label_table):
    """Model factory recording the ModelConfig it was built with."""
    seen = []

    def _factory(boxes, scores, classes, model_cls=StaticModel):
        raw = RawDetections(boxes=np.array(boxes, dtype=float), scores=scores, class_ids=classes)

        def build(model_config):
            seen.append(model_config)
            return model_cls(raw, labels=label_table)

        build.seen = seen
        return build

    return _factory


def run_cli(argv, model_factory, config=None):
    args = cli.parse_args(argv)
    config = cli._apply_overrides(config or Config(), args)
    return cli.bootstrap(config, args, model_factory)


class TestArguments:
    def test_defaults(self):
        args = cli.parse_args(["screen.png"])
        assert args.image == Path("screen.png")
        assert args.json_path is None
        assert args.output is None
        assert not args.no_window

    def test_labels_and_weights_override_config(self, tmp_path: Path):
        args = cli.parse_args(
            ["screen.png", "--labels", "https://example.com/label_map.json", "--weights", str(tmp_path / "w.pt")]
        )

        config = cli._apply_overrides(Config(), args)

        assert config.model.labels == "https://example.com/label_map.json"
        assert config.model.weights_path == (tmp_path / "w.pt").resolve()

    def test_no_flags_keep_config(self):
        config = cli._apply_overrides(Config(), cli.parse_args(["screen.png"]))
        assert config == Config()


class TestBootstrap:
    def test_writes_json_summary_and_overlay(self, tmp_path: Path, screenshot_path, factory):
        summary = tmp_path / "out" / "summary.json"
        annotated = tmp_path / "out" / "annotated.png"
        build = factory([SCENARIO_BOX, OUTSIDE_BOX], [0.9, 0.8], [1, 2])

        code = run_cli(
            [str(screenshot_path), "--no-window", "--json", str(summary), "--output", str(annotated)], build
        )

        assert code == 0
        payload = json.loads(summary.read_text(encoding="utf-8"))
        assert [r["detection"]["label"] for r in payload["results"]] == ["clock"]
        assert payload["results"][0]["region"] == {"x": 40, "y": 89, "w": 40, "h": 89}
        assert [s["detection"]["label"] for s in payload["skipped"]] == ["settings"]
        written = cv2.imread(str(annotated))
        assert written is not None
        assert written.shape == (888, 400, 3)

    def test_labels_flag_replaces_model_labels(self, tmp_path: Path, screenshot_path, factory):
        labels = tmp_path / "label_map.json"
        labels.write_text(json.dumps([{"id": 1, "name": "alarm"}]), encoding="utf-8")
        summary = tmp_path / "summary.json"

        code = run_cli(
            [str(screenshot_path), "--no-window", "--labels", str(labels), "--json", str(summary)],
            factory([SCENARIO_BOX], [0.9], [1]),
        )

        assert code == 0
        payload = json.loads(summary.read_text(encoding="utf-8"))
        assert payload["results"][0]["detection"]["label"] == "alarm"

    def test_weights_flag_reaches_model_factory(self, tmp_path: Path, screenshot_path, factory):
        build = factory([SCENARIO_BOX], [0.9], [1])

        run_cli([str(screenshot_path), "--no-window", "--weights", str(tmp_path / "best.pt")], build)

        assert build.seen[0].weights_path == (tmp_path / "best.pt").resolve()

    def test_unreadable_image(self, tmp_path: Path, factory):
        build = factory([SCENARIO_BOX], [0.9], [1])

        code = run_cli([str(tmp_path / "missing.png"), "--no-window"], build)

        assert code == 1
        assert build.seen == []

    def test_unknown_label_is_fatal(self, tmp_path: Path, screenshot_path, factory):
        summary = tmp_path / "summary.json"
        build = factory([SCENARIO_BOX], [0.9], [99])

        code = run_cli([str(screenshot_path), "--no-window", "--json", str(summary)], build)

        assert code == 1
        assert not summary.exists()

    def test_inference_error_is_fatal(self, screenshot_path, factory):
        build = factory([SCENARIO_BOX], [0.9], [1], model_cls=FailingModel)
        assert run_cli([str(screenshot_path), "--no-window"], build) == 1

    def test_missing_label_file_is_fatal(self, tmp_path: Path, screenshot_path, factory):
        code = run_cli(
            [str(screenshot_path), "--no-window", "--labels", str(tmp_path / "nope.json")],
            factory([SCENARIO_BOX], [0.9], [1]),
        )
        assert code == 1


class TestMain:
    def test_bad_config_exits_with_error(self, tmp_path: Path):
        config_path = tmp_path / "app.yaml"
        config_path.write_text("detection:\n  suppression: soft-nms\n", encoding="utf-8")

        with pytest.raises(SystemExit) as excinfo:
            cli.main(["screen.png", "--config", str(config_path)])

        assert excinfo.value.code == 1

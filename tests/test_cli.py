import json

import cv2
import numpy as np
import pytest

import grayscott.cli
from grayscott.cli import build_parser, config_from_args, main, run
from grayscott.render import FrameRecorder
from grayscott.simulation import Simulation


def test_parser_defaults():
    config = config_from_args(build_parser().parse_args([]))
    assert (config.width, config.height) == (400, 400)
    assert config.backend == "numpy"
    assert config.parameters.iterations == 8


def test_iterations_override(tmp_path):
    path = tmp_path / "p.json"
    path.write_text(json.dumps({"feed": 0.04, "iterations": 2}))
    config = config_from_args(build_parser().parse_args(["--params", str(path), "--iterations", "5"]))
    assert config.parameters.feed == 0.04
    assert config.parameters.iterations == 5


def test_run_returns_intensity():
    args = build_parser().parse_args(["--width", "20", "--height", "12", "--batches", "3", "--seed", "1"])
    intensity = run(config_from_args(args))
    assert intensity.shape == (12, 20)
    assert intensity.min() >= 0 and intensity.max() <= 1


def test_main_writes_frame_and_video(tmp_path):
    frame = tmp_path / "final.png"
    video = tmp_path / "run.mp4"
    code = main(["--width", "32", "--height", "24", "--batches", "4", "--seed", "2",
                 "--frame", str(frame), "--video", str(video), "--cmap", "cyberpunk"])
    assert code == 0
    img = cv2.imread(str(frame))
    assert img.shape == (24, 32, 3)
    assert video.stat().st_size > 0


def test_gray_frame_matches_display_scaling(tmp_path):
    frame = tmp_path / "final.png"
    args = build_parser().parse_args(["--width", "16", "--height", "16", "--batches", "2",
                                      "--seed", "3", "--frame", str(frame)])
    intensity = run(config_from_args(args))
    img = cv2.imread(str(frame), cv2.IMREAD_GRAYSCALE)
    # gray lookup table has 256 entries, one level of quantisation
    np.testing.assert_allclose(img.astype(int), intensity * 255, atol=1)


def test_degenerate_threshold_exits(tmp_path, capsys):
    path = tmp_path / "p.json"
    path.write_text(json.dumps({"threshold": 0.9}))
    with pytest.raises(SystemExit) as info:
        main(["--width", "8", "--height", "8", "--batches", "1", "--params", str(path)])
    assert info.value.code == 2
    assert "threshold" in capsys.readouterr().err


def test_bad_size_exits(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--width", "0", "--batches", "1"])
    assert info.value.code == 2
    assert "width" in capsys.readouterr().err


def test_video_released_when_run_fails(tmp_path, monkeypatch):
    recorders = []

    class TrackedRecorder(FrameRecorder):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            recorders.append(self)

    advance = Simulation.advance
    calls = []

    def failing_advance(self, params=None):
        calls.append(params)
        if len(calls) == 2:
            raise RuntimeError("backend failed")
        return advance(self, params)

    monkeypatch.setattr(grayscott.cli, "FrameRecorder", TrackedRecorder)
    monkeypatch.setattr(Simulation, "advance", failing_advance)

    args = build_parser().parse_args(["--width", "16", "--height", "16", "--batches", "4",
                                      "--seed", "1", "--video", str(tmp_path / "run.mp4")])
    with pytest.raises(RuntimeError, match="backend failed"):
        run(config_from_args(args))
    assert len(recorders) == 1
    assert recorders[0].video is None
    assert recorders[0].frames == 1

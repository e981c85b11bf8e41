"""
Tests for the command-line interface.
"""

import json

import numpy as np
import pytest

from brainscreen.cli import load_capture, main
from brainscreen.data.recorder import read_header


@pytest.fixture
def capture_file(tmp_path):
    t = np.arange(2048) / 520.0
    values = 50.0 * np.sin(2 * np.pi * 10.0 * t)
    path = tmp_path / "capture.csv"
    lines = ["time,fp1"] + [f"{i},{v:.6f}" for i, v in enumerate(values)]
    path.write_text("\n".join(lines) + "\n")
    return path


def test_load_capture_skips_header(capture_file):
    samples = load_capture(capture_file)
    assert samples.shape == (2048,)
    assert samples[0] == pytest.approx(0.0)


def test_analyze(capture_file, capsys):
    assert main(["analyze", str(capture_file), "--moca", "24", "--mmse", "18"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is True
    assert payload["risk"]["formula_version"] == "1"
    assert 0.0 <= payload["final_index"] <= 100.0


def test_analyze_invalid_scale(capture_file, capsys):
    assert main(["analyze", str(capture_file), "--moca", "40"]) == 1
    assert json.loads(capsys.readouterr().out)["success"] is False


def test_record(capture_file, tmp_path, capsys):
    output = tmp_path / "out.edf"
    assert main(["record", str(capture_file), str(output), "--patient-id", "P7"]) == 0

    header = read_header(output)
    assert header.record_count == 2048
    assert header.patient_id == "P7"
    assert json.loads(capsys.readouterr().out)["record_count"] == 2048


def test_grip(capsys):
    assert main(["grip", "21.1", "--gender", "female", "--age", "22"]) == 0
    assert json.loads(capsys.readouterr().out) == {"percentage": 50.0, "score": 50.0}


def test_grip_bad_gender(capsys):
    assert main(["grip", "21.1", "--gender", "other", "--age", "22"]) == 2
    assert "error" in capsys.readouterr().err


def test_simulate(tmp_path, capsys):
    output = tmp_path / "sim.edf"
    assert main(["simulate", "--duration", "4", "--seed", "3", "--output", str(output)]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is True
    assert read_header(output).record_count >= 4 * 520

"""End-to-end tests for the gift-circulation command line."""

from __future__ import annotations

import json
from pathlib import Path

from gift_circulation.cli import main, parse_dataset

DATASET = {
    "users": [
        {"id": "a", "name": "Ann", "avatar": "", "color": "#111"},
        {"id": "b", "name": "Ben", "avatar": "", "color": "#222"},
    ],
    "gifts": [
        {"id": "g1", "sender_id": "a", "receiver_id": "b", "item": "Pie", "timestamp": 5, "tips": 2},
        {"id": "g2", "sender_id": "b", "receiver_id": "a", "item": "Tea"},
    ],
}


def write_dataset(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(data))
    return path


class TestRender:
    def test_render_sample_to_file(self, tmp_path: Path):
        out = tmp_path / "graph.svg"
        assert main(["render", "--sample", "--seed", "3", "-o", str(out)]) == 0
        svg = out.read_text()
        assert svg.startswith("<svg")
        assert svg.count("<line") == 6

    def test_output_without_extension_gets_svg_suffix(self, tmp_path: Path):
        assert main(["render", "--sample", "--seed", "3", "-o", str(tmp_path / "graph")]) == 0
        assert (tmp_path / "graph.svg").read_text().startswith("<svg")
        assert not (tmp_path / "graph").exists()

    def test_render_input_to_stdout(self, tmp_path: Path, capsys):
        path = write_dataset(tmp_path, DATASET)
        assert main(["render", "-i", str(path), "--width", "300", "--height", "300"]) == 0
        out = capsys.readouterr().out
        assert out.count("<line") == 2


class TestSummary:
    def test_summary_json(self, tmp_path: Path, capsys):
        path = write_dataset(tmp_path, DATASET)
        assert main(["summary", "-i", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["reciprocal_pairs"] == [["a", "b"]]
        flows = {f["id"]: f for f in data["flows"]}
        assert flows["a"]["given"] == 2.0
        assert flows["b"]["given"] == 1.0


class TestBadInput:
    def test_missing_file(self, tmp_path: Path, capsys):
        assert main(["render", "-i", str(tmp_path / "nope.json")]) == 1
        assert "gift-circulation:" in capsys.readouterr().err

    def test_malformed_dataset(self, tmp_path: Path, capsys):
        path = write_dataset(tmp_path, {"gifts": [{"id": "g"}]})
        assert main(["summary", "-i", str(path)]) == 1
        assert "malformed dataset" in capsys.readouterr().err

    def test_negative_tips(self):
        data = {"gifts": [{"id": "g", "sender_id": "a", "receiver_id": "b", "tips": -1}]}
        try:
            parse_dataset(data)
        except ValueError as exc:
            assert "negative tips" in str(exc)
        else:
            raise AssertionError("negative tips should be rejected")

"""Tests for the command-line driver."""

import json

import pytest

from flamescope.cli import build_parser, main

FAST_ARGS = [
    "--resolution", "32",
    "--seed-threshold", "200",
    "--leaf-budget", "1e4",
    "--seed", "5",
]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.profile == "medium"
        assert args.seed is None
        assert args.leaves_per_frame == 1

    def test_preview_and_video_exclusive(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--preview", "--video", "out.mp4"])
        assert exc.value.code == 2
        assert "not allowed with" in capsys.readouterr().err

    def test_profile_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--profile", "ultra"])


class TestMain:
    def test_writes_snapshot_and_metadata(self, tmp_path, capsys):
        output = tmp_path / "flame.png"
        main(FAST_ARGS + ["-o", str(output)])

        assert output.exists()
        meta = json.loads(output.with_suffix(".json").read_text(encoding="utf-8"))
        assert meta["exhausted"] is True
        assert meta["leaves_visited"] == meta["total_leaves"] == 36
        assert meta["rng_seed"] == 5

        out = capsys.readouterr().out
        assert "Seed rounds: 3" in out
        assert "fps =" in out

    def test_max_frames(self, tmp_path):
        output = tmp_path / "partial.png"
        main(FAST_ARGS + ["-o", str(output), "--max-frames", "4"])
        meta = json.loads(output.with_suffix(".json").read_text(encoding="utf-8"))
        assert meta["leaves_visited"] == 4
        assert meta["exhausted"] is False

    def test_no_metadata(self, tmp_path):
        output = tmp_path / "flame.png"
        main(FAST_ARGS + ["-o", str(output), "--no-metadata"])
        assert output.exists()
        assert not output.with_suffix(".json").exists()

    def test_missing_output_dir(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(FAST_ARGS + ["-o", str(tmp_path / "missing" / "flame.png")])
        assert exc.value.code == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(FAST_ARGS + ["-o", str(tmp_path / "f.png"), "--leaves-per-frame", "0"])
        assert exc.value.code == 1
        assert "leaves_per_frame" in capsys.readouterr().err

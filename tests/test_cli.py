import json
import logging
from pathlib import Path

import pytest

from tabletop_dungeon.cli import main


def test_prints_layout_json(capsys):
    assert main(["--rooms", "4", "--seed", "7"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert set(data) == {"drawings", "doors"}
    assert 1 <= len(data["doors"]) <= 3
    assert all(d["tool"] == "wall" for d in data["drawings"])


def test_same_seed_prints_same_geometry(capsys):
    main(["--rooms", "6", "--seed", "abc"])
    first = json.loads(capsys.readouterr().out)
    main(["--rooms", "6", "--seed", "abc"])
    second = json.loads(capsys.readouterr().out)
    assert [d["points"] for d in first["drawings"]] == [d["points"] for d in second["drawings"]]


def test_diagnose_reports_ok(capsys):
    assert main(["--rooms", "8", "--seed", "3", "--diagnose"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["ok"] is True
    assert report["rooms"] >= 1


def test_invalid_settings_exit_with_usage_error(capsys):
    assert main(["--min-room-size", "9", "--max-room-size", "3"]) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_config_file(tmp_path: Path, capsys):
    assert main(["--config", str(tmp_path / "nope.yaml")]) == 2
    assert "not found" in capsys.readouterr().err


def test_config_file_with_flag_override(tmp_path: Path, capsys):
    cfg = tmp_path / "dungeon.yaml"
    cfg.write_text("dungeon:\n  numRooms: 1\n  gridSize: 40\n")
    assert main(["--config", str(cfg)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["doors"] == []
    assert len(data["drawings"]) == 4

    assert main(["--config", str(cfg), "--rooms", "3", "--seed", "1", "--diagnose"]) == 0
    assert json.loads(capsys.readouterr().out)["grid_size"] == 40


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert "tabletop-dungeon" in capsys.readouterr().out


def test_config_file_without_room_count_uses_default(tmp_path: Path, capsys):
    cfg = tmp_path / "grid-only.yaml"
    cfg.write_text("gridSize: 40\nseed: 12\n")
    assert main(["--config", str(cfg), "--diagnose"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["grid_size"] == 40
    assert 1 <= report["rooms"] <= 5


def test_log_level_from_environment(monkeypatch, capsys):
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    monkeypatch.setenv("DUNGEON_LOG_LEVEL", "debug")
    main(["--rooms", "1"])
    assert seen["level"] == logging.DEBUG
    assert "%(levelname)s" in seen["format"]

    # explicit -v beats the environment, unknown names fall back
    main(["--rooms", "1", "-v"])
    assert seen["level"] == logging.INFO
    monkeypatch.setenv("DUNGEON_LOG_LEVEL", "nonsense")
    main(["--rooms", "1"])
    assert seen["level"] == logging.WARNING

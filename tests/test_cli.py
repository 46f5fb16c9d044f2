"""
Tests for the deckform command line.
"""

from __future__ import annotations

import orjson
import pytest

from deckform.apps.cli.main import main


def _run(argv):
    with pytest.raises(SystemExit) as ei:
        main(argv)
    return ei.value.code


def test_paths(capsys):
    assert _run(["paths"]) == 0
    assert "presentation.schema.json" in capsys.readouterr().out


def test_validate_ok(config_file, capsys):
    assert _run(["validate", "--config", str(config_file)]) == 0
    assert capsys.readouterr().out.startswith("[OK]")


def test_validate_ng(temp_dir, capsys):
    path = temp_dir / "bad.json"
    path.write_bytes(orjson.dumps({"slides": [{"content": [{}]}]}))
    assert _run(["validate", "--config", str(path)]) == 2
    out = capsys.readouterr().out
    assert "[NG]" in out
    assert "$['slides'][0]['content'][0]" in out


def test_validate_missing_file(temp_dir, capsys):
    assert _run(["validate", "--config", str(temp_dir / "missing.json")]) == 2
    assert "config not found" in capsys.readouterr().out


def test_render_and_inspect(config_file, temp_dir, capsys):
    out = temp_dir / "out" / "deck.pptx"
    assert _run(["render", "--config", str(config_file), "--out", str(out)]) == 0
    assert out.exists()
    assert "[OK] rendered" in capsys.readouterr().out

    assert _run(["inspect", str(out)]) == 0
    text = capsys.readouterr().out
    assert "slides: 3" in text
    assert "name='intro'" in text


def test_render_serialized(config_file, temp_dir):
    out = temp_dir / "deck.json"
    assert _run(["render", "--config", str(config_file), "--out", str(out), "--format", "Serialized"]) == 0
    assert len(orjson.loads(out.read_bytes())["slides"]) == 3


def test_render_unsupported_property(temp_dir, capsys):
    cfg = temp_dir / "deck.json"
    cfg.write_bytes(orjson.dumps({"slides": [{"content": [{"text": "x", "glorp": 1}]}]}))
    out = temp_dir / "deck.pptx"
    assert _run(["render", "--config", str(cfg), "--out", str(out)]) == 2
    assert "glorp" in capsys.readouterr().out
    assert not out.exists()

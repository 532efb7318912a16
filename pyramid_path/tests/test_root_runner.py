from __future__ import annotations

from pathlib import Path

from runner import _rewrite_input_path_arg


def test_rewrite_uses_existing_argument(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Path("pyramid.txt").write_text("4\n", encoding="utf-8")

    argv = ["runner.py", "pyramid.txt"]
    assert _rewrite_input_path_arg(argv) == argv


def test_rewrite_falls_back_to_examples(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    examples_dir = Path("examples")
    examples_dir.mkdir()
    (examples_dir / "pyramid.txt").write_text("4\n", encoding="utf-8")

    rewritten = _rewrite_input_path_arg(["runner.py", "pyramid.txt", "--show-path"])
    assert rewritten == ["runner.py", "examples/pyramid.txt", "--show-path"]


def test_rewrite_config_value(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    examples_dir = Path("examples")
    examples_dir.mkdir()
    (examples_dir / "config_single.json").write_text("{}", encoding="utf-8")

    rewritten = _rewrite_input_path_arg(
        ["runner.py", "--output-dir", "out", "--config", "config_single.json"]
    )
    assert rewritten == ["runner.py", "--output-dir", "out", "--config", "examples/config_single.json"]


def test_rewrite_keeps_unknown_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    argv = ["runner.py", "missing.txt"]
    assert _rewrite_input_path_arg(argv) == argv

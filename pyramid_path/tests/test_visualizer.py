from __future__ import annotations

import json

import pytest

from pyramid_path.runner import main as run_main
from tools.visualizer import main, load_summary_json


def _run(tmp_path, cfg):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps(cfg), encoding="utf-8")
    results = tmp_path / "results"
    run_main(["--config", str(cfg_path), "--output-dir", str(results)])
    return results


def test_single_run_produces_path_plot(tmp_path):
    results = _run(tmp_path, {"mode": "single", "pyramid": {"type": "inline", "rows": [[4], [1, 6], [2, 8, 3]]}})
    visuals = tmp_path / "visuals"
    main(["-r", str(results), "-o", str(visuals)])
    assert (visuals / "pyramid_path.png").stat().st_size > 0


def test_single_run_without_path(tmp_path):
    results = _run(tmp_path, {"mode": "single", "pyramid": {"type": "inline", "rows": [[2], [4, 6]]}})
    visuals = tmp_path / "visuals"
    main(["-r", str(results), "-o", str(visuals), "--fmt", "svg"])
    assert (visuals / "pyramid_path.svg").exists()


def test_sampling_run_produces_histogram(tmp_path):
    results = _run(
        tmp_path,
        {"mode": "sampling", "seed": 3, "pyramid": {"type": "random", "n_rows": 6}, "sampling": {"trials": 30}},
    )
    visuals = tmp_path / "visuals"
    main(["-r", str(results), "-o", str(visuals)])
    assert (visuals / "sum_distribution.png").exists()


def test_missing_summary_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["-r", str(tmp_path), "-o", str(tmp_path / "v")])
    assert exc.value.code == 1
    with pytest.raises(FileNotFoundError):
        load_summary_json(tmp_path)

"""
Runner script for the pyramid longest-path solver.

Two ways to run it:

Direct
    Solve one pyramid read from a file, or typed in at the prompt when no
    file is given, and print ``Maximum Sum: <n>``.

        python -m pyramid_path.runner [pyramid.txt] [--extraction fallback] [--show-path]

Configured
    Load a JSON config and dispatch on ``mode``.  ``single`` solves one
    pyramid (file, inline or random); ``sampling`` runs the Monte Carlo
    harness over random pyramids.  A config snapshot with SHA-256 hash and a
    ``summary.json`` are written to the output directory.

        python -m pyramid_path.runner --config config.json [--output-dir results/]
"""

from __future__ import annotations

import argparse
import csv
import hashlib
import json
import sys
import time
from pathlib import Path

from .config import build_rng, load_config, sampling_params
from .graph import Graph, build, pyramid_from_config
from .reader import MalformedPyramidError, prompt_pyramid, read_pyramid_file
from .sampling import SamplingResult, run_sampling
from .solver import EXTRACTION_POLICIES, EXTRACTION_STRICT, PathResult, format_result, solve_path


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Maximum path sum through a number pyramid, never stepping on a prime."
    )
    parser.add_argument(
        "filename",
        nargs="?",
        default=None,
        help="Pyramid file, one level per line. Omit to type the pyramid in.",
    )
    parser.add_argument(
        "--extraction",
        choices=sorted(EXTRACTION_POLICIES),
        default=None,
        help="Result policy when the bottom row cannot be reached (default: strict).",
    )
    parser.add_argument(
        "--show-path",
        action="store_true",
        help="Also print the cells of the optimal path.",
    )
    parser.add_argument("--config", default=None, help="Path to JSON configuration file.")
    parser.add_argument(
        "--output-dir",
        default="results",
        help="Directory for output files in --config runs (default: results/).",
    )
    args = parser.parse_args(argv)
    if args.config is not None and args.filename is not None:
        parser.error("give either a pyramid file or --config, not both")
    return args


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _write_csv(path: Path, fieldnames: list[str], rows: list[dict]) -> None:
    with path.open("w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def _config_hash(cfg: dict) -> str:
    """Compute a SHA-256 hash of the JSON-serialised config for reproducibility."""
    serialised = json.dumps(cfg, sort_keys=True).encode("utf-8")
    return hashlib.sha256(serialised).hexdigest()


def _save_config_snapshot(output_dir: Path, cfg: dict) -> None:
    snapshot = {
        "config": cfg,
        "sha256": _config_hash(cfg),
    }
    (output_dir / "config_snapshot.json").write_text(json.dumps(snapshot, indent=2))


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def _format_path(path: PathResult) -> str:
    cells = " -> ".join(str(v) for v in path.values)
    if not path.reaches_sink:
        cells += "  (does not reach the bottom row)"
    return f"Path: {cells}"


def _count_forbidden(graph: Graph) -> int:
    return sum(sum(row) for row in graph.forbidden)


def _print_single_summary(graph: Graph, path: PathResult | None, elapsed: float) -> None:
    sep = "-" * 58
    print(sep)
    print("  Pyramid Longest Path — single pyramid")
    print(sep)
    print(f"  Levels            : {graph.n_rows}")
    print(f"  Vertices / edges  : {graph.n_vertices} / {graph.n_edges}")
    print(f"  Forbidden cells   : {_count_forbidden(graph)}")
    print(f"  Elapsed           : {elapsed:.4f}s")
    print()
    print(f"  {format_result(None if path is None else path.max_sum)}")
    if path is not None:
        print(f"  {_format_path(path)}")
    print(sep)


def _print_sampling_summary(result: SamplingResult, elapsed: float) -> None:
    summary = result.summary_dict()
    sep = "-" * 58
    print(sep)
    print("  Pyramid Longest Path — sampling")
    print(sep)
    print(f"  Trials            : {result.trials}")
    print(f"  Levels            : {result.n_rows}")
    print(f"  Value range       : [{result.low}, {result.high}]")
    print(f"  Elapsed           : {elapsed:.2f}s")
    print()
    print(f"  No admissible path: {result.n_no_path} / {result.trials}")
    if summary["mean_max_sum"] is not None:
        print(f"  Mean max sum      : {summary['mean_max_sum']:.2f}")
        print(f"  Std               : {summary['std_max_sum']:.2f}")
        print(f"  Min / Max         : {summary['min_max_sum']:.0f} / {summary['max_max_sum']:.0f}")
    if summary["ci_95_low"] is not None:
        print(f"  95% CI            : [{summary['ci_95_low']:.2f}, {summary['ci_95_high']:.2f}]")
    print(sep)


# ---------------------------------------------------------------------------
# Direct mode
# ---------------------------------------------------------------------------


def _run_direct(filename: str | None, extraction: str, show_path: bool) -> None:
    if filename is None:
        print("No filename supplied.")
        try:
            rows = prompt_pyramid()
        except EOFError:
            print("ERROR: Input ended before the pyramid was complete.", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Trying to open {filename}...")
        try:
            rows = read_pyramid_file(filename)
        except MalformedPyramidError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            sys.exit(1)
        except OSError:
            print("ERROR: Can not open input file.", file=sys.stderr)
            sys.exit(1)

    path = solve_path(build(rows), extraction=extraction)
    print(format_result(None if path is None else path.max_sum))
    if show_path and path is not None:
        print(_format_path(path))


# ---------------------------------------------------------------------------
# Configured modes
# ---------------------------------------------------------------------------


def _run_single(cfg: dict, config_dir: Path, output_dir: Path) -> None:
    """Solve the configured pyramid and write summary.json."""
    extraction: str = cfg["extraction"]
    pyramid_cfg = cfg["pyramid"]
    rng = build_rng(cfg) if "seed" in cfg else None
    rows = pyramid_from_config(pyramid_cfg, seed=rng, base_dir=config_dir)

    print(f"[single] pyramid={pyramid_cfg['type']} | levels={len(rows)} | extraction={extraction}")

    t0 = time.perf_counter()
    graph = build(rows)
    path = solve_path(graph, extraction=extraction)
    elapsed = time.perf_counter() - t0

    (output_dir / "summary.json").write_text(
        json.dumps(
            {
                "mode": "single",
                "extraction": extraction,
                "n_rows": graph.n_rows,
                "n_vertices": graph.n_vertices,
                "n_edges": graph.n_edges,
                "n_forbidden": _count_forbidden(graph),
                "elapsed_seconds": elapsed,
                "max_sum": None if path is None else path.max_sum,
                "path": None if path is None else path.summary_dict(),
                "rows": [list(r) for r in graph.rows],
            },
            indent=2,
        )
    )

    _print_single_summary(graph, path, elapsed)


def _run_sampling(cfg: dict, output_dir: Path) -> None:
    """Run the Monte Carlo harness and write its CSV and summary."""
    params = sampling_params(cfg)
    extraction: str = cfg["extraction"]

    print(
        f"[sampling] trials={params['trials']} | levels={params['n_rows']} | "
        f"values=[{params['low']}, {params['high']}] | extraction={extraction}"
    )

    t0 = time.perf_counter()
    result = run_sampling(
        params["n_rows"],
        params["trials"],
        int(cfg["seed"]),
        low=params["low"],
        high=params["high"],
        extraction=extraction,
    )
    elapsed = time.perf_counter() - t0

    _write_csv(
        output_dir / "sampling_results.csv",
        ["trial", "max_sum", "path_exists"],
        result.to_records(),
    )
    (output_dir / "summary.json").write_text(
        json.dumps({"mode": "sampling", "elapsed_seconds": elapsed, **result.summary_dict()}, indent=2)
    )

    _print_sampling_summary(result, elapsed)


def _run_configured(config_path: str, output_dir: Path) -> None:
    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    _ensure_dir(output_dir)
    _save_config_snapshot(output_dir, cfg)

    (output_dir / "experiment_metadata.json").write_text(
        json.dumps(
            {
                "config_file": str(Path(config_path).resolve()),
                "output_dir": str(output_dir.resolve()),
                "config_sha256": _config_hash(cfg),
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            },
            indent=2,
        )
    )

    mode: str = cfg["mode"]
    try:
        if mode == "single":
            _run_single(cfg, Path(config_path).resolve().parent, output_dir)
        else:
            _run_sampling(cfg, output_dir)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"  Results saved to : {output_dir.resolve()}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    if args.config is not None:
        if args.extraction is not None:
            print("[config] --extraction is ignored; set 'extraction' in the config file.")
        _run_configured(args.config, Path(args.output_dir))
        return

    _run_direct(args.filename, args.extraction or EXTRACTION_STRICT, args.show_path)


if __name__ == "__main__":
    main()

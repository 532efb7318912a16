#!/usr/bin/env python3
"""
visualizer.py — Pyramid Path Plots
==================================
Generate figures from ``pyramid_path.runner --config`` output directories.

Two plot types are produced, depending on the run mode recorded in
``summary.json``:

  1. **Pyramid Path** (single runs) — the pyramid drawn as a layered DAG.
     Prime cells are greyed out, the optimal path is highlighted and every
     cell is labelled with its value.

  2. **Sum Distribution** (sampling runs) — histogram of maximum sums over
     all trials with the 95% confidence interval of the mean, annotated with
     the share of pyramids that had no admissible path.

Usage examples
--------------
# Path plot from a single run
python3 tools/visualizer.py --results-dir results/ --output-dir visuals/

# Sampling histogram as PDF
python3 tools/visualizer.py -r results_sampling/ -o visuals/ --fmt pdf
"""

from __future__ import annotations

import argparse
import json
import sys
import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # Non-interactive; safe for headless/CI environments
import matplotlib.pyplot as plt
import networkx as nx
import pandas as pd
import seaborn as sns

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from pyramid_path.graph import build  # noqa: E402


# ---------------------------------------------------------------------------
# Style constants
# ---------------------------------------------------------------------------

CELL_COLOR      = "#AED6F1"
PRIME_COLOR     = "#D5D8DC"
PATH_COLOR      = "#E67E22"
EDGE_COLOR      = "#CCCCCC"
CI_COLOR        = "#C0392B"
BACKGROUND      = "#FAFAFA"
ACCENT          = "#2C3E50"
FONTFAMILY      = "DejaVu Sans"
MAX_LABEL_ROWS  = 25             # Beyond this, value labels are unreadable

sns.set_theme(style="whitegrid", font=FONTFAMILY)


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------


def load_summary_json(results_dir: Path) -> dict:
    """Load summary.json from a runner output directory.

    Raises
    ------
    FileNotFoundError, ValueError
    """
    summary_path = results_dir / "summary.json"
    if not summary_path.exists():
        raise FileNotFoundError(f"summary.json not found in: {results_dir}")
    summary = json.loads(summary_path.read_text())
    if summary.get("mode") not in {"single", "sampling"}:
        raise ValueError(f"summary.json in '{results_dir}' has no recognised 'mode'.")
    return summary


def load_sampling_csv(results_dir: Path) -> pd.DataFrame:
    """Load sampling_results.csv.

    Returns
    -------
    pd.DataFrame with columns ``trial``, ``max_sum`` (NaN without a path)
    and ``path_exists``.

    Raises
    ------
    FileNotFoundError, ValueError
    """
    csv_path = results_dir / "sampling_results.csv"
    if not csv_path.exists():
        raise FileNotFoundError(f"sampling_results.csv not found in: {results_dir}")

    df = pd.read_csv(csv_path)
    if df.empty:
        raise ValueError(f"sampling_results.csv in '{results_dir}' is empty.")

    missing = {"trial", "max_sum", "path_exists"} - set(df.columns)
    if missing:
        raise ValueError(
            f"sampling_results.csv is missing required columns: {sorted(missing)}."
        )
    return df


# ---------------------------------------------------------------------------
# Plot 1: Pyramid path
# ---------------------------------------------------------------------------


def plot_pyramid_path(summary: dict, output_path: Path, dpi: int = 120) -> None:
    """Draw the pyramid with forbidden cells and the optimal path marked.

    Parameters
    ----------
    summary : dict
        Parsed summary.json of a ``single`` run (needs ``rows`` and ``path``).
    output_path : Path
        Destination PNG/PDF/SVG path.
    dpi : int
        Output resolution.
    """
    graph = build(summary["rows"])
    G = graph.to_networkx()
    cells = [v for v in G.nodes if G.nodes[v]["kind"] == "cell"]
    H = G.subgraph(cells)

    pos = {
        v: (G.nodes[v]["col"] - G.nodes[v]["row"] / 2.0, -G.nodes[v]["row"])
        for v in cells
    }

    path = summary.get("path") or {}
    path_vertices = path.get("vertices", [])
    on_path = set(path_vertices)
    path_edges = list(zip(path_vertices, path_vertices[1:]))

    node_colors = [
        PATH_COLOR if v in on_path
        else PRIME_COLOR if G.nodes[v]["forbidden"]
        else CELL_COLOR
        for v in cells
    ]

    n_rows = graph.n_rows
    size = max(4.0, min(0.6 * n_rows, 24.0))
    fig, ax = plt.subplots(figsize=(size * 1.3, size), facecolor=BACKGROUND)
    ax.set_facecolor(BACKGROUND)

    nx.draw_networkx_edges(
        H, pos, ax=ax,
        edge_color=EDGE_COLOR,
        arrows=False,
        width=0.6,
    )
    nx.draw_networkx_edges(
        H, pos, ax=ax,
        edgelist=path_edges,
        edge_color=PATH_COLOR,
        arrows=False,
        width=2.5,
    )
    nx.draw_networkx_nodes(
        H, pos, ax=ax,
        nodelist=cells,
        node_color=node_colors,
        node_size=max(60, 900 // max(1, n_rows // 5)),
        edgecolors=ACCENT,
        linewidths=0.4,
    )
    if n_rows <= MAX_LABEL_ROWS:
        nx.draw_networkx_labels(
            H, pos, ax=ax,
            labels={v: str(G.nodes[v]["value"]) for v in cells},
            font_size=8 if n_rows <= 12 else 6,
            font_color=ACCENT,
        )

    max_sum = summary.get("max_sum")
    title = (
        f"Maximum Sum: {max_sum}" if max_sum is not None
        else "Maximum sum does not exist."
    )
    ax.set_title(title, fontsize=15, fontweight="bold", color=ACCENT, pad=16)
    if path and not path.get("reaches_sink", True):
        ax.annotate(
            "Fallback result: the highlighted path does not reach the bottom row.",
            xy=(0.01, 0.02), xycoords="axes fraction",
            fontsize=9, color=CI_COLOR, style="italic",
        )
    ax.axis("off")

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    print(f"  [visualizer] Pyramid Path → {output_path}")


# ---------------------------------------------------------------------------
# Plot 2: Sum distribution
# ---------------------------------------------------------------------------


def plot_sum_distribution(
    df: pd.DataFrame,
    summary: dict,
    output_path: Path,
    dpi: int = 120,
) -> bool:
    """Histogram of maximum sums across sampling trials.

    Returns
    -------
    bool
        False when no trial had an admissible path (nothing to plot).
    """
    sums = df.loc[df["path_exists"].astype(bool), "max_sum"].astype(float)
    if sums.empty:
        print("  [visualizer] No admissible trials — skipping Sum Distribution.", file=sys.stderr)
        return False

    fig, ax = plt.subplots(figsize=(10, 6), facecolor=BACKGROUND)
    sns.histplot(sums, ax=ax, color=CELL_COLOR, edgecolor=ACCENT, kde=len(sums) > 2)

    ci_low, ci_high = summary.get("ci_95_low"), summary.get("ci_95_high")
    if ci_low is not None and ci_high is not None:
        ax.axvspan(ci_low, ci_high, color=CI_COLOR, alpha=0.15, label="95% CI of mean")
    mean = summary.get("mean_max_sum")
    if mean is not None:
        ax.axvline(mean, color=CI_COLOR, linewidth=1.5, label=f"mean = {mean:.1f}")

    ax.set_xlabel("Maximum sum", fontsize=12)
    ax.set_ylabel("Pyramids", fontsize=12)
    ax.set_title(
        f"Maximum Sum over {len(df)} Random Pyramids "
        f"({summary.get('n_rows', '?')} levels)",
        fontsize=14, fontweight="bold", color=ACCENT,
    )
    frac_no_path = 1.0 - len(sums) / len(df)
    ax.annotate(
        f"No admissible path: {frac_no_path:.1%}",
        xy=(0.99, 0.97), xycoords="axes fraction", ha="right", va="top",
        fontsize=10, color=ACCENT,
    )
    ax.legend(loc="upper left")

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    print(f"  [visualizer] Sum Distribution → {output_path}")
    return True


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description=(
            "Generate figures from pyramid_path output directories.\n\n"
            "  single runs   → Pyramid Path plot\n"
            "  sampling runs → Sum Distribution plot"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--results-dir", "-r",
        type=Path,
        required=True,
        metavar="DIR",
        help="Path to a runner output directory (must contain summary.json).",
    )
    p.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=Path("visuals"),
        metavar="DIR",
        help="Directory for output images (default: visuals/).",
    )
    p.add_argument(
        "--dpi",
        type=int,
        default=120,
        help="Output image resolution in DPI (default: 120).",
    )
    p.add_argument(
        "--fmt",
        choices=["png", "pdf", "svg"],
        default="png",
        help="Output image format (default: png).",
    )
    return p


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    results_dir = args.results_dir
    output_dir = args.output_dir

    try:
        summary = load_summary_json(results_dir)
    except (FileNotFoundError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    output_dir.mkdir(parents=True, exist_ok=True)
    produced: list[Path] = []

    if summary["mode"] == "single":
        out = output_dir / f"pyramid_path.{args.fmt}"
        plot_pyramid_path(summary, out, dpi=args.dpi)
        produced.append(out)
    else:
        try:
            df = load_sampling_csv(results_dir)
        except (FileNotFoundError, ValueError) as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            sys.exit(1)
        out = output_dir / f"sum_distribution.{args.fmt}"
        with warnings.catch_warnings():
            # seaborn's KDE warns on near-constant samples.
            warnings.simplefilter("ignore", UserWarning)
            if plot_sum_distribution(df, summary, out, dpi=args.dpi):
                produced.append(out)

    sep = "─" * 54
    print(f"\n{sep}")
    print("  visualizer — Output Summary")
    print(sep)
    for p in produced:
        print(f"  ✓  {p}")
    if not produced:
        print("  No plots were produced.", file=sys.stderr)
    print(sep)


if __name__ == "__main__":
    main()

"""
Monte Carlo harness over random pyramids.

Draws independent random pyramids, solves each one, and reports the
distribution of maximum sums together with how often no admissible path
exists.  Every trial gets its own Generator spawned from a master
SeedSequence, so the whole experiment is reproducible from one seed.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass

import numpy as np
import scipy.stats as stats
from numpy.random import Generator, SeedSequence, default_rng

from .graph import build, generate_random_pyramid
from .solver import EXTRACTION_STRICT, solve


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SamplingResult:
    """Immutable container for a sampling experiment.

    Attributes
    ----------
    max_sums : np.ndarray, shape (trials,), dtype float64
        Maximum sum per trial; NaN where no admissible path exists.
    path_exists : np.ndarray, shape (trials,), dtype bool
        True where the trial's pyramid had an admissible path.
    n_no_path : int
        Number of trials without an admissible path.
    mean_max_sum, std_max_sum : float
        Statistics over admissible trials only (NaN when there are none).
    ci_low, ci_high : float
        95% t-interval for the mean; NaN with fewer than two admissible trials.
    trials, seed, n_rows, low, high : int
        Experiment parameters.
    extraction : str
        Extraction policy handed to the solver.
    """
    max_sums: np.ndarray
    path_exists: np.ndarray
    n_no_path: int
    mean_max_sum: float
    std_max_sum: float
    ci_low: float
    ci_high: float
    trials: int
    seed: int
    n_rows: int
    low: int
    high: int
    extraction: str

    def summary_dict(self) -> dict:
        """Return a JSON-serialisable summary (no arrays, NaN as None)."""
        admissible = self.max_sums[self.path_exists]

        def _clean(v: float) -> float | None:
            return None if np.isnan(v) else float(v)

        return {
            "trials": self.trials,
            "seed": self.seed,
            "n_rows": self.n_rows,
            "low": self.low,
            "high": self.high,
            "extraction": self.extraction,
            "n_no_path": self.n_no_path,
            "frac_no_path": self.n_no_path / self.trials,
            "mean_max_sum": _clean(self.mean_max_sum),
            "std_max_sum": _clean(self.std_max_sum),
            "ci_95_low": _clean(self.ci_low),
            "ci_95_high": _clean(self.ci_high),
            "min_max_sum": float(np.min(admissible)) if admissible.size else None,
            "max_max_sum": float(np.max(admissible)) if admissible.size else None,
            "median_max_sum": float(np.median(admissible)) if admissible.size else None,
        }

    def to_records(self) -> list[dict]:
        """Per-trial rows for CSV output."""
        return [
            {
                "trial": i,
                "max_sum": int(s) if ok else "",
                "path_exists": bool(ok),
            }
            for i, (s, ok) in enumerate(zip(self.max_sums.tolist(), self.path_exists.tolist()))
        ]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def trial_rngs(seed: int, trials: int) -> list[Generator]:
    """One Generator per trial, spawned from a master ``SeedSequence``."""
    return [default_rng(child) for child in SeedSequence(seed).spawn(trials)]


def admissible_stats(
    max_sums: np.ndarray,
    confidence: float = 0.95,
) -> tuple[float, float, float, float]:
    """Mean, sample std and t-interval over the trials that found a path.

    NaN entries (no admissible path) are dropped first.  The mean is NaN
    when nothing is left; std is 0 for a single trial; the interval is NaN
    with fewer than two trials and collapses onto the mean when every
    admissible sum is equal.

    Returns
    -------
    (mean, std, ci_low, ci_high) : tuple of float
    """
    if not (0 < confidence < 1):
        raise ValueError(f"confidence must be in (0, 1); got {confidence}.")
    admissible = max_sums[~np.isnan(max_sums)]
    nan = float("nan")
    if admissible.size == 0:
        return nan, nan, nan, nan

    mean = float(np.mean(admissible))
    if admissible.size == 1:
        return mean, 0.0, nan, nan

    std = float(np.std(admissible, ddof=1))
    se = float(stats.sem(admissible))
    if se == 0.0:
        return mean, std, mean, mean
    low, high = stats.t.interval(confidence, df=admissible.size - 1, loc=mean, scale=se)
    return mean, std, float(low), float(high)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def run_sampling(
    n_rows: int,
    trials: int,
    seed: int,
    low: int = 1,
    high: int = 100,
    extraction: str = EXTRACTION_STRICT,
) -> SamplingResult:
    """Solve *trials* random pyramids of *n_rows* rows.

    Parameters
    ----------
    n_rows : int
        Rows per pyramid (>= 1).
    trials : int
        Number of pyramids (>= 1).
    seed : int
        Master seed.
    low, high : int, optional
        Inclusive range of cell values.
    extraction : str, optional
        Extraction policy passed to :func:`pyramid_path.solver.solve`.

    Returns
    -------
    SamplingResult

    Raises
    ------
    ValueError
        If ``trials < 1`` or ``n_rows < 1``.
    """
    if trials < 1:
        raise ValueError(f"trials must be >= 1; got {trials}.")
    if n_rows < 1:
        raise ValueError(f"n_rows must be >= 1; got {n_rows}.")

    max_sums = np.full(trials, np.nan, dtype=np.float64)

    for trial, rng in enumerate(trial_rngs(seed, trials)):
        rows = generate_random_pyramid(n_rows, low, high, rng)
        with warnings.catch_warnings():
            # Fallback extraction would otherwise warn once per trial.
            warnings.simplefilter("ignore", UserWarning)
            result = solve(build(rows), extraction=extraction)
        if result is not None:
            max_sums[trial] = result

    path_exists = ~np.isnan(max_sums)
    n_no_path = int(trials - np.count_nonzero(path_exists))
    mean, std, ci_low, ci_high = admissible_stats(max_sums)

    return SamplingResult(
        max_sums=max_sums,
        path_exists=path_exists,
        n_no_path=n_no_path,
        mean_max_sum=mean,
        std_max_sum=std,
        ci_low=ci_low,
        ci_high=ci_high,
        trials=trials,
        seed=seed,
        n_rows=n_rows,
        low=low,
        high=high,
        extraction=extraction,
    )

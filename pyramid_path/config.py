"""
Configuration loader for pyramid longest-path runs.

Loads JSON config files, validates fields, and builds a seeded numpy random
Generator for reproducible random pyramids.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from numpy.random import Generator, default_rng

from .solver import EXTRACTION_POLICIES, EXTRACTION_STRICT


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

ConfigDict = dict[str, Any]


# ---------------------------------------------------------------------------
# Schema constants
# ---------------------------------------------------------------------------

PYRAMID_TYPES = {"file", "inline", "random"}
RUN_MODES = {"single", "sampling"}

_PYRAMID_REQUIRED_PARAMS: dict[str, list[str]] = {
    "file":   ["path"],
    "inline": ["rows"],
    "random": ["n_rows"],
}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> ConfigDict:
    """Load and validate a JSON configuration file.

    Parameters
    ----------
    path : str or Path
        Path to the JSON configuration file.

    Returns
    -------
    ConfigDict
        Validated configuration with ``extraction`` defaulted to ``strict``.

    Raises
    ------
    ValueError
        If required fields are missing or values are invalid.
    FileNotFoundError
        If the config file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r") as fh:
        cfg: ConfigDict = json.load(fh)

    _validate_config(cfg)
    cfg.setdefault("extraction", EXTRACTION_STRICT)
    return cfg


def _validate_config(cfg: ConfigDict) -> None:
    """Validate top-level config fields.

    Raises
    ------
    ValueError
        On any validation failure.
    """
    required_top = {"pyramid", "mode"}
    missing = required_top - cfg.keys()
    if missing:
        raise ValueError(f"Config missing required fields: {missing}")

    if cfg["mode"] not in RUN_MODES:
        raise ValueError(f"mode must be one of {RUN_MODES}, got {cfg['mode']!r}")

    extraction = cfg.get("extraction", EXTRACTION_STRICT)
    if extraction not in EXTRACTION_POLICIES:
        raise ValueError(
            f"extraction must be one of {EXTRACTION_POLICIES}, got {extraction!r}"
        )

    pyramid_cfg = cfg["pyramid"]
    if "type" not in pyramid_cfg:
        raise ValueError("pyramid.type is required")
    ptype = pyramid_cfg["type"]
    if ptype not in PYRAMID_TYPES:
        raise ValueError(f"pyramid.type must be one of {PYRAMID_TYPES}, got {ptype!r}")

    missing_params = [p for p in _PYRAMID_REQUIRED_PARAMS[ptype] if p not in pyramid_cfg]
    if missing_params:
        raise ValueError(
            f"pyramid config for type {ptype!r} is missing required "
            f"parameter(s): {missing_params}"
        )

    if ptype == "random" and int(pyramid_cfg["n_rows"]) < 1:
        raise ValueError(f"pyramid.n_rows must be >= 1, got {pyramid_cfg['n_rows']!r}")

    needs_seed = ptype == "random" or cfg["mode"] == "sampling"
    if needs_seed and "seed" not in cfg:
        raise ValueError("seed is required for random pyramids and sampling runs")

    if cfg["mode"] == "sampling":
        sampling_cfg = cfg.get("sampling", {})
        if int(sampling_cfg.get("trials", 100)) < 1:
            raise ValueError(
                f"sampling.trials must be >= 1, got {sampling_cfg.get('trials')!r}"
            )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def sampling_params(cfg: ConfigDict) -> dict[str, int]:
    """Resolve sampling parameters, inheriting unset ones from a random pyramid.

    Returns
    -------
    dict
        Keys ``trials``, ``n_rows``, ``low``, ``high``.
    """
    pyramid_cfg = cfg["pyramid"]
    base = pyramid_cfg if pyramid_cfg["type"] == "random" else {}
    sampling_cfg = cfg.get("sampling", {})
    return {
        "trials": int(sampling_cfg.get("trials", 100)),
        "n_rows": int(sampling_cfg.get("n_rows", base.get("n_rows", 10))),
        "low": int(sampling_cfg.get("low", base.get("low", 1))),
        "high": int(sampling_cfg.get("high", base.get("high", 100))),
    }


def build_rng(cfg: ConfigDict) -> Generator:
    """Build a seeded numpy Generator from a config dict.

    Parameters
    ----------
    cfg : ConfigDict
        Configuration dictionary containing ``seed`` (int).

    Returns
    -------
    Generator
        A seeded numpy random Generator.
    """
    return default_rng(int(cfg["seed"]))

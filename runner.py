"""Repository-level CLI entrypoint for the pyramid solver.

This wrapper preserves the documented invocation style:

    python runner.py <pyramid.txt> [--show-path]
    python runner.py --config <config.json> [--output-dir results/]

It delegates execution to :mod:`pyramid_path.runner`.
"""

from __future__ import annotations

import sys
from pathlib import Path

from pyramid_path.runner import main


def _rewrite_input_path_arg(argv: list[str]) -> list[str]:
    """Rewrite the input/config argument to ``examples/<name>`` when needed.

    README examples use paths like ``pyramid.txt`` or ``config_single.json``
    from the repository root, while those files live under ``examples/``.
    """
    out = list(argv)
    for idx in range(1, len(out)):
        arg = out[idx]
        if arg.startswith("-"):
            continue
        if idx > 1 and out[idx - 1] == "--output-dir":
            continue
        if idx > 1 and out[idx - 1] == "--extraction":
            continue

        candidate = Path(arg)
        if not candidate.exists():
            alt = Path("examples") / candidate
            if alt.exists():
                out[idx] = str(alt)
        break

    return out


if __name__ == "__main__":
    sys.argv = _rewrite_input_path_arg(sys.argv)
    main()

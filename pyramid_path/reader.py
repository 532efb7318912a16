"""
Pyramid input: text files and interactive prompts.

A pyramid file holds one level per non-blank line.  Integers are read in
order and re-chunked into rows of length 1, 2, ..., N, so both the centred
"pyramid" layout and the left-aligned "orthogonal triangle" layout parse the
same way.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence


class MalformedPyramidError(ValueError):
    """Raised when input does not describe a triangular pyramid of integers."""


def validate_rows(rows: Sequence[Sequence[int]]) -> None:
    """Check that *rows* is a triangle: N >= 1 rows, row r holding r + 1 values.

    Raises
    ------
    MalformedPyramidError
    """
    if len(rows) == 0:
        raise MalformedPyramidError("Pyramid has no rows.")
    for r, row in enumerate(rows):
        if len(row) != r + 1:
            raise MalformedPyramidError(
                f"Level {r + 1} must hold {r + 1} number(s); got {len(row)}."
            )


def parse_pyramid(text: str) -> list[list[int]]:
    """Parse pyramid text into rows.

    Parameters
    ----------
    text : str
        Whitespace-separated integers; the number of non-blank lines is the
        level count.

    Returns
    -------
    list of list of int

    Raises
    ------
    MalformedPyramidError
        On empty input, non-integer tokens, or a token count that does not
        match ``N(N+1)/2`` for N non-blank lines.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    n_rows = len(lines)
    if n_rows == 0:
        raise MalformedPyramidError("Pyramid input is empty.")

    tokens = " ".join(lines).split()
    try:
        values = [int(tok) for tok in tokens]
    except ValueError as exc:
        raise MalformedPyramidError(f"Pyramid input contains a non-integer: {exc}") from exc

    expected = n_rows * (n_rows + 1) // 2
    if len(values) != expected:
        raise MalformedPyramidError(
            f"{n_rows} level(s) need {expected} number(s); found {len(values)}."
        )

    return [values[r * (r + 1) // 2 : (r + 1) * (r + 2) // 2] for r in range(n_rows)]


def read_pyramid_file(path: str | Path) -> list[list[int]]:
    """Read and parse a pyramid file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    MalformedPyramidError
        If the content is not UTF-8 text or not a pyramid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pyramid file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedPyramidError(f"Pyramid file is not UTF-8 text: {path}") from exc
    return parse_pyramid(text)


def _prompt_int(input_fn: Callable[[str], str], prompt: str, minimum: int | None = None) -> int:
    while True:
        answer = input_fn(prompt)
        try:
            value = int(answer.strip())
        except ValueError:
            print(f"  Not an integer: {answer!r}")
            continue
        if minimum is not None and value < minimum:
            print(f"  Must be at least {minimum}.")
            continue
        return value


def prompt_pyramid(input_fn: Callable[[str], str] | None = None) -> list[list[int]]:
    """Read a pyramid interactively, one number per prompt.

    Parameters
    ----------
    input_fn : callable, optional
        Prompt function (``input`` by default; tests pass a stub).

    Returns
    -------
    list of list of int
    """
    if input_fn is None:
        input_fn = input
    n_rows = _prompt_int(input_fn, "Please enter the level count of pyramid: ", minimum=1)
    return [
        [_prompt_int(input_fn, f"Level {r}, Number {c}: ") for c in range(1, r + 1)]
        for r in range(1, n_rows + 1)
    ]

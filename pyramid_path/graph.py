"""
Pyramid graph construction for the longest-path solver.

A pyramid of N rows is expanded into a DAG with ``N(N+1)/2 + 2`` vertices:
vertex 0 is a synthetic source, vertex ``V-1`` a synthetic sink, and every
grid cell gets one vertex in between, laid out row by row.  Edges always
point one row down, so the result is acyclic by construction.

A forbidden cell (by default: a prime value) is never removed.  It simply
receives no incoming edge, which makes it unreachable from the source while
keeping the positional numbering intact.  Its outgoing edges may still exist
because children add edges from *their* parents when they are admissible.

Edge weights store the negated value of the destination cell so that a
shortest-path relaxation yields the maximum sum.  Edges into the sink weigh 0.

Uses NetworkX only for export; the solver works on the plain adjacency lists.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, NamedTuple, Sequence

import networkx as nx
import numpy as np
from numpy.random import default_rng

from .primes import is_prime


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

Rows = Sequence[Sequence[int]]

SOURCE: int = 0


class Edge(NamedTuple):
    """Outgoing edge: destination vertex and its (negated) weight."""

    dest: int
    weight: int


# ---------------------------------------------------------------------------
# Vertex numbering
# ---------------------------------------------------------------------------


def n_vertices_for(n_rows: int) -> int:
    """Number of vertices for a pyramid of *n_rows* rows (cells + source + sink)."""
    return n_rows * (n_rows + 1) // 2 + 2


def vertex_id(row: int, col: int) -> int:
    """Vertex id of the cell at 0-indexed ``(row, col)``.

    Row ``r`` holds ``r + 1`` cells and starts right after the ``r(r+1)/2``
    cells of the rows above it; vertex 0 is reserved for the source.
    """
    return row * (row + 1) // 2 + col + 1


def cell_position(vertex: int) -> tuple[int, int]:
    """Inverse of :func:`vertex_id` for grid vertices (``vertex >= 1``)."""
    if vertex < 1:
        raise ValueError(f"Vertex {vertex} is not a grid cell.")
    k = vertex - 1
    row = (math.isqrt(8 * k + 1) - 1) // 2
    return row, k - row * (row + 1) // 2


# ---------------------------------------------------------------------------
# Graph container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Graph:
    """Immutable pyramid DAG.

    Attributes
    ----------
    rows : tuple of tuple of int
        The grid values, top row first.
    forbidden : tuple of tuple of bool
        Same shape as ``rows``; True where the cell may never be entered.
    adjacency : tuple of tuple of Edge
        ``adjacency[v]`` lists the outgoing edges of vertex ``v`` in
        insertion order.
    """

    rows: tuple[tuple[int, ...], ...]
    forbidden: tuple[tuple[bool, ...], ...]
    adjacency: tuple[tuple[Edge, ...], ...]

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_vertices(self) -> int:
        return len(self.adjacency)

    @property
    def source(self) -> int:
        return SOURCE

    @property
    def sink(self) -> int:
        return self.n_vertices - 1

    @property
    def n_edges(self) -> int:
        return sum(len(out) for out in self.adjacency)

    def edges_from(self, vertex: int) -> tuple[Edge, ...]:
        return self.adjacency[vertex]

    def edges(self) -> Iterator[tuple[int, int, int]]:
        """Yield every edge as ``(source, dest, weight)``."""
        for u, out in enumerate(self.adjacency):
            for dest, weight in out:
                yield u, dest, weight

    def is_cell(self, vertex: int) -> bool:
        return 0 < vertex < self.sink

    def position(self, vertex: int) -> tuple[int, int]:
        """0-indexed ``(row, col)`` of a grid vertex."""
        if not self.is_cell(vertex):
            raise ValueError(
                f"Vertex {vertex} is not a grid cell (valid range [1, {self.sink - 1}])."
            )
        return cell_position(vertex)

    def value(self, vertex: int) -> int:
        row, col = self.position(vertex)
        return self.rows[row][col]

    def is_forbidden(self, vertex: int) -> bool:
        row, col = self.position(vertex)
        return self.forbidden[row][col]

    def in_degree(self) -> np.ndarray:
        """In-degree of every vertex, shape ``(V,)``."""
        deg = np.zeros(self.n_vertices, dtype=np.int64)
        for _, dest, _ in self.edges():
            deg[dest] += 1
        return deg

    def to_adjacency(self) -> np.ndarray:
        """Dense 0/1 adjacency matrix with ``A[j, i] = 1`` iff ``j → i``.

        Weights are not encoded (sink edges weigh 0); use :meth:`edges`
        or :meth:`to_networkx` when weights matter.
        """
        A = np.zeros((self.n_vertices, self.n_vertices), dtype=np.uint8)
        for u, dest, _ in self.edges():
            A[u, dest] = 1
        return A

    def to_networkx(self) -> nx.DiGraph:
        """Export as a ``networkx.DiGraph``.

        Grid nodes carry ``row``, ``col``, ``value`` and ``forbidden``
        attributes; edges carry ``weight`` (negated value).
        """
        G = nx.DiGraph()
        G.add_node(self.source, kind="source")
        for row, values in enumerate(self.rows):
            for col, value in enumerate(values):
                G.add_node(
                    vertex_id(row, col),
                    kind="cell",
                    row=row,
                    col=col,
                    value=value,
                    forbidden=self.forbidden[row][col],
                )
        G.add_node(self.sink, kind="sink")
        G.add_weighted_edges_from(self.edges())
        return G


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build(rows: Rows, is_forbidden: Callable[[int], bool] = is_prime) -> Graph:
    """Build the pyramid DAG.

    Parameters
    ----------
    rows : sequence of sequence of int
        ``N >= 1`` rows; row ``r`` (0-indexed) holds exactly ``r + 1``
        values.  Shape is a precondition and is not checked here; see
        :func:`pyramid_path.reader.validate_rows`.
    is_forbidden : callable, optional
        Predicate marking cells that may never be entered.  Defaults to
        :func:`pyramid_path.primes.is_prime`.

    Returns
    -------
    Graph
        Source → apex edge (unless the apex is forbidden), one edge from each
        existing parent into every admissible cell, and a zero-weight edge
        from every admissible bottom-row cell into the sink.
    """
    n_rows = len(rows)
    n_vertices = n_vertices_for(n_rows)
    sink = n_vertices - 1
    adjacency: list[list[Edge]] = [[] for _ in range(n_vertices)]
    forbidden: list[tuple[bool, ...]] = []

    for row, values in enumerate(rows):
        row_forbidden = tuple(bool(is_forbidden(value)) for value in values)
        forbidden.append(row_forbidden)

        for col, value in enumerate(values):
            if row_forbidden[col]:
                continue
            v = vertex_id(row, col)
            edge = Edge(v, -value)

            if row == 0:
                adjacency[SOURCE].append(edge)
            else:
                if col > 0:
                    adjacency[vertex_id(row - 1, col - 1)].append(edge)
                if col < row:
                    adjacency[vertex_id(row - 1, col)].append(edge)

            if row == n_rows - 1:
                adjacency[v].append(Edge(sink, 0))

    return Graph(
        rows=tuple(tuple(int(x) for x in values) for values in rows),
        forbidden=tuple(forbidden),
        adjacency=tuple(tuple(out) for out in adjacency),
    )


# ---------------------------------------------------------------------------
# Pyramid generators
# ---------------------------------------------------------------------------


def generate_random_pyramid(
    n_rows: int,
    low: int,
    high: int,
    seed: int | np.random.Generator,
) -> list[list[int]]:
    """Draw a pyramid with integers uniform in ``[low, high]``.

    Parameters
    ----------
    n_rows : int
        Number of rows (>= 1).
    low, high : int
        Inclusive value range.
    seed : int or numpy Generator
        Seed (or an already seeded Generator) for reproducibility.

    Returns
    -------
    list of list of int

    Raises
    ------
    ValueError
        If ``n_rows < 1`` or ``low > high``.
    """
    if n_rows < 1:
        raise ValueError(f"n_rows must be >= 1; got {n_rows}.")
    if low > high:
        raise ValueError(f"low must be <= high; got low={low}, high={high}.")

    if not any(not is_prime(x) for x in range(low, high + 1)):
        warnings.warn(
            f"generate_random_pyramid: every value in [{low}, {high}] is prime, "
            "so no cell of the generated pyramid can ever be entered.",
            UserWarning,
            stacklevel=2,
        )

    rng = seed if isinstance(seed, np.random.Generator) else default_rng(seed)
    flat = rng.integers(low, high, size=n_rows * (n_rows + 1) // 2, endpoint=True)
    values = flat.tolist()
    return [values[r * (r + 1) // 2 : (r + 1) * (r + 2) // 2] for r in range(n_rows)]


def pyramid_from_config(
    pyramid_cfg: dict,
    seed: int | np.random.Generator | None = None,
    base_dir: str | Path | None = None,
) -> list[list[int]]:
    """Materialise pyramid rows from a ``pyramid`` config sub-dict.

    Parameters
    ----------
    pyramid_cfg : dict
        Must contain ``type``.  Supported types: ``file`` (``path``),
        ``inline`` (``rows``), ``random`` (``n_rows``, ``low``, ``high``).
    seed : int, numpy Generator or None
        Seed or seeded Generator; required for ``random``.
    base_dir : str, Path or None
        Directory that relative ``file`` paths are resolved against.

    Returns
    -------
    list of list of int

    Raises
    ------
    ValueError
        For unsupported pyramid types, a missing seed, or malformed rows.
    """
    from .reader import MalformedPyramidError, read_pyramid_file, validate_rows

    ptype = pyramid_cfg["type"]

    if ptype == "file":
        path = Path(pyramid_cfg["path"])
        if base_dir is not None and not path.is_absolute():
            path = Path(base_dir) / path
        return read_pyramid_file(path)
    if ptype == "inline":
        rows = pyramid_cfg["rows"]
        if not isinstance(rows, list) or not all(isinstance(row, list) for row in rows):
            raise MalformedPyramidError("Inline pyramid rows must be a list of lists.")
        try:
            rows = [[int(x) for x in row] for row in rows]
        except (TypeError, ValueError) as exc:
            raise MalformedPyramidError(f"Inline pyramid holds a non-integer: {exc}") from exc
        validate_rows(rows)
        return rows
    if ptype == "random":
        if seed is None:
            raise ValueError("A seed is required for random pyramids.")
        return generate_random_pyramid(
            int(pyramid_cfg["n_rows"]),
            int(pyramid_cfg.get("low", 1)),
            int(pyramid_cfg.get("high", 100)),
            seed,
        )

    raise ValueError(f"Unsupported pyramid type: {ptype!r}")

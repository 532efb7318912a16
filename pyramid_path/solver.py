"""
Longest-path solver for the pyramid DAG.

Runs in O(V + E):

    1. Topologically order the vertices with an iterative depth-first
       traversal started from every unvisited vertex.
    2. Relax every edge once, in that order, minimising the sum of the
       negated weights.  Vertices still at +inf are skipped, which keeps
       forbidden (unreachable) cells inert.
    3. Negate the best value at the end vertex chosen by the extraction
       policy.

All working state is local to a call, so solving is reentrant and never
mutates the graph.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass

import numpy as np

from .graph import Graph


# ---------------------------------------------------------------------------
# Extraction policies
# ---------------------------------------------------------------------------

EXTRACTION_STRICT = "strict"
EXTRACTION_FALLBACK = "fallback"
EXTRACTION_POLICIES = {EXTRACTION_STRICT, EXTRACTION_FALLBACK}


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PathResult:
    """Optimal path found by :func:`solve_path`.

    Attributes
    ----------
    max_sum : int
        Sum of the cell values along the path.
    end_vertex : int
        Vertex whose best value was reported (the sink under ``strict``).
    reaches_sink : bool
        False only when the ``fallback`` policy reported an interior vertex.
    vertices : tuple of int
        Grid vertices on the path, top to bottom (source and sink excluded).
    positions : tuple of (int, int)
        0-indexed ``(row, col)`` of each vertex in ``vertices``.
    values : tuple of int
        Cell value of each vertex in ``vertices``.
    """

    max_sum: int
    end_vertex: int
    reaches_sink: bool
    vertices: tuple[int, ...]
    positions: tuple[tuple[int, int], ...]
    values: tuple[int, ...]

    def summary_dict(self) -> dict:
        """Return a JSON-serialisable summary."""
        return {
            "max_sum": self.max_sum,
            "end_vertex": self.end_vertex,
            "reaches_sink": self.reaches_sink,
            "vertices": list(self.vertices),
            "positions": [list(p) for p in self.positions],
            "values": list(self.values),
        }


# ---------------------------------------------------------------------------
# Step 1: topological order
# ---------------------------------------------------------------------------


def topological_order(graph: Graph) -> list[int]:
    """Return every vertex in topological order.

    Depth-first traversal from each unvisited vertex ``0 .. V-1``; a vertex
    is emitted once all of its successors are finished, and the reversed
    finishing sequence is the order.  An explicit stack of
    ``(vertex, successor iterator)`` frames replaces recursion so deep
    pyramids cannot exhaust the interpreter stack.
    """
    n = graph.n_vertices
    visited = np.zeros(n, dtype=bool)
    finished: list[int] = []

    for root in range(n):
        if visited[root]:
            continue
        visited[root] = True
        stack = [(root, iter(graph.edges_from(root)))]

        while stack:
            vertex, successors = stack[-1]
            for dest, _ in successors:
                if not visited[dest]:
                    visited[dest] = True
                    stack.append((dest, iter(graph.edges_from(dest))))
                    break
            else:
                stack.pop()
                finished.append(vertex)

    finished.reverse()
    return finished


# ---------------------------------------------------------------------------
# Step 2: relaxation
# ---------------------------------------------------------------------------


def _relax(graph: Graph, order: list[int]) -> tuple[list[float], list[int]]:
    """Single-source shortest distances (negated sums) and predecessors."""
    best: list[float] = [math.inf] * graph.n_vertices
    pred: list[int] = [-1] * graph.n_vertices
    best[graph.source] = 0

    for u in order:
        if best[u] == math.inf:
            continue
        for dest, weight in graph.edges_from(u):
            candidate = best[u] + weight
            if candidate < best[dest]:
                best[dest] = candidate
                pred[dest] = u

    return best, pred


# ---------------------------------------------------------------------------
# Step 3: extraction
# ---------------------------------------------------------------------------


def _end_vertex(graph: Graph, best: list[float], extraction: str) -> int | None:
    if extraction not in EXTRACTION_POLICIES:
        raise ValueError(
            f"extraction must be one of {sorted(EXTRACTION_POLICIES)}, got {extraction!r}"
        )

    if extraction == EXTRACTION_STRICT:
        return graph.sink if best[graph.sink] != math.inf else None

    # Highest id first; the source (always 0) is not a result.
    for v in range(graph.n_vertices - 1, 0, -1):
        if best[v] != math.inf:
            if v != graph.sink:
                warnings.warn(
                    f"solve: sink is unreachable; fallback extraction reports the best "
                    f"value of vertex {v} {graph.position(v)}, which is not a complete "
                    f"path to the bottom row.",
                    UserWarning,
                    stacklevel=3,
                )
            return v
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def solve_path(graph: Graph, extraction: str = EXTRACTION_STRICT) -> PathResult | None:
    """Find the maximum-sum path and reconstruct it.

    Parameters
    ----------
    graph : Graph
        Output of :func:`pyramid_path.graph.build`.
    extraction : {"strict", "fallback"}, optional
        ``strict`` reports only a path that reaches the sink.  ``fallback``
        scans vertices from the highest id down and reports the first
        reachable one, emitting a ``UserWarning`` when that is not the sink.

    Returns
    -------
    PathResult or None
        None when no admissible path exists.

    Raises
    ------
    ValueError
        For an unknown extraction policy.
    """
    best, pred = _relax(graph, topological_order(graph))
    end = _end_vertex(graph, best, extraction)
    if end is None:
        return None

    vertices: list[int] = []
    v = pred[end] if end == graph.sink else end
    while v != graph.source:
        vertices.append(v)
        v = pred[v]
    vertices.reverse()

    return PathResult(
        max_sum=int(-best[end]),
        end_vertex=end,
        reaches_sink=end == graph.sink,
        vertices=tuple(vertices),
        positions=tuple(graph.position(v) for v in vertices),
        values=tuple(graph.value(v) for v in vertices),
    )


def solve(graph: Graph, extraction: str = EXTRACTION_STRICT) -> int | None:
    """Maximum path sum, or None when no admissible path exists.

    See :func:`solve_path` for the meaning of *extraction*.
    """
    result = solve_path(graph, extraction=extraction)
    return None if result is None else result.max_sum


def format_result(max_sum: int | None) -> str:
    """Render a result the way the command line reports it."""
    if max_sum is None:
        return "Maximum sum does not exist."
    return f"Maximum Sum: {max_sum}"

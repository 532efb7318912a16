"""
pyramid_path — Maximum Path Sum Through a Number Pyramid
=========================================================

Finds the largest sum along a top-to-bottom path through a triangular grid of
integers, moving to one of the two cells below at each step and never
entering a cell whose value is prime.

The pyramid is expanded into a DAG (source → grid → sink) whose edge weights
are the negated cell values; a single topological-order relaxation then gives
the longest path in O(V + E).

Quick start
-----------
>>> from pyramid_path import build, solve
>>> graph = build([[4], [1, 6], [2, 8, 3]])
>>> solve(graph)
18
"""

from .primes import is_prime
from .graph import (
    Edge,
    Graph,
    build,
    vertex_id,
    cell_position,
    n_vertices_for,
    generate_random_pyramid,
    pyramid_from_config,
)
from .solver import (
    solve,
    solve_path,
    topological_order,
    format_result,
    PathResult,
    EXTRACTION_STRICT,
    EXTRACTION_FALLBACK,
)
from .reader import (
    MalformedPyramidError,
    parse_pyramid,
    read_pyramid_file,
    prompt_pyramid,
    validate_rows,
)
from .sampling import admissible_stats, run_sampling, SamplingResult, trial_rngs

__all__ = [
    # primes
    "is_prime",
    # graph
    "Edge", "Graph", "build", "vertex_id", "cell_position", "n_vertices_for",
    "generate_random_pyramid", "pyramid_from_config",
    # solver
    "solve", "solve_path", "topological_order", "format_result", "PathResult",
    "EXTRACTION_STRICT", "EXTRACTION_FALLBACK",
    # reader
    "MalformedPyramidError", "parse_pyramid", "read_pyramid_file",
    "prompt_pyramid", "validate_rows",
    # sampling
    "run_sampling", "SamplingResult", "trial_rngs", "admissible_stats",
]

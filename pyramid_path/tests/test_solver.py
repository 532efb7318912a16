"""
Unit tests for the longest-path solver.
Compatible with both pytest and unittest.
"""

from __future__ import annotations

import sys
import unittest
import warnings
from pathlib import Path

import networkx as nx

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pyramid_path.graph import build, generate_random_pyramid, vertex_id
from pyramid_path.primes import is_prime
from pyramid_path.reader import read_pyramid_file
from pyramid_path.solver import (
    solve,
    solve_path,
    topological_order,
    format_result,
    EXTRACTION_FALLBACK,
)

EXAMPLES_DIR = Path(__file__).parent.parent.parent / "examples"


def brute_force_max(rows):
    """Enumerate every top-to-bottom path; None when all of them hit a prime."""
    n = len(rows)
    best = None
    for mask in range(2 ** (n - 1)):
        col = 0
        total = rows[0][0]
        ok = not is_prime(total)
        for r in range(1, n):
            if not ok:
                break
            col += (mask >> (r - 1)) & 1
            value = rows[r][col]
            ok = not is_prime(value)
            total += value
        if ok and (best is None or total > best):
            best = total
    return best


class TestKnownPyramids(unittest.TestCase):

    def test_three_row_example(self):
        self.assertEqual(solve(build([[4], [1, 6], [2, 8, 3]])), 18)

    def test_example_file(self):
        rows = read_pyramid_file(EXAMPLES_DIR / "pyramid.txt")
        path = solve_path(build(rows))
        self.assertEqual(path.max_sum, 24)
        self.assertEqual(path.values, (1, 8, 6, 9))
        self.assertEqual(path.positions, ((0, 0), (1, 0), (2, 1), (3, 2)))
        self.assertTrue(path.reaches_sink)

    def test_large_example_file_matches_brute_force(self):
        rows = read_pyramid_file(EXAMPLES_DIR / "triangle.txt")
        self.assertEqual(solve(build(rows)), brute_force_max(rows))

    def test_single_row_non_prime(self):
        for v in (0, 1, 4, 9, 100, -5):
            self.assertEqual(solve(build([[v]])), v)

    def test_single_row_prime(self):
        for v in (2, 3, 13):
            self.assertIsNone(solve(build([[v]])))

    def test_prime_apex_blocks_everything(self):
        rows = [[7], [4, 6], [8, 9, 10]]
        self.assertIsNone(solve(build(rows)))
        self.assertIsNone(solve(build(rows), extraction=EXTRACTION_FALLBACK))

    def test_negative_values(self):
        self.assertEqual(solve(build([[-1], [-4, -6], [-8, -9, -10]])), -13)

    def test_prefers_longer_admissible_detour(self):
        # 100 is reachable only through 1; the greedy choice 50 dead-ends on primes.
        rows = [[1], [1, 50], [100, 7, 11]]
        self.assertEqual(solve(build(rows)), 102)


class TestMatchesBruteForce(unittest.TestCase):

    def test_random_pyramids(self):
        for seed in range(60):
            n_rows = 1 + seed % 10
            rows = generate_random_pyramid(n_rows, 1, 30, seed=seed)
            self.assertEqual(solve(build(rows)), brute_force_max(rows), f"seed={seed}")

    def test_path_is_admissible_and_sums_to_result(self):
        for seed in range(30):
            rows = generate_random_pyramid(8, 1, 40, seed=seed)
            path = solve_path(build(rows))
            if path is None:
                continue
            self.assertEqual(sum(path.values), path.max_sum)
            self.assertEqual(len(path.vertices), len(rows))
            self.assertTrue(all(not is_prime(v) for v in path.values))
            cols = [c for _, c in path.positions]
            for a, b in zip(cols, cols[1:]):
                self.assertIn(b - a, (0, 1))

    def test_strict_result_iff_sink_reachable(self):
        for seed in range(30):
            g = build(generate_random_pyramid(6, 1, 12, seed=seed))
            reachable = nx.has_path(g.to_networkx(), g.source, g.sink)
            self.assertEqual(solve(g) is not None, reachable)


class TestTopologicalOrder(unittest.TestCase):

    def test_every_vertex_once(self):
        g = build(generate_random_pyramid(10, 1, 50, seed=2))
        order = topological_order(g)
        self.assertEqual(sorted(order), list(range(g.n_vertices)))

    def test_edges_respect_order_up_to_20_rows(self):
        for n_rows in range(1, 21):
            g = build(generate_random_pyramid(n_rows, 1, 60, seed=n_rows))
            index = {v: i for i, v in enumerate(topological_order(g))}
            for u, v, _ in g.edges():
                self.assertLess(index[u], index[v], f"n_rows={n_rows} edge {u}->{v}")

    def test_isolated_forbidden_vertices_included(self):
        g = build([[2], [3, 5], [7, 11, 13]])
        self.assertEqual(g.n_edges, 0)
        self.assertEqual(sorted(topological_order(g)), list(range(g.n_vertices)))

    def test_deep_pyramid_without_recursion(self):
        # Deeper than the default interpreter recursion limit.
        n_rows = 1100
        g = build([[1] * (r + 1) for r in range(n_rows)])
        self.assertEqual(solve(g), n_rows)


class TestExtraction(unittest.TestCase):

    def test_blocked_bottom_row_strict_is_none(self):
        rows = [[4], [6, 8], [2, 3, 5]]
        self.assertIsNone(solve(build(rows)))

    def test_blocked_bottom_row_fallback_reports_interior(self):
        rows = [[4], [6, 8], [2, 3, 5]]
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            path = solve_path(build(rows), extraction=EXTRACTION_FALLBACK)
        self.assertEqual(path.max_sum, 12)
        self.assertFalse(path.reaches_sink)
        self.assertEqual(path.end_vertex, vertex_id(1, 1))
        self.assertEqual(path.values, (4, 8))
        user_warnings = [w for w in caught if issubclass(w.category, UserWarning)]
        self.assertEqual(len(user_warnings), 1)
        self.assertIn("sink", str(user_warnings[0].message))

    def test_fallback_is_scan_order_dependent(self):
        # The highest-numbered reachable vertex wins, not the largest sum.
        rows = [[4], [8, 6], [2, 3, 5]]
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            self.assertEqual(solve(build(rows), extraction=EXTRACTION_FALLBACK), 10)

    def test_fallback_equals_strict_when_sink_reachable(self):
        for seed in range(20):
            g = build(generate_random_pyramid(7, 1, 40, seed=seed))
            strict = solve(g)
            if strict is None:
                continue
            with warnings.catch_warnings():
                warnings.simplefilter("error", UserWarning)
                self.assertEqual(solve(g, extraction=EXTRACTION_FALLBACK), strict)

    def test_unknown_policy_raises(self):
        with self.assertRaises(ValueError):
            solve(build([[4]]), extraction="greedy")


class TestReentrancy(unittest.TestCase):

    def test_solve_twice_identical(self):
        g = build(generate_random_pyramid(12, 1, 99, seed=9))
        adjacency_before = g.adjacency
        first = solve_path(g)
        second = solve_path(g)
        self.assertEqual(first, second)
        self.assertIs(g.adjacency, adjacency_before)
        self.assertEqual(g, build(g.rows))


class TestFormatResult(unittest.TestCase):

    def test_messages(self):
        self.assertEqual(format_result(18), "Maximum Sum: 18")
        self.assertEqual(format_result(0), "Maximum Sum: 0")
        self.assertEqual(format_result(None), "Maximum sum does not exist.")


if __name__ == "__main__":
    unittest.main()

"""Unit tests for the configuration module."""

from __future__ import annotations
import json, sys, tempfile, unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))
from pyramid_path.config import load_config, build_rng, sampling_params

VALID_CFG = {
    "mode": "single",
    "pyramid": {"type": "random", "n_rows": 10, "low": 1, "high": 50},
    "seed": 42,
}

def _write_cfg(d):
    f = tempfile.NamedTemporaryFile(suffix=".json", delete=False, mode="w")
    json.dump(d, f); f.close()
    return Path(f.name)


class TestLoadConfig(unittest.TestCase):

    def test_valid_config_loads(self):
        cfg = load_config(_write_cfg(VALID_CFG))
        self.assertEqual(cfg["seed"], 42)

    def test_extraction_defaults_to_strict(self):
        cfg = load_config(_write_cfg(VALID_CFG))
        self.assertEqual(cfg["extraction"], "strict")

    def test_fallback_extraction_accepted(self):
        cfg = load_config(_write_cfg({**VALID_CFG, "extraction": "fallback"}))
        self.assertEqual(cfg["extraction"], "fallback")

    def test_unknown_extraction_raises(self):
        with self.assertRaises(ValueError):
            load_config(_write_cfg({**VALID_CFG, "extraction": "greedy"}))

    def test_missing_mode_raises(self):
        bad = {k: v for k, v in VALID_CFG.items() if k != "mode"}
        with self.assertRaises(ValueError):
            load_config(_write_cfg(bad))

    def test_invalid_mode_raises(self):
        with self.assertRaises(ValueError):
            load_config(_write_cfg({**VALID_CFG, "mode": "batch"}))

    def test_invalid_pyramid_type_raises(self):
        with self.assertRaises(ValueError):
            load_config(_write_cfg({**VALID_CFG, "pyramid": {"type": "unknown"}}))

    def test_missing_type_param_raises(self):
        with self.assertRaises(ValueError):
            load_config(_write_cfg({**VALID_CFG, "pyramid": {"type": "file"}}))

    def test_random_without_seed_raises(self):
        bad = {k: v for k, v in VALID_CFG.items() if k != "seed"}
        with self.assertRaises(ValueError):
            load_config(_write_cfg(bad))

    def test_inline_without_seed_ok(self):
        cfg = load_config(_write_cfg({"mode": "single", "pyramid": {"type": "inline", "rows": [[4]]}}))
        self.assertNotIn("seed", cfg)

    def test_sampling_without_seed_raises(self):
        with self.assertRaises(ValueError):
            load_config(_write_cfg({"mode": "sampling", "pyramid": {"type": "inline", "rows": [[4]]}}))

    def test_sampling_zero_trials_raises(self):
        with self.assertRaises(ValueError):
            load_config(_write_cfg({**VALID_CFG, "mode": "sampling", "sampling": {"trials": 0}}))

    def test_non_positive_rows_raises(self):
        bad = {**VALID_CFG, "pyramid": {"type": "random", "n_rows": 0}}
        with self.assertRaises(ValueError):
            load_config(_write_cfg(bad))

    def test_file_not_found_raises(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/path/config.json")


class TestHelpers(unittest.TestCase):

    def test_build_rng_from_config(self):
        val1 = build_rng(VALID_CFG).integers(0, 1000)
        val2 = build_rng(VALID_CFG).integers(0, 1000)
        self.assertEqual(val1, val2)

    def test_sampling_params_inherit_random_pyramid(self):
        params = sampling_params({**VALID_CFG, "sampling": {"trials": 30}})
        self.assertEqual(params, {"trials": 30, "n_rows": 10, "low": 1, "high": 50})

    def test_sampling_params_override(self):
        cfg = {**VALID_CFG, "sampling": {"n_rows": 4, "high": 9}}
        params = sampling_params(cfg)
        self.assertEqual(params, {"trials": 100, "n_rows": 4, "low": 1, "high": 9})

    def test_sampling_params_defaults_for_non_random_pyramid(self):
        cfg = {"mode": "sampling", "seed": 1, "pyramid": {"type": "inline", "rows": [[4]]}}
        self.assertEqual(
            sampling_params(cfg), {"trials": 100, "n_rows": 10, "low": 1, "high": 100}
        )


if __name__ == "__main__":
    unittest.main()

import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "converter"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from asciify_core.config import AppConfig, load_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.conversion.char_set, "CUSTOM")
            self.assertEqual(cfg.conversion.custom_chars, "@#%xo-+:.")
            self.assertEqual(cfg.conversion.density, 50)
            self.assertEqual(cfg.conversion.aspect_scale, 0.5)
            self.assertFalse(cfg.conversion.color_enabled)
            self.assertEqual(cfg.loader.max_width, 1024)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.conversion.char_set = "BLOCK"
            cfg.conversion.density = 120
            cfg.adjustment.contrast = -40
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.conversion.char_set, "BLOCK")
            self.assertEqual(reloaded.conversion.density, 120)
            self.assertEqual(reloaded.adjustment.contrast, -40)

    def test_out_of_range_values_are_clamped(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "conversion": {"density": 500, "aspect_scale": -3, "char_set": "FANCY"},
                "adjustment": {"brightness": 300, "contrast": -250},
                "loader": {"max_width": 1},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.conversion.density, 200)
            self.assertEqual(cfg.conversion.aspect_scale, -1.0)
            self.assertEqual(cfg.conversion.char_set, "CUSTOM")
            self.assertEqual(cfg.adjustment.brightness, 100)
            self.assertEqual(cfg.adjustment.contrast, -100)
            self.assertEqual(cfg.loader.max_width, 16)

    def test_empty_custom_ramp_gets_default(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"conversion": {"char_set": "CUSTOM", "custom_chars": ""}}), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.conversion.custom_chars, "@#%xo-+:.")

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.conversion.density, 50)

    def test_conversion_config_view(self):
        cfg = AppConfig()
        cfg.conversion.color_enabled = True
        conv = cfg.to_conversion_config()
        self.assertTrue(conv.color_enabled)
        self.assertEqual(conv.custom_chars, cfg.conversion.custom_chars)


if __name__ == "__main__":
    unittest.main()

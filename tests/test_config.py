"""
Tests for the JSON config file and data directory.
"""
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend import config


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(ignore_cleanup_errors=True)
        self.data_dir = Path(self.tmp.name) / "data"
        self.env = patch.dict(os.environ, {"MARGINALIA_DATA_DIR": str(self.data_dir)})
        self.env.start()

    def tearDown(self):
        self.env.stop()
        self.tmp.cleanup()

    def test_data_dir_override_is_created(self):
        self.assertEqual(config.get_data_dir(), self.data_dir)
        self.assertTrue(self.data_dir.is_dir())

    def test_defaults_without_file(self):
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.get_port(), config.DEFAULT_PORT)

    def test_set_port_persists(self):
        config.set_port(9001)
        self.assertEqual(config.get_port(), 9001)
        saved = json.loads(config.get_config_path().read_text(encoding="utf-8"))
        self.assertEqual(saved, {"server_port": 9001})

    def test_corrupt_file_falls_back_to_defaults(self):
        config.get_config_path().write_text("{not json", encoding="utf-8")
        self.assertEqual(config.load_config(), {})

    def test_non_numeric_port_falls_back_to_default(self):
        for value in ["eighty", None, [8741]]:
            with self.subTest(value=value):
                config.save_config({"server_port": value})
                self.assertEqual(config.get_port(), config.DEFAULT_PORT)

    def test_numeric_string_port(self):
        config.save_config({"server_port": "9002"})
        self.assertEqual(config.get_port(), 9002)

    def test_non_object_file_falls_back_to_defaults(self):
        config.get_config_path().write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()

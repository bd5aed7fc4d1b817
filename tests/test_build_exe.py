"""
Tests for the PyInstaller build script.
"""
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tools import build_exe


class TestBuildCommand(unittest.TestCase):
    def test_bundles_frontend_and_launcher(self):
        frontend = Path("/src/frontend/dist")
        cmd = build_exe.build_command(frontend, Path("/out/dist"), Path("/out/work"))

        self.assertEqual(cmd[:3], [sys.executable, "-m", "PyInstaller"])
        self.assertIn("--onedir", cmd)
        self.assertIn("--windowed", cmd)
        add_data = cmd[cmd.index("--add-data") + 1]
        self.assertEqual(add_data, f"{frontend}{os.pathsep}frontend/dist")
        self.assertTrue(cmd[-1].endswith("launcher.py"))

    def test_onefile_console(self):
        cmd = build_exe.build_command(Path("f"), Path("d"), Path("w"), onefile=True, console=True)
        self.assertIn("--onefile", cmd)
        self.assertIn("--console", cmd)
        self.assertNotIn("--windowed", cmd)

    def test_missing_frontend_build(self):
        with patch.object(build_exe, "project_root", Path("/nonexistent-marginalia")):
            self.assertEqual(build_exe.main([]), 2)


if __name__ == "__main__":
    unittest.main()

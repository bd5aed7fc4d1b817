"""
API-level tests for the shell commands.

These tests:
- build the backend app with fixed launch options
- hit the FastAPI endpoints via TestClient
- read and write real files in a temporary directory
"""
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from fastapi.testclient import TestClient

# Ensure project root is on sys.path when tests are executed as scripts.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend.cli_options import LaunchOptions
from backend.main import app_origins, create_app


class ShellApiTestCase(unittest.TestCase):
    options = LaunchOptions()

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(ignore_cleanup_errors=True)
        self.root = Path(self.tmp.name)
        self.env = patch.dict(os.environ, {"MARGINALIA_DATA_DIR": str(self.root / "data")})
        self.env.start()
        self.close_window = Mock()
        self.app = create_app(
            self.options,
            close_window=self.close_window,
            frontend_dir=self.root / "no-frontend",
        )
        self.client = TestClient(self.app)

    def tearDown(self):
        self.env.stop()
        self.tmp.cleanup()


class TestLaunchOptionsApi(ShellApiTestCase):
    options = LaunchOptions(
        file_path="/docs/draft.md",
        bundle_dir="/exports",
        principles_path="/docs/principles.md",
    )

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["status"], "ok")
        self.assertIn(data["buildType"], ("dev", "release"))

    def test_file_path(self):
        response = self.client.get("/api/cli/file-path")
        self.assertEqual(response.json(), {"filePath": "/docs/draft.md"})

    def test_options_are_camel_case(self):
        response = self.client.get("/api/cli/options")
        self.assertEqual(
            response.json(),
            {
                "filePath": "/docs/draft.md",
                "bundleDir": "/exports",
                "principlesPath": "/docs/principles.md",
                "outPath": None,
            },
        )

    def test_options_state_is_shared(self):
        self.assertIs(self.app.state.launch_options, self.options)


class TestEmptyLaunchOptions(ShellApiTestCase):
    def test_file_path_absent(self):
        self.assertEqual(self.client.get("/api/cli/file-path").json(), {"filePath": None})


class TestFileCommands(ShellApiTestCase):
    def test_write_creates_parents_then_read(self):
        path = self.root / "nested" / "dir" / "doc.md"
        response = self.client.post("/api/files/write", json={"path": str(path), "content": "# Title\n"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(path.read_text(encoding="utf-8"), "# Title\n")

        response = self.client.post("/api/files/read", json={"path": str(path)})
        self.assertEqual(response.json(), {"content": "# Title\n"})

    def test_read_missing_file(self):
        response = self.client.post("/api/files/read", json={"path": str(self.root / "missing.md")})
        self.assertEqual(response.status_code, 500)
        self.assertIn("Failed to read file", response.json()["detail"])

    def test_save_bundle(self):
        response = self.client.post(
            "/api/bundles",
            json={
                "bundleDir": str(self.root / "bundles"),
                "bundleName": "draft-1",
                "files": {"document.md": "body", "notes.json": "{}"},
            },
        )
        self.assertEqual(response.status_code, 200)
        bundle_path = Path(response.json()["path"])
        self.assertEqual(bundle_path, self.root / "bundles" / "draft-1")
        self.assertEqual((bundle_path / "document.md").read_text(encoding="utf-8"), "body")
        self.assertEqual((bundle_path / "notes.json").read_text(encoding="utf-8"), "{}")

    def test_save_bundle_into_file_fails(self):
        blocker = self.root / "blocker"
        blocker.write_text("x", encoding="utf-8")
        response = self.client.post(
            "/api/bundles",
            json={"bundleDir": str(blocker), "bundleName": "b", "files": {}},
        )
        self.assertEqual(response.status_code, 500)
        self.assertIn("Failed to create bundle directory", response.json()["detail"])

    def test_home_dir(self):
        response = self.client.get("/api/home-dir")
        self.assertEqual(response.json(), {"path": str(Path.home())})


class TestWindowAndConfig(ShellApiTestCase):
    def test_close_window_calls_hook(self):
        response = self.client.post("/api/window/close")
        self.assertEqual(response.status_code, 200)
        self.close_window.assert_called_once_with()

    def test_close_without_window(self):
        client = TestClient(create_app(LaunchOptions(), frontend_dir=self.root / "none"))
        self.assertEqual(client.post("/api/window/close").status_code, 503)

    def test_port_config(self):
        self.assertEqual(self.client.post("/api/config/port", json={"port": 9100}).status_code, 200)
        self.assertEqual(self.client.get("/api/config/port").json(), {"port": 9100})

    def test_port_out_of_range(self):
        self.assertEqual(self.client.post("/api/config/port", json={"port": 80}).status_code, 400)


class TestOrigins(ShellApiTestCase):
    """Only the window's own origin and the dev server may call the API from a browser."""

    def setUp(self):
        super().setUp()
        self.secret = self.root / "secret.txt"
        self.secret.write_text("TOPSECRET", encoding="utf-8")
        self.app = create_app(
            LaunchOptions(),
            frontend_dir=self.root / "no-frontend",
            allowed_origins=app_origins(8741, "http://localhost:1420"),
        )
        self.client = TestClient(self.app)

    def test_app_origins(self):
        self.assertEqual(app_origins(8741), ["http://127.0.0.1:8741", "http://localhost:8741"])
        self.assertIn("http://localhost:1420", app_origins(8741, "http://localhost:1420"))
        self.assertIn("http://127.0.0.1:1420", app_origins(8741, "http://localhost:1420"))

    def test_foreign_origin_cannot_read(self):
        response = self.client.post(
            "/api/files/read",
            json={"path": str(self.secret)},
            headers={"Origin": "https://evil.example"},
        )
        self.assertEqual(response.status_code, 403)
        self.assertNotIn("access-control-allow-origin", response.headers)
        self.assertNotIn("TOPSECRET", response.text)

    def test_foreign_origin_cannot_write(self):
        target = self.root / "dropped.txt"
        response = self.client.post(
            "/api/files/write",
            json={"path": str(target), "content": "x"},
            headers={"Origin": "https://evil.example"},
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(target.exists())

    def test_foreign_preflight_is_not_allowed(self):
        response = self.client.options(
            "/api/files/read",
            headers={
                "Origin": "https://evil.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )
        self.assertNotEqual(response.headers.get("access-control-allow-origin"), "https://evil.example")
        self.assertNotEqual(response.headers.get("access-control-allow-origin"), "*")

    def test_dev_server_origin_allowed(self):
        response = self.client.post(
            "/api/files/read",
            json={"path": str(self.secret)},
            headers={"Origin": "http://localhost:1420"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], "http://localhost:1420")
        self.assertEqual(response.json(), {"content": "TOPSECRET"})

    def test_own_origin_allowed(self):
        response = self.client.get("/api/cli/options", headers={"Origin": "http://127.0.0.1:8741"})
        self.assertEqual(response.status_code, 200)

    def test_default_allows_no_browser_origin(self):
        client = TestClient(create_app(LaunchOptions(), frontend_dir=self.root / "none"))
        response = client.get("/api/home-dir", headers={"Origin": "http://localhost:1420"})
        self.assertEqual(response.status_code, 403)


class TestFrontendMount(unittest.TestCase):
    def test_serves_index_and_keeps_api(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "index.html").write_text("<html>editor</html>", encoding="utf-8")
            client = TestClient(create_app(LaunchOptions(file_path="x.md"), frontend_dir=Path(tmp)))
            self.assertIn("editor", client.get("/").text)
            self.assertEqual(client.get("/api/cli/file-path").json(), {"filePath": "x.md"})


if __name__ == "__main__":
    unittest.main()

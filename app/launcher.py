"""
Desktop launcher for Marginalia using pywebview.
"""
import logging
import os
import socket
import sys
import threading
import time
from pathlib import Path
from typing import Callable, Optional

# Add project root to Python path so imports work
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import requests
import uvicorn
import webview

from app.window import MAIN_WINDOW, APP_TITLE, WindowSurface, report_dev_server_unreachable
from backend.cli_options import resolve_launch_options
from backend.config import configure_logging, get_port
from backend.dev_server import dev_server_url, is_reachable_with_retry
from backend.feature_flags import BUILD_TYPE_VAR, get_build_type, is_dev_build
from backend.main import app_origins, create_app

logger = logging.getLogger(__name__)


class ServerThread(threading.Thread):
    """Thread to run the FastAPI backend."""
    def __init__(self, app, port):
        super().__init__(daemon=True)
        self.app = app
        self.port = port
        self.server = None

    def run(self):
        config = uvicorn.Config(self.app, host="127.0.0.1", port=self.port, log_level="info")
        self.server = uvicorn.Server(config)
        try:
            self.server.run()
        except Exception:
            logger.exception("Backend server crashed")

    def shutdown(self):
        if self.server:
            self.server.should_exit = True


def is_port_in_use(port):
    """Check if a port is in use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(('127.0.0.1', port)) == 0


def wait_for_server(port, max_retries=30):
    """Wait for the backend health endpoint to answer."""
    for i in range(max_retries):
        try:
            response = requests.get(f"http://127.0.0.1:{port}/api/health", timeout=1)
            if response.status_code == 200:
                return True
        except requests.RequestException:
            pass
        if i < max_retries - 1:
            time.sleep(0.5)
    return False


def get_readiness_check() -> Optional[Callable[[str], bool]]:
    """The dev server reachability check, or None when the build doesn't use one."""
    if is_dev_build():
        return is_reachable_with_retry
    return None


def main(argv=None):
    """Launch the desktop application."""
    if argv is None:
        argv = sys.argv
    # Resolved before anything else exists; shared read-only from here on
    options = resolve_launch_options(argv)

    log_path = configure_logging()
    logger.info("Marginalia starting (%s build), log: %s", get_build_type(), log_path)
    logger.info("Launch options: %s", options)

    port = get_port()
    if is_port_in_use(port):
        print(f"ERROR: Port {port} is already in use by another application.")
        print("Change `server_port` in marginalia_config.json, or stop the application using it.")
        sys.exit(1)

    if is_dev_build():
        frontend_url = dev_server_url()
        origins = app_origins(port, frontend_url)
    else:
        frontend_url = f"http://127.0.0.1:{port}"
        origins = app_origins(port)

    surface = WindowSurface()
    backend_app = create_app(
        options,
        close_window=lambda: surface.close_window(MAIN_WINDOW),
        allowed_origins=origins,
    )

    server_thread = ServerThread(backend_app, port)
    server_thread.start()
    if not wait_for_server(port):
        print("Failed to start server")
        sys.exit(1)

    readiness_check = get_readiness_check()
    window = webview.create_window(
        title=APP_TITLE,
        url=frontend_url,
        width=1280,
        height=860,
        min_size=(800, 600),
        text_select=True,
        # Kept hidden until the dev server answers
        hidden=readiness_check is not None,
    )
    surface.add_window(MAIN_WINDOW, window, visible=readiness_check is None)

    if readiness_check is not None and not readiness_check(frontend_url):
        server_thread.shutdown()
        report_dev_server_unreachable(surface)
        return

    def on_started():
        surface.show_window(MAIN_WINDOW)

    # webview.start() blocks until the window is closed
    try:
        webview.start(on_started, debug=is_dev_build())
    except KeyboardInterrupt:
        print("Keyboard interrupt received")
    finally:
        server_thread.shutdown()
        logger.info("Marginalia exited")


def main_dev(argv=None):
    """Launch against the frontend dev server (source checkouts)."""
    os.environ.setdefault(BUILD_TYPE_VAR, "dev")
    is_dev_build.cache_clear()
    main(argv)


if __name__ == "__main__":
    main_dev()

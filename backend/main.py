"""
FastAPI backend for Marginalia.

The desktop launcher creates one app per process with the resolved launch options;
routes read them from `app.state.launch_options` and never modify them.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from marginalia_version import __version__ as MARGINALIA_VERSION

from api.models import HealthResponse
from backend.cli_options import LaunchOptions
from backend.config import get_port, set_port
from backend.dev_server import dev_server_origins
from backend.feature_flags import get_build_type
from backend.routes import shell

logger = logging.getLogger(__name__)


def get_frontend_dir() -> Path:
    """Directory holding the built frontend (index.html + assets)."""
    override = os.getenv("MARGINALIA_FRONTEND_DIR")
    if override:
        return Path(override).expanduser()
    # PyInstaller unpacks bundled data under sys._MEIPASS
    base = Path(getattr(sys, "_MEIPASS", Path(__file__).parent.parent))
    return base / "frontend" / "dist"


def app_origins(port: int, dev_url: Optional[str] = None) -> List[str]:
    """Origins allowed to call the API: the backend itself, plus the dev server if given."""
    origins = [f"http://127.0.0.1:{port}", f"http://localhost:{port}"]
    if dev_url is not None:
        origins.extend(dev_server_origins(dev_url))
    return origins


class PortConfigRequest(BaseModel):
    port: int


def create_app(
    launch_options: LaunchOptions,
    close_window: Optional[Callable[[], None]] = None,
    frontend_dir: Optional[Path] = None,
    allowed_origins: Iterable[str] = (),
) -> FastAPI:
    """
    Build the backend app around this process's launch options.

    Only `allowed_origins` (the window's own origin, plus the dev server in dev builds)
    may call the API from a browser; the shell commands touch arbitrary files.
    """
    allowed_origins = list(allowed_origins)
    app = FastAPI(title="Marginalia", version=MARGINALIA_VERSION)
    app.state.launch_options = launch_options
    app.state.close_window = close_window

    @app.middleware("http")
    async def reject_foreign_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is not None and origin not in allowed_origins and request.url.path.startswith("/api/"):
            logger.warning("Rejected %s %s from origin %s", request.method, request.url.path, origin)
            return JSONResponse(status_code=403, content={"detail": "Origin not allowed"})
        return await call_next(request)

    # CORS for the dev server frontend on another port; added last so it runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="ok", version=MARGINALIA_VERSION, build_type=get_build_type())

    # Config API endpoints
    @app.get("/api/config/port")
    async def get_server_port():
        """Get configured server port."""
        return {"port": get_port()}

    @app.post("/api/config/port")
    async def set_server_port(request: PortConfigRequest):
        """Set server port. Takes effect on next launch."""
        if request.port < 1024 or request.port > 65535:
            raise HTTPException(status_code=400, detail="Port must be between 1024 and 65535")
        set_port(request.port)
        return {"status": "saved", "port": request.port}

    app.include_router(shell.router)

    # Packaged frontend; mounted last so /api routes win
    if frontend_dir is None:
        frontend_dir = get_frontend_dir()
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")
    else:
        logger.info("No frontend build at %s; serving API only", frontend_dir)

    return app

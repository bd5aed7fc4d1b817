"""
Shell command routes called by the editor frontend.
"""
import logging

from fastapi import APIRouter, HTTPException, Request

from api.models import (
    FilePathResponse,
    LaunchOptionsResponse,
    PathResponse,
    ReadFileRequest,
    ReadFileResponse,
    SaveBundleRequest,
    StatusResponse,
    WriteFileRequest,
)
from backend import files
from backend.cli_options import LaunchOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["shell"])


def _launch_options(request: Request) -> LaunchOptions:
    return request.app.state.launch_options


@router.get("/cli/file-path", response_model=FilePathResponse)
async def get_cli_file_path(request: Request):
    """Get the document path passed on the command line, if any."""
    return FilePathResponse(file_path=_launch_options(request).file_path)


@router.get("/cli/options", response_model=LaunchOptionsResponse)
async def get_cli_options(request: Request):
    """Get all launch options."""
    options = _launch_options(request)
    return LaunchOptionsResponse(
        file_path=options.file_path,
        bundle_dir=options.bundle_dir,
        principles_path=options.principles_path,
        out_path=options.out_path,
    )


@router.post("/files/read", response_model=ReadFileResponse)
def read_file(body: ReadFileRequest):
    try:
        return ReadFileResponse(content=files.read_file(body.path))
    except files.ShellCommandError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/files/write", response_model=StatusResponse)
def write_file(body: WriteFileRequest):
    try:
        files.write_file(body.path, body.content)
    except files.ShellCommandError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return StatusResponse()


@router.post("/bundles", response_model=PathResponse)
def save_bundle(body: SaveBundleRequest):
    try:
        path = files.save_bundle(body.bundle_dir, body.bundle_name, body.files)
    except files.ShellCommandError as e:
        raise HTTPException(status_code=500, detail=str(e))
    logger.info("Saved bundle %s (%d files)", path, len(body.files))
    return PathResponse(path=path)


@router.get("/home-dir", response_model=PathResponse)
def get_home_dir():
    try:
        return PathResponse(path=files.get_home_dir())
    except files.ShellCommandError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/window/close", response_model=StatusResponse)
def close_window(request: Request):
    """Close the main window and exit. The launcher installs the close hook."""
    close_hook = getattr(request.app.state, "close_window", None)
    if close_hook is None:
        raise HTTPException(status_code=503, detail="No window attached")
    try:
        close_hook()
    except Exception as e:
        logger.exception("Failed to close window")
        raise HTTPException(status_code=500, detail=f"Failed to close window: {e}")
    return StatusResponse()

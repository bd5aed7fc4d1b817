"""
Pydantic models for API requests and responses.

The frontend speaks camelCase, so every model serializes with camelCase aliases
while Python code uses snake_case field names.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(CamelModel):
    status: str
    version: str
    build_type: str


class LaunchOptionsResponse(CamelModel):
    """Launch options resolved from the command line."""
    file_path: Optional[str] = None
    bundle_dir: Optional[str] = None
    principles_path: Optional[str] = None
    out_path: Optional[str] = None


class FilePathResponse(CamelModel):
    file_path: Optional[str] = None


class ReadFileRequest(CamelModel):
    path: str


class ReadFileResponse(CamelModel):
    content: str


class WriteFileRequest(CamelModel):
    path: str
    content: str


class SaveBundleRequest(CamelModel):
    """A bundle is a named directory of text files."""
    bundle_dir: str
    bundle_name: str
    files: Dict[str, str] = {}


class PathResponse(CamelModel):
    path: str


class StatusResponse(CamelModel):
    status: str = "ok"

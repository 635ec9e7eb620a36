"""Uploading files and looking up uploaded files."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Mapping

from .request import Core, HTTPResponse

_UPLOAD_PATH = "/v1/files/upload"
_RETRIEVE_PATH = "/v1/files/retrieve"


@dataclass
class FileInfo:
    """An uploaded file as the API describes it."""

    id: str = ""
    bytes: int = 0
    created_at: int = 0
    file_name: str = ""
    http_response: HTTPResponse | None = field(default=None, compare=False, repr=False)

    @property
    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None, http_response: HTTPResponse | None = None
    ) -> "FileInfo":
        data = data or {}
        return cls(
            id=str(data.get("id") or ""),
            bytes=int(data.get("bytes") or 0),
            created_at=int(data.get("created_at") or 0),
            file_name=str(data.get("file_name") or ""),
            http_response=http_response,
        )


class UploadFile:
    """File content to upload, with the name it is sent under."""

    def __init__(self, reader: BinaryIO | bytes | bytearray, name: str) -> None:
        if isinstance(reader, (bytes, bytearray)):
            reader = io.BytesIO(bytes(reader))
        self.reader = reader
        self.name = name

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes of content (all of it by default)."""
        return self.reader.read(size)


class Files:
    """File operations of the API."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def upload(self, file: UploadFile) -> FileInfo:
        """Upload ``file`` and return what the API recorded for it."""
        result = self._core.upload_file(_UPLOAD_PATH, file, file.name)
        return FileInfo.from_dict(result.data, result.http_response)

    def retrieve(self, file_id: str) -> FileInfo:
        """Look up a previously uploaded file by its id."""
        result = self._core.request("POST", _RETRIEVE_PATH, params={"file_id": file_id})
        return FileInfo.from_dict(result.data, result.http_response)
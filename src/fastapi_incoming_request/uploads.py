"""Upload metadata — UploadedFile records and the upload tree."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Any

from starlette.datastructures import UploadFile

from fastapi_incoming_request.config import DEFAULT_OPTIONS, ParserOptions
from fastapi_incoming_request.query import build_tree
from fastapi_incoming_request.shapes import freeze


class UploadError(IntEnum):
    """Per-file upload status codes."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


@dataclass(frozen=True)
class UploadedFile:
    """Immutable metadata for one submitted file."""

    field_name: str
    client_filename: str | None = None
    media_type: str | None = None
    size: int | None = None
    error: UploadError = UploadError.OK

    @property
    def ok(self) -> bool:
        return self.error is UploadError.OK

    @classmethod
    def from_upload(
        cls,
        field_name: str,
        upload: UploadFile,
        options: ParserOptions = DEFAULT_OPTIONS,
    ) -> UploadedFile:
        size = upload.size
        if not upload.filename and not size:
            error = UploadError.NO_FILE
        elif (
            options.max_upload_size is not None
            and size is not None
            and size > options.max_upload_size
        ):
            error = UploadError.INI_SIZE
        else:
            error = UploadError.OK
        return cls(
            field_name=field_name,
            client_filename=upload.filename,
            media_type=upload.content_type,
            size=size,
            error=error,
        )


def build_file_tree(
    files: Iterable[UploadedFile], options: ParserOptions = DEFAULT_OPTIONS
) -> MappingProxyType[str, Any]:
    """Arrange uploads by field name with bracket notation (``docs[]``)."""
    tree = build_tree(((f.field_name, f) for f in files), options)
    return freeze(tree)

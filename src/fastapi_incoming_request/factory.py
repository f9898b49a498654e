"""build_incoming_request() — construct an IncomingRequest from a Starlette Request."""

from __future__ import annotations

import logging

from starlette.datastructures import UploadFile
from starlette.requests import Request

from fastapi_incoming_request.config import DEFAULT_OPTIONS, ParserOptions
from fastapi_incoming_request.environment import (
    request_target,
    server_params_from_scope,
)
from fastapi_incoming_request.query import build_tree, parse_cookie_header, parse_query
from fastapi_incoming_request.request import IncomingRequest
from fastapi_incoming_request.uploads import UploadedFile, build_file_tree

logger = logging.getLogger(__name__)

FORM_MEDIA_TYPES = frozenset(
    {"application/x-www-form-urlencoded", "multipart/form-data"}
)


async def build_incoming_request(
    request: Request,
    options: ParserOptions | None = None,
    *,
    request_time: float | None = None,
) -> IncomingRequest:
    """Snapshot ``request`` into an IncomingRequest.

    Reads the whole body. Form bodies are parsed into body params and upload
    metadata; other bodies are left for later stages.
    """
    options = options or DEFAULT_OPTIONS
    scope = request.scope

    body = await request.body()

    body_params: dict[str, object] = {}
    uploads: list[UploadedFile] = []
    media_type = request.headers.get("content-type", "").partition(";")[0]
    if media_type.strip().lower() in FORM_MEDIA_TYPES:
        # only metadata is kept, so spooled upload files are closed on exit
        limit = max(options.max_form_parts, options.max_input_vars)
        fields: list[tuple[str, str]] = []
        async with request.form(max_files=limit, max_fields=limit) as form:
            for name, value in form.multi_items():
                if isinstance(value, UploadFile):
                    uploads.append(UploadedFile.from_upload(name, value, options))
                else:
                    fields.append((name, value))
        body_params = build_tree(fields, options)
        logger.debug(
            "Parsed form body: %d fields, %d uploads", len(fields), len(uploads)
        )

    return IncomingRequest(
        request.method,
        request_target(scope),
        protocol_version=scope.get("http_version", "1.1"),
        headers=request.headers,
        body=body,
        server_params=server_params_from_scope(scope, request_time=request_time),
        cookie_params=parse_cookie_header(
            "; ".join(request.headers.getlist("cookie")), options
        ),
        query_params=parse_query(scope.get("query_string", b""), options),
        file_params=build_file_tree(uploads, options),
        body_params=body_params,
        options=options,
    )

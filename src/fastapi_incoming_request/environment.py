"""ServerParams — environment snapshot derived from an ASGI HTTP scope."""

from __future__ import annotations

import time
from types import MappingProxyType
from urllib.parse import quote

from starlette.types import Scope

from fastapi_incoming_request._types import ServerValue

_UNPREFIXED_HEADERS = frozenset({"CONTENT_TYPE", "CONTENT_LENGTH"})


def request_target(scope: Scope) -> str:
    """Rebuild the raw request target (path plus query) from ``scope``."""
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1")
    else:
        path = quote(scope.get("path", "/"), safe="/:@!$&'()*+,;=-._~%")
    query_string = scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query_string}" if query_string else path


def server_params_from_scope(
    scope: Scope, *, request_time: float | None = None
) -> MappingProxyType[str, ServerValue]:
    """Build the read-only CGI-style environment mapping for one request.

    Keys whose source is missing from the scope (client or server address)
    are left out rather than set to an empty value.
    """
    if request_time is None:
        request_time = time.time()

    scheme = scope.get("scheme", "http")
    path = scope.get("path", "/")
    root_path = scope.get("root_path", "")
    path_info = path
    if root_path and path.startswith(root_path):
        path_info = path[len(root_path) :]

    params: dict[str, ServerValue] = {
        "REQUEST_METHOD": scope.get("method", "GET"),
        "REQUEST_URI": request_target(scope),
        "QUERY_STRING": scope.get("query_string", b"").decode("latin-1"),
        "SERVER_PROTOCOL": f"HTTP/{scope.get('http_version', '1.1')}",
        "REQUEST_SCHEME": scheme,
        "SCRIPT_NAME": root_path,
        "PATH_INFO": path_info,
        "REQUEST_TIME": int(request_time),
        "REQUEST_TIME_FLOAT": float(request_time),
    }
    if scheme == "https":
        params["HTTPS"] = "on"

    server = scope.get("server")
    if server:
        host, port = server
        params["SERVER_NAME"] = host
        if port is not None:
            params["SERVER_PORT"] = port

    client = scope.get("client")
    if client:
        host, port = client
        params["REMOTE_ADDR"] = host
        params["REMOTE_PORT"] = port

    for raw_name, raw_value in scope.get("headers", []):
        name = raw_name.decode("latin-1").upper().replace("-", "_")
        key = name if name in _UNPREFIXED_HEADERS else f"HTTP_{name}"
        value = raw_value.decode("latin-1")
        if key in params:
            joiner = "; " if key == "HTTP_COOKIE" else ", "
            params[key] = f"{params[key]}{joiner}{value}"
        else:
            params[key] = value

    return MappingProxyType(params)

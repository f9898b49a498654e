"""IncomingRequest — per-request view of what the transport received."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from starlette.datastructures import Headers

from fastapi_incoming_request._types import ParamValue, ServerValue
from fastapi_incoming_request.config import DEFAULT_OPTIONS, ParserOptions
from fastapi_incoming_request.exceptions import ShapeViolation
from fastapi_incoming_request.query import parse_query
from fastapi_incoming_request.shapes import (
    copy_tree,
    freeze,
    validate_file_tree,
    validate_keys,
    validate_params,
    validate_server_params,
)
from fastapi_incoming_request.target import origin_form, query_component
from fastapi_incoming_request.uploads import UploadedFile


class IncomingRequest:
    """Representation of an incoming, server-side HTTP request.

    Method, target, protocol version, headers, body, server params and upload
    metadata are fixed at construction. Cookie, query and body params can be
    replaced as a unit, and attributes can additionally be set one key at a
    time. One instance belongs to one request; it is not safe to mutate the
    same instance from concurrent tasks.
    """

    def __init__(
        self,
        method: str,
        target: str,
        *,
        protocol_version: str = "1.1",
        headers: Mapping[str, str] | Headers | None = None,
        body: bytes = b"",
        server_params: Mapping[str, ServerValue] | None = None,
        cookie_params: Mapping[str, ParamValue] | None = None,
        query_params: Mapping[str, ParamValue] | None = None,
        file_params: Mapping[str, Any] | None = None,
        body_params: Mapping[str, Any] | None = None,
        attributes: Mapping[str, Any] | None = None,
        options: ParserOptions = DEFAULT_OPTIONS,
    ) -> None:
        self._options = options
        self._method = method
        self._target = target
        self._url = origin_form(target)
        self._protocol_version = protocol_version
        self._headers = headers if isinstance(headers, Headers) else Headers(headers)
        self._body = body

        self._server_params = MappingProxyType(
            validate_server_params(server_params or {})
        )
        self._file_params = freeze(
            validate_file_tree(file_params or {}, UploadedFile)
        )

        if query_params is None:
            query_params = parse_query(query_component(target), options)

        self._cookie_params: dict[str, Any] = {}
        self._query_params: dict[str, Any] = {}
        self._body_params: dict[str, Any] = {}
        self._attributes: dict[str, Any] = {}
        self.set_cookie_params(cookie_params or {})
        self.set_query_params(query_params)
        self.set_body_params(body_params or {})
        self.set_attributes(attributes or {})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._method} {self._url!r}>"

    # Message core

    @property
    def method(self) -> str:
        return self._method

    @property
    def target(self) -> str:
        """Request target exactly as received."""
        return self._target

    @property
    def url(self) -> str:
        """Origin-form target: path plus ``?query`` when the query is non-empty."""
        return self._url

    @property
    def protocol_version(self) -> str:
        return self._protocol_version

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def body(self) -> bytes:
        return self._body

    # Immutable snapshots

    @property
    def server_params(self) -> Mapping[str, ServerValue]:
        """Read-only environment data; no key is guaranteed to be present."""
        return self._server_params

    @property
    def file_params(self) -> Mapping[str, Any]:
        """Read-only upload tree with ``UploadedFile`` leaves."""
        return self._file_params

    # Mutable parameter bags

    @property
    def cookie_params(self) -> dict[str, Any]:
        return copy_tree(self._cookie_params)

    def set_cookie_params(self, cookies: Mapping[str, ParamValue]) -> None:
        """Replace all cookie params."""
        self._cookie_params = validate_params(
            cookies, max_depth=self._options.max_nesting_depth, label="cookie params"
        )

    @property
    def query_params(self) -> dict[str, Any]:
        return copy_tree(self._query_params)

    def set_query_params(self, params: Mapping[str, ParamValue]) -> None:
        """Replace all query params."""
        self._query_params = validate_params(
            params, max_depth=self._options.max_nesting_depth, label="query params"
        )

    @property
    def body_params(self) -> dict[str, Any]:
        """Structured body data; values are shared, the mapping is a copy."""
        return dict(self._body_params)

    def set_body_params(self, params: Mapping[str, Any]) -> None:
        """Replace all body params."""
        self._body_params = validate_keys(params, label="body params")

    # Attributes

    @property
    def attributes(self) -> dict[str, Any]:
        """Snapshot of the attributes; values are shared, the mapping is a copy."""
        return dict(self._attributes)

    def attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Replace all attributes."""
        self._attributes = validate_keys(attributes, label="attributes")

    def set_attribute(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise ShapeViolation(f"attribute name {name!r} is not a string")
        self._attributes[name] = value

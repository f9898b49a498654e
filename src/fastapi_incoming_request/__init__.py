"""FastAPI Incoming Request - server-side request representation for FastAPI."""

from fastapi_incoming_request.config import ParserOptions
from fastapi_incoming_request.dependency import incoming_request_dependency
from fastapi_incoming_request.exceptions import (
    AuthenticationFailed,
    MalformedBody,
    RequestException,
    RouteNotFound,
    ShapeViolation,
    StageAbort,
    StageInternalError,
)
from fastapi_incoming_request.factory import build_incoming_request
from fastapi_incoming_request.pipeline import Pipeline
from fastapi_incoming_request.query import parse_cookie_header, parse_query
from fastapi_incoming_request.request import IncomingRequest
from fastapi_incoming_request.stage import RequestStage, StageCategory
from fastapi_incoming_request.stages import (
    AllowAnonymous,
    BearerToken,
    JSONBody,
    RouteMatch,
    SessionCookie,
)
from fastapi_incoming_request.target import origin_form
from fastapi_incoming_request.uploads import UploadedFile, UploadError

__all__ = [
    "AllowAnonymous",
    "AuthenticationFailed",
    "BearerToken",
    "IncomingRequest",
    "JSONBody",
    "MalformedBody",
    "ParserOptions",
    "Pipeline",
    "RequestException",
    "RequestStage",
    "RouteMatch",
    "RouteNotFound",
    "SessionCookie",
    "ShapeViolation",
    "StageAbort",
    "StageCategory",
    "StageInternalError",
    "UploadError",
    "UploadedFile",
    "build_incoming_request",
    "incoming_request_dependency",
    "origin_form",
    "parse_cookie_header",
    "parse_query",
]

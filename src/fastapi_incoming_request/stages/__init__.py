"""Built-in request stages."""

from fastapi_incoming_request.stages.authentication import (
    AllowAnonymous,
    BearerToken,
    SessionCookie,
)
from fastapi_incoming_request.stages.body import JSONBody
from fastapi_incoming_request.stages.routing import RouteMatch

__all__ = [
    "AllowAnonymous",
    "BearerToken",
    "JSONBody",
    "RouteMatch",
    "SessionCookie",
]

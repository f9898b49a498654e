"""Routing stages — RouteMatch."""

from __future__ import annotations

from urllib.parse import unquote

from starlette.routing import compile_path

from fastapi_incoming_request.exceptions import RouteNotFound
from fastapi_incoming_request.request import IncomingRequest
from fastapi_incoming_request.stage import RequestStage, StageCategory


class RouteMatch(RequestStage):
    """Matches the request path against path patterns and stores the parameters.

    Patterns use Starlette syntax (``/users/{user_id:int}``). The first
    matching pattern wins; its converted parameters become attributes and the
    pattern itself is stored under ``route_attribute``.
    """

    category = StageCategory.ROUTING

    def __init__(
        self,
        *paths: str,
        required: bool = True,
        route_attribute: str = "route",
    ) -> None:
        if not paths:
            raise ValueError("RouteMatch needs at least one path pattern")
        self._routes = [(path, compile_path(path)) for path in paths]
        self._required = required
        self._route_attribute = route_attribute

    async def process(self, request: IncomingRequest) -> None:
        path = unquote(request.url.partition("?")[0])
        for pattern, (regex, _, convertors) in self._routes:
            match = regex.match(path)
            if match is None:
                continue
            for name, value in match.groupdict().items():
                request.set_attribute(name, convertors[name].convert(value))
            request.set_attribute(self._route_attribute, pattern)
            return

        if self._required:
            raise RouteNotFound()

"""Authentication stages — Bearer token, session cookie, anonymous."""

from __future__ import annotations

from fastapi_incoming_request._types import DecodeCallback, LookupCallback
from fastapi_incoming_request.exceptions import AuthenticationFailed
from fastapi_incoming_request.request import IncomingRequest
from fastapi_incoming_request.stage import RequestStage, StageCategory


class BearerToken(RequestStage):
    """Extracts a Bearer token from the Authorization header and decodes it via callback."""

    category = StageCategory.AUTHENTICATION

    def __init__(
        self,
        decode: DecodeCallback,
        *,
        scheme: str = "Bearer",
        header: str = "Authorization",
        attribute: str = "user",
    ) -> None:
        self._decode = decode
        self._scheme = scheme
        self._header = header
        self._attribute = attribute

    async def process(self, request: IncomingRequest) -> None:
        auth_value = request.headers.get(self._header)
        if not auth_value:
            raise AuthenticationFailed()

        parts = auth_value.split(" ", 1)
        if len(parts) != 2 or parts[0] != self._scheme:
            raise AuthenticationFailed()

        try:
            principal = await self._decode(parts[1])
        except AuthenticationFailed:
            raise
        except Exception as exc:
            raise AuthenticationFailed() from exc
        request.set_attribute(self._attribute, principal)


class SessionCookie(RequestStage):
    """Reads a session cookie from the cookie params and looks up the user via callback."""

    category = StageCategory.AUTHENTICATION

    def __init__(
        self,
        lookup: LookupCallback,
        *,
        cookie_name: str = "session",
        attribute: str = "user",
    ) -> None:
        self._lookup = lookup
        self._cookie_name = cookie_name
        self._attribute = attribute

    async def process(self, request: IncomingRequest) -> None:
        cookie_value = request.cookie_params.get(self._cookie_name)
        if not cookie_value or not isinstance(cookie_value, str):
            raise AuthenticationFailed()

        try:
            principal = await self._lookup(cookie_value)
        except AuthenticationFailed:
            raise
        except Exception as exc:
            raise AuthenticationFailed() from exc
        request.set_attribute(self._attribute, principal)


class AllowAnonymous(RequestStage):
    """Authentication stage that accepts every request."""

    category = StageCategory.AUTHENTICATION

    async def process(self, request: IncomingRequest) -> None:
        pass

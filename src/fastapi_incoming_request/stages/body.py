"""Body stages — JSONBody."""

from __future__ import annotations

import json

from fastapi_incoming_request.exceptions import MalformedBody
from fastapi_incoming_request.request import IncomingRequest
from fastapi_incoming_request.stage import RequestStage, StageCategory


def _is_json(content_type: str) -> bool:
    media_type = content_type.partition(";")[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class JSONBody(RequestStage):
    """Decodes JSON bodies into an attribute, and into body params for objects."""

    category = StageCategory.BODY

    def __init__(self, *, attribute: str = "parsed_body") -> None:
        self._attribute = attribute

    async def process(self, request: IncomingRequest) -> None:
        if not request.body or not _is_json(request.headers.get("content-type", "")):
            return

        try:
            decoded = json.loads(request.body)
        except ValueError:
            raise MalformedBody("Malformed JSON body") from None

        request.set_attribute(self._attribute, decoded)
        if isinstance(decoded, dict):
            request.set_body_params(decoded)

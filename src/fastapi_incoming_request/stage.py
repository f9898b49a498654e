"""RequestStage abstract base class and StageCategory enum."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar

from fastapi_incoming_request.request import IncomingRequest


class StageCategory(Enum):
    """Processing stage categories, defining strict execution order."""

    ROUTING = "routing"
    AUTHENTICATION = "authentication"
    BODY = "body"
    CUSTOM = "custom"

    @property
    def order(self) -> int:
        _ORDER = {
            "routing": 1,
            "authentication": 2,
            "body": 3,
            "custom": 4,
        }
        return _ORDER[self.value]


class RequestStage(ABC):
    """Base abstraction for a processing step that reads and annotates a request."""

    category: ClassVar[StageCategory]

    @abstractmethod
    async def process(self, request: IncomingRequest) -> None: ...

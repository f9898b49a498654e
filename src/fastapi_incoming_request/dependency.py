"""incoming_request_dependency() — FastAPI dependency building and processing requests."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import HTTPException
from starlette.requests import Request

from fastapi_incoming_request.config import ParserOptions
from fastapi_incoming_request.exceptions import (
    RequestException,
    StageAbort,
    StageInternalError,
)
from fastapi_incoming_request.factory import build_incoming_request
from fastapi_incoming_request.pipeline import Pipeline, ResolvedPipeline
from fastapi_incoming_request.request import IncomingRequest

logger = logging.getLogger(__name__)


def incoming_request_dependency(
    pipeline: Pipeline | None = None,
    *,
    options: ParserOptions | None = None,
) -> Callable[..., Awaitable[IncomingRequest]]:
    """Return a FastAPI-compatible dependency yielding a processed IncomingRequest."""
    resolved = (pipeline or Pipeline()).resolve()

    async def dependency(request: Request) -> IncomingRequest:
        incoming = await build_incoming_request(request, options)
        await run_stages(resolved, incoming)
        return incoming

    return dependency


async def run_stages(resolved: ResolvedPipeline, incoming: IncomingRequest) -> None:
    """Run every stage in order, translating aborts into HTTP errors."""
    try:
        for stage in resolved.stages:
            logger.debug("Running stage %s", type(stage).__name__)
            await stage.process(incoming)
    except StageAbort as exc:
        logger.debug("Stage aborted with %d: %s", exc.status_code, exc.detail)
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    except RequestException:
        raise
    except Exception as exc:
        logger.exception("Unexpected error while processing %r", incoming)
        wrapped = StageInternalError("Internal pipeline error", cause=exc)
        raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

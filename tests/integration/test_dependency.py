"""Integration tests for incoming_request_dependency with a FastAPI app."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from unittest.mock import AsyncMock

from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from fastapi_incoming_request.dependency import incoming_request_dependency
from fastapi_incoming_request.pipeline import Pipeline
from fastapi_incoming_request.request import IncomingRequest
from fastapi_incoming_request.stage import RequestStage, StageCategory
from fastapi_incoming_request.stages import BearerToken, JSONBody, RouteMatch
from fastapi_incoming_request.uploads import UploadedFile


def _files(tree: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, item in tree.items():
        if isinstance(item, UploadedFile):
            result[key] = {
                "filename": item.client_filename,
                "media_type": item.media_type,
                "size": item.size,
                "error": int(item.error),
            }
        else:
            result[key] = _files(item)
    return result


def _make_app(pipeline: Pipeline | None = None) -> FastAPI:
    app = FastAPI()

    @app.api_route("/items/{item_id}", methods=["GET", "POST"])
    async def endpoint(
        incoming: IncomingRequest = Depends(incoming_request_dependency(pipeline)),  # noqa: B008
    ) -> dict[str, Any]:
        return {
            "method": incoming.method,
            "url": incoming.url,
            "query": incoming.query_params,
            "cookies": incoming.cookie_params,
            "body": incoming.body_params,
            "files": _files(incoming.file_params),
            "attributes": incoming.attributes,
            "remote_addr": incoming.server_params.get("REMOTE_ADDR"),
        }

    return app


async def _request(app: FastAPI, method: str, path: str, **kwargs: Any) -> Any:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path, **kwargs)


class TestIncomingRequestDependency:
    async def test_query_and_cookies(self) -> None:
        resp = await _request(
            _make_app(),
            "GET",
            "/items/7?tags[]=a&tags[]=b&page=1&page=2",
            headers={"Cookie": "session=abc; prefs[theme]=dark"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["method"] == "GET"
        assert data["url"].startswith("/items/7?")
        assert data["query"] == {"tags": {"0": "a", "1": "b"}, "page": "2"}
        assert data["cookies"] == {"session": "abc", "prefs": {"theme": "dark"}}
        assert data["remote_addr"] == "127.0.0.1"

    async def test_multipart_uploads(self) -> None:
        resp = await _request(
            _make_app(),
            "POST",
            "/items/7",
            data={"title": "report"},
            files=[
                ("docs[]", ("a.txt", b"abc", "text/plain")),
                ("docs[]", ("b.csv", b"x,y\n", "text/csv")),
            ],
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["body"] == {"title": "report"}
        assert data["files"] == {
            "docs": {
                "0": {"filename": "a.txt", "media_type": "text/plain", "size": 3, "error": 0},
                "1": {"filename": "b.csv", "media_type": "text/csv", "size": 4, "error": 0},
            }
        }

    async def test_stages_populate_attributes_and_body(self) -> None:
        decode = AsyncMock(return_value={"sub": "user-1"})
        pipeline = Pipeline(
            JSONBody(),
            BearerToken(decode=decode),
            RouteMatch("/items/{item_id:int}"),
        )
        resp = await _request(
            _make_app(pipeline),
            "POST",
            "/items/7",
            json={"name": "widget"},
            headers={"Authorization": "Bearer valid"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["body"] == {"name": "widget"}
        assert data["attributes"] == {
            "item_id": 7,
            "route": "/items/{item_id:int}",
            "user": {"sub": "user-1"},
            "parsed_body": {"name": "widget"},
        }

    async def test_missing_credentials_return_401(self) -> None:
        pipeline = Pipeline(BearerToken(decode=AsyncMock()))
        resp = await _request(_make_app(pipeline), "GET", "/items/7")
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Authentication failed"}

    async def test_route_mismatch_returns_404(self) -> None:
        pipeline = Pipeline(RouteMatch("/items/{item_id:int}"))
        resp = await _request(_make_app(pipeline), "GET", "/items/abc")
        assert resp.status_code == 404

    async def test_malformed_json_returns_400(self) -> None:
        pipeline = Pipeline(JSONBody())
        resp = await _request(
            _make_app(pipeline),
            "POST",
            "/items/7",
            content=b"{oops",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Malformed JSON body"}

    async def test_unexpected_exception_returns_500(self) -> None:
        class Broken(RequestStage):
            category = StageCategory.CUSTOM

            async def process(self, request: IncomingRequest) -> None:
                raise RuntimeError("unexpected")

        resp = await _request(_make_app(Pipeline(Broken())), "GET", "/items/7")
        assert resp.status_code == 500

    async def test_later_stage_sees_earlier_writes(self) -> None:
        class Audit(RequestStage):
            category = StageCategory.CUSTOM

            async def process(self, request: IncomingRequest) -> None:
                request.set_attribute("audited_user", request.attribute("user", {}).get("sub"))

        decode = AsyncMock(return_value={"sub": "user-9"})
        pipeline = Pipeline(Audit(), BearerToken(decode=decode))
        resp = await _request(
            _make_app(pipeline),
            "GET",
            "/items/7",
            headers={"Authorization": "Bearer t"},
        )
        assert resp.json()["attributes"]["audited_user"] == "user-9"

"""Tests for the method + path router."""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any

import pytest
from pydantic import BaseModel
from starlette.requests import Request

from postboard.common.errors import BadRequestError, MethodNotAllowedError, NotFoundError
from postboard.web import Context, RouteConfigError, RouteConflictError, Router


async def _noop(ctx: Context) -> None:
    ctx.respond_json(200, {"ok": True})


class TestRegister:
    def test_literal_route(self) -> None:
        router = Router()
        route = router.register("get", "/health", _noop)
        assert route.method == "GET"
        assert not route.is_dynamic
        assert router.routes == [route]

    def test_dynamic_route(self) -> None:
        router = Router()
        route = router.register("GET", "/posts/{id}", _noop)
        assert route.is_dynamic
        assert route.prefix == "/posts"
        assert route.param == "id"

    @pytest.mark.parametrize(
        "pattern",
        ["posts", "/posts/{id}/comments", "/posts/{id", "/posts/{1x}", "/posts/x{id}"],
    )
    def test_rejects_unsupported_patterns(self, pattern: str) -> None:
        with pytest.raises(RouteConfigError):
            Router().register("GET", pattern, _noop)

    def test_duplicate_literal_raises(self) -> None:
        router = Router()
        router.register("GET", "/posts", _noop)
        with pytest.raises(RouteConflictError):
            router.register("GET", "/posts", _noop)

    def test_duplicate_dynamic_shape_raises(self) -> None:
        router = Router()
        router.register("GET", "/posts/{id}", _noop)
        with pytest.raises(RouteConflictError):
            router.register("GET", "/posts/{post_id}", _noop)

    def test_same_pattern_different_methods(self) -> None:
        router = Router()
        router.register("GET", "/posts/{id}", _noop)
        router.register("PUT", "/posts/{id}", _noop)
        router.register("DELETE", "/posts/{id}", _noop)
        assert len(router.routes) == 3

    def test_register_after_freeze_raises(self) -> None:
        router = Router()
        router.freeze()
        with pytest.raises(RuntimeError):
            router.register("GET", "/late", _noop)


class TestMatch:
    def test_literal_match(self) -> None:
        router = Router()
        route = router.register("GET", "/posts", _noop)
        assert router.match("GET", "/posts") == (route, {})

    def test_dynamic_match_extracts_param(self) -> None:
        router = Router()
        route = router.register("GET", "/posts/{id}", _noop)
        assert router.match("GET", "/posts/42") == (route, {"id": "42"})

    def test_literal_beats_dynamic(self) -> None:
        router = Router()
        dynamic = router.register("GET", "/posts/{id}", _noop)
        literal = router.register("GET", "/posts/me", _noop)
        assert router.match("GET", "/posts/me")[0] is literal
        assert router.match("GET", "/posts/7")[0] is dynamic

    def test_dynamic_requires_non_empty_segment(self) -> None:
        router = Router()
        router.register("GET", "/posts/{id}", _noop)
        with pytest.raises(NotFoundError):
            router.match("GET", "/posts/")

    def test_dynamic_does_not_match_deeper_paths(self) -> None:
        router = Router()
        router.register("GET", "/posts/{id}", _noop)
        with pytest.raises(NotFoundError):
            router.match("GET", "/posts/1/comments")

    def test_unknown_path_is_not_found(self) -> None:
        router = Router()
        router.register("GET", "/posts", _noop)
        with pytest.raises(NotFoundError):
            router.match("GET", "/users")

    def test_wrong_method_is_method_not_allowed(self) -> None:
        router = Router()
        router.register("GET", "/posts", _noop)
        router.register("POST", "/posts", _noop)
        with pytest.raises(MethodNotAllowedError) as exc_info:
            router.match("DELETE", "/posts")
        assert exc_info.value.allowed == ("GET", "POST")


class TestDispatch:
    async def test_handler_invoked_once_with_fresh_context(self, make_request: Any) -> None:
        seen: list[Context] = []

        async def handler(ctx: Context) -> None:
            seen.append(ctx)
            ctx.respond_json(200, {"id": ctx.path_params["id"]})

        router = Router()
        router.register("GET", "/posts/{id}", handler)

        first = await router.dispatch(make_request(path="/posts/1"))
        second = await router.dispatch(make_request(path="/posts/2"))

        assert len(seen) == 2
        assert seen[0] is first and seen[1] is second
        assert first is not second
        assert first.response is not None and first.response.status_code == 200

    async def test_app_error_becomes_json_response(self, make_request: Any) -> None:
        async def handler(ctx: Context) -> None:
            raise BadRequestError(code="NOPE", message="nope")

        router = Router()
        router.register("GET", "/x", handler)
        ctx = await router.dispatch(make_request(path="/x"))
        assert ctx.response is not None
        assert ctx.response.status_code == 400

    async def test_unexpected_error_becomes_500(self, make_request: Any) -> None:
        async def handler(ctx: Context) -> None:
            raise ZeroDivisionError

        router = Router()
        router.register("GET", "/x", handler)
        ctx = await router.dispatch(make_request(path="/x"))
        assert ctx.response is not None
        assert ctx.response.status_code == 500

    async def test_silent_handler_becomes_500(self, make_request: Any) -> None:
        async def handler(ctx: Context) -> None:
            return None

        router = Router()
        router.register("GET", "/x", handler)
        ctx = await router.dispatch(make_request(path="/x"))
        assert ctx.response is not None
        assert ctx.response.status_code == 500
        assert b"NO_RESPONSE" in ctx.response.body

    async def test_unmatched_request_does_not_invoke_handlers(self, make_request: Any) -> None:
        calls = 0

        async def handler(ctx: Context) -> None:
            nonlocal calls
            calls += 1

        router = Router()
        router.register("GET", "/x", handler)
        ctx = await router.dispatch(make_request(method="POST", path="/x"))
        assert calls == 0
        assert ctx.response is not None
        assert ctx.response.status_code == 405
        assert ctx.response.headers["allow"] == "GET"


def _scope(method: str = "GET", path: str = "/x") -> dict:
    return {"type": "http", "method": method, "path": path, "query_string": b"", "headers": [], "root_path": ""}


async def _stalled_receive() -> dict:
    await asyncio.Event().wait()
    return {"type": "http.disconnect"}


class TestTransportTimeouts:
    async def test_read_timeout_answers_408(self) -> None:
        class Body(BaseModel):
            title: str

        async def handler(ctx: Context) -> None:
            await ctx.decode_json(Body)
            ctx.respond_json(200, {"ok": True})

        router = Router(read_timeout=0.05)
        router.register("POST", "/x", handler)
        ctx = await router.dispatch(Request(_scope("POST"), _stalled_receive))
        assert ctx.response is not None
        assert ctx.response.status_code == 408
        assert json.loads(ctx.response.body)["reason"] == "READ_TIMEOUT"

    async def test_write_timeout_abandons_stalled_client(self) -> None:
        sent: list[str] = []

        async def send(message: dict) -> None:
            sent.append(message["type"])
            if message["type"] == "http.response.body":
                await asyncio.Event().wait()

        router = Router(write_timeout=0.05)
        router.register("GET", "/x", _noop)
        started = time.monotonic()
        await asyncio.wait_for(router(_scope(), _stalled_receive, send), 2.0)
        assert time.monotonic() - started < 1.0
        assert sent == ["http.response.start", "http.response.body"]

    async def test_missing_response_is_an_error(self, make_request: Any) -> None:
        router = Router()
        router.register("GET", "/x", _noop)

        async def dispatch(request: Request) -> Context:
            return Context(make_request(path="/x"))

        router.dispatch = dispatch  # type: ignore[method-assign]

        async def send(message: dict) -> None:
            raise AssertionError("nothing should be sent")

        with pytest.raises(RuntimeError):
            await router(_scope(), _stalled_receive, send)

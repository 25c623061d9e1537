# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""方法 + 路径路由

路径规则刻意保持简单：字面路径，最多在末尾带一个动态段，例如 /posts/{id}。
同一路径上字面路由优先于动态路由（/posts/me 优先于 /posts/{id}）。

路由表只在启动阶段注册；收到第一个请求（或 lifespan startup）后冻结。
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from postboard.common.errors import AppError, InternalError, MethodNotAllowedError, NotFoundError
from postboard.common.exception_handlers import unhandled_error
from postboard.web.context import Context

logger = logging.getLogger(__name__)

Handler = Callable[[Context], Awaitable[None]]

_DYNAMIC_SEGMENT = re.compile(r"^\{([A-Za-z_][A-Za-z0-9_]*)\}$")


class RouteConfigError(ValueError):
    """非法路由模式"""


class RouteConflictError(RouteConfigError):
    """同一方法下重复注册同形路由"""


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    handler: Handler
    prefix: str
    param: Optional[str] = None

    @property
    def is_dynamic(self) -> bool:
        return self.param is not None

    def match(self, path: str) -> Optional[Dict[str, str]]:
        if self.param is None:
            return {} if path == self.pattern else None
        parent, _, last = path.rpartition("/")
        if parent == self.prefix and last:
            return {self.param: last}
        return None


def parse_pattern(pattern: str) -> Tuple[str, Optional[str]]:
    """拆出 (字面前缀, 动态参数名)；字面路由返回 (pattern, None)"""
    if not pattern.startswith("/"):
        raise RouteConfigError(f"route pattern must start with '/': {pattern!r}")

    parent, _, last = pattern.rpartition("/")
    if "{" in parent or "}" in parent:
        raise RouteConfigError(f"only the last path segment may be dynamic: {pattern!r}")

    m = _DYNAMIC_SEGMENT.match(last)
    if m is not None:
        return parent, m.group(1)
    if "{" in last or "}" in last:
        raise RouteConfigError(f"malformed dynamic segment: {pattern!r}")
    return pattern, None


class Router:
    """read_timeout 约束读请求体，write_timeout 约束发送响应；None 表示不限时"""

    def __init__(self, *, read_timeout: Optional[float] = None, write_timeout: Optional[float] = None) -> None:
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self._literal: Dict[Tuple[str, str], Route] = {}
        self._dynamic: Dict[Tuple[str, str], Route] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    @property
    def routes(self) -> List[Route]:
        return [*self._literal.values(), *self._dynamic.values()]

    def register(self, method: str, pattern: str, handler: Handler) -> Route:
        if self._frozen:
            raise RuntimeError("router is frozen, routes can only be registered at startup")

        method = method.upper()
        prefix, param = parse_pattern(pattern)
        route = Route(method=method, pattern=pattern, handler=handler, prefix=prefix, param=param)

        table = self._dynamic if route.is_dynamic else self._literal
        key = (method, prefix)
        existing = table.get(key)
        if existing is not None:
            raise RouteConflictError(
                f"duplicate route {method} {pattern!r} (already registered as {existing.pattern!r})"
            )
        table[key] = route
        logger.debug("route registered: %s %s", method, pattern)
        return route

    def _lookup(self, method: str, path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        route = self._literal.get((method, path))
        if route is not None:
            return route, {}

        parent, _, _ = path.rpartition("/")
        route = self._dynamic.get((method, parent))
        if route is not None:
            params = route.match(path)
            if params is not None:
                return route, params
        return None

    def allowed_methods(self, path: str) -> Tuple[str, ...]:
        methods = {r.method for r in self.routes}
        return tuple(sorted(m for m in methods if self._lookup(m, path) is not None))

    def match(self, method: str, path: str) -> Tuple[Route, Dict[str, str]]:
        found = self._lookup(method.upper(), path)
        if found is not None:
            return found

        allowed = self.allowed_methods(path)
        if allowed:
            raise MethodNotAllowedError(allowed=allowed)
        raise NotFoundError(code="ROUTE_NOT_FOUND", message=f"no route for {path}")

    async def dispatch(self, request: Request) -> Context:
        """匹配路由并执行 handler，返回已提交响应的 Context"""
        try:
            route, params = self.match(request.method, request.url.path)
        except AppError as exc:
            ctx = Context(request, read_timeout=self.read_timeout)
            ctx.respond_error(exc)
            return ctx

        ctx = Context(request, path_params=params, read_timeout=self.read_timeout)
        try:
            await route.handler(ctx)
        except AppError as exc:
            ctx.respond_error(exc)
        except Exception as exc:  # noqa: BLE001
            ctx.respond_error(unhandled_error(exc))

        if not ctx.written:
            logger.warning("handler for %s %s wrote no response", route.method, route.pattern)
            ctx.respond_error(InternalError(code="NO_RESPONSE", message="handler wrote no response"))
        return ctx

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            raise RuntimeError(f"unsupported ASGI scope type: {scope['type']}")

        self.freeze()
        started = time.perf_counter()
        request = Request(scope, receive)
        ctx = await self.dispatch(request)

        response = ctx.response
        if response is None:
            raise RuntimeError(f"no response committed for {request.method} {request.url.path}")
        try:
            await asyncio.wait_for(response(scope, receive, send), self.write_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "write timeout after %.1fs: %s %s -> %d",
                self.write_timeout,
                request.method,
                request.url.path,
                response.status_code,
            )
            return
        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self.freeze()
                logger.info("router ready: %d routes", len(self.routes))
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
from typing import List, Optional

import uvicorn
from starlette.types import ASGIApp, Receive, Scope, Send

from postboard.common.middlewares import TraceIdMiddleware
from postboard.infra.config import Settings
from postboard.web.middleware import Middleware, chain
from postboard.web.router import Handler, Route, Router

logger = logging.getLogger(__name__)


def _budget(seconds: float) -> Optional[float]:
    return seconds if seconds > 0 else None


class Application:
    """持有路由表，提供按方法注册的快捷方法，并负责启动 HTTP 服务"""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.router = Router(
            read_timeout=_budget(settings.READ_TIMEOUT_SECONDS),
            write_timeout=_budget(settings.WRITE_TIMEOUT_SECONDS),
        )
        self._middlewares: List[Middleware] = []
        self.asgi: ASGIApp = TraceIdMiddleware(self.router)

    def use(self, *middlewares: Middleware) -> None:
        """全局中间件，包在每条路由自身中间件的外层；必须在注册路由之前调用"""
        if self.router.routes:
            raise RuntimeError("global middlewares must be installed before any route is registered")
        self._middlewares.extend(middlewares)

    def route(self, method: str, pattern: str, handler: Handler, *middlewares: Middleware) -> Route:
        wrapped = chain(*self._middlewares, *middlewares)(handler)
        return self.router.register(method, pattern, wrapped)

    def get(self, pattern: str, handler: Handler, *middlewares: Middleware) -> Route:
        return self.route("GET", pattern, handler, *middlewares)

    def post(self, pattern: str, handler: Handler, *middlewares: Middleware) -> Route:
        return self.route("POST", pattern, handler, *middlewares)

    def put(self, pattern: str, handler: Handler, *middlewares: Middleware) -> Route:
        return self.route("PUT", pattern, handler, *middlewares)

    def delete(self, pattern: str, handler: Handler, *middlewares: Middleware) -> Route:
        return self.route("DELETE", pattern, handler, *middlewares)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.asgi(scope, receive, send)

    def run(self) -> None:
        """阻塞运行，直到进程退出"""
        s = self.settings
        self.router.freeze()
        logger.info(
            "postboard listening on http://%s:%d (handlers=%d, request_timeout=%.1fs, read_timeout=%.1fs, write_timeout=%.1fs)",
            s.HOST,
            s.PORT,
            len(self.router.routes),
            s.REQUEST_TIMEOUT_SECONDS,
            s.READ_TIMEOUT_SECONDS,
            s.WRITE_TIMEOUT_SECONDS,
        )
        uvicorn.run(
            self,
            host=s.HOST,
            port=s.PORT,
            timeout_keep_alive=s.IDLE_TIMEOUT_SECONDS,
            h11_max_incomplete_event_size=s.MAX_HEADER_BYTES,
            log_config=None,
            lifespan="on",
        )

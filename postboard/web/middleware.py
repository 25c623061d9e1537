# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""中间件：Handler -> Handler 的变换，按 chain(mw1, mw2)(h) == mw1(mw2(h)) 嵌套

外层中间件先执行、最后收尾；不调用内层 handler（或抛 AppError）即短路。
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Callable

from postboard.application.auth.token_service import TokenService
from postboard.common.errors import RequestTimeoutError, UnauthorizedError
from postboard.web.context import Context
from postboard.web.router import Handler

logger = logging.getLogger(__name__)

Middleware = Callable[[Handler], Handler]


def chain(*middlewares: Middleware) -> Middleware:
    def wrap(handler: Handler) -> Handler:
        for mw in reversed(middlewares):
            handler = mw(handler)
        return handler

    return wrap


def bearer_token(ctx: Context, *, header: str = "Authorization", scheme: str = "Bearer") -> str:
    auth_value = ctx.request.headers.get(header)
    if not auth_value:
        raise UnauthorizedError(code="TOKEN_MISSING", message="missing access token")

    parts = auth_value.split(" ")
    if len(parts) != 2 or parts[0] != scheme or not parts[1]:
        raise UnauthorizedError(code="TOKEN_MALFORMED", message="malformed authorization header")
    return parts[1]


def authenticate(tokens: TokenService, *, header: str = "Authorization", scheme: str = "Bearer") -> Middleware:
    """校验 Bearer token，成功后写入 ctx.identity；失败直接 401，不进入内层"""

    def middleware(next_handler: Handler) -> Handler:
        @functools.wraps(next_handler)
        async def handler(ctx: Context) -> None:
            token = bearer_token(ctx, header=header, scheme=scheme)
            ctx.set_identity(tokens.subject_id(token))
            await next_handler(ctx)

        return handler

    return middleware


def _log_late_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("handler failed after request timed out: %r", exc)


def timeout(seconds: float, *, cancel_on_timeout: bool = True) -> Middleware:
    """给内层 handler 一个执行预算

    handler 放进独立 task 与 deadline 赛跑：
    - handler 先结束：透传其结果 / 异常
    - deadline 先到：标记执行域取消，写 408 后返回；handler 已提交的响应不会被覆盖

    cancel_on_timeout=True 时取消 handler task（在下一个 await 点生效）；
    已经进入线程池的阻塞调用无法被打断，只能放弃等待。
    """
    if seconds <= 0:
        raise ValueError("timeout must be positive")

    def middleware(next_handler: Handler) -> Handler:
        @functools.wraps(next_handler)
        async def handler(ctx: Context) -> None:
            ctx.set_deadline(seconds)
            task = asyncio.create_task(next_handler(ctx))
            try:
                done, _ = await asyncio.wait({task}, timeout=ctx.remaining())
            except asyncio.CancelledError:
                task.cancel()
                raise

            if task in done:
                task.result()
                return

            ctx.cancel("timed out")
            task.add_done_callback(_log_late_result)
            if cancel_on_timeout:
                task.cancel()

            logger.warning("%s %s exceeded %.3fs budget", ctx.method, ctx.path, seconds)
            if not ctx.written:
                ctx.respond_error(RequestTimeoutError(message="the operation took too long"))

        return handler

    return middleware

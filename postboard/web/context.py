# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""请求上下文

每个请求由 Router 新建一个 Context，贯穿整条 middleware / handler 链，请求结束即丢弃。

- identity：鉴权中间件写一次，下游只读；未鉴权时为 ANONYMOUS(0)
- 响应：先提交者生效，重复提交只记 warning，不抛异常（超时中间件与 handler 会竞争写）
- 执行域：deadline + cancelled 事件，供下游（数据库调用等）感知超时
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from postboard.common.errors import AppError, BadRequestError, RequestTimeoutError
from postboard.common.exception_handlers import app_error_headers, app_error_payload

logger = logging.getLogger(__name__)

ANONYMOUS = 0

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


def _jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    return payload


class Context:
    def __init__(
        self,
        request: Request,
        path_params: Optional[Mapping[str, str]] = None,
        *,
        read_timeout: Optional[float] = None,
    ) -> None:
        self.request = request
        self.path_params: Dict[str, str] = dict(path_params or {})
        self.read_timeout = read_timeout

        self._identity: int = ANONYMOUS
        self._identity_set = False
        self._body_consumed = False
        self._response: Optional[Response] = None

        self._deadline: Optional[float] = None
        self._cancelled = asyncio.Event()
        self.cancel_reason: Optional[str] = None

    # ---------- identity ----------

    @property
    def identity(self) -> int:
        return self._identity

    def set_identity(self, user_id: int) -> None:
        if self._identity_set:
            raise RuntimeError("identity already set for this request")
        self._identity = int(user_id)
        self._identity_set = True

    @property
    def authenticated(self) -> bool:
        return self._identity != ANONYMOUS

    # ---------- request ----------

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.url.path

    def path_param(self, name: str, convert: Callable[[str], T] = str) -> T:  # type: ignore[assignment]
        raw = self.path_params.get(name)
        if raw is None:
            raise BadRequestError(code="PATH_PARAM_MISSING", message=f"missing path parameter: {name}")
        try:
            value = convert(raw)
        except (TypeError, ValueError) as e:
            raise BadRequestError(code="PATH_PARAM_INVALID", message=f"invalid path parameter: {name}") from e
        return value

    async def decode_json(self, model: Type[M]) -> M:
        """读取并解析请求体，只允许调用一次；读 body 受 read_timeout 约束"""
        if self._body_consumed:
            raise RuntimeError("request body already consumed")
        self._body_consumed = True

        try:
            body = await asyncio.wait_for(self.request.body(), self.read_timeout)
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(code="READ_TIMEOUT", message="timed out reading request body") from e
        try:
            return model.model_validate_json(body or b"")
        except ValidationError as e:
            raise BadRequestError(code="INVALID_BODY", message="invalid request body") from e

    # ---------- response ----------

    @property
    def written(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> Optional[Response]:
        return self._response

    def respond(self, response: Response) -> bool:
        if self._response is not None:
            logger.warning(
                "response already written for %s %s, dropping status=%s",
                self.method,
                self.path,
                response.status_code,
            )
            return False
        self._response = response
        return True

    def respond_json(self, status_code: int, payload: Any, headers: Optional[Mapping[str, str]] = None) -> bool:
        return self.respond(JSONResponse(content=_jsonable(payload), status_code=status_code, headers=headers))

    def respond_error(self, exc: AppError) -> bool:
        return self.respond_json(exc.status_code, app_error_payload(exc), headers=app_error_headers(exc) or None)

    # ---------- execution scope ----------

    @property
    def deadline(self) -> Optional[float]:
        """monotonic 时间戳，None 表示不限时"""
        return self._deadline

    def set_deadline(self, seconds: float) -> float:
        """收紧 deadline（只会变早，不会被放宽）"""
        deadline = time.monotonic() + seconds
        if self._deadline is None or deadline < self._deadline:
            self._deadline = deadline
        return self._deadline

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._cancelled.is_set():
            self.cancel_reason = reason
            self._cancelled.set()

    async def run_sync(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """在线程池里跑阻塞调用；执行域已取消时直接拒绝，不再发起"""
        if self.cancelled:
            raise RequestTimeoutError(message=f"request {self.cancel_reason or 'cancelled'}")
        return await run_in_threadpool(fn, *args, **kwargs)

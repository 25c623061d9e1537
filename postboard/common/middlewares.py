# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from postboard.common.trace import TRACE_HEADER_IN, TRACE_HEADER_OUT, new_trace_id, reset_trace_id, set_trace_id


class TraceIdMiddleware(BaseHTTPMiddleware):
    """ASGI 外层：为每个请求注入 trace_id，并回写到响应头"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get(TRACE_HEADER_IN) or new_trace_id()
        token = set_trace_id(trace_id)
        try:
            response: Response = await call_next(request)
        finally:
            reset_trace_id(token)
        response.headers[TRACE_HEADER_OUT] = trace_id
        return response

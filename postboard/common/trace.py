# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token


_trace_id_ctx: ContextVar[str] = ContextVar("postboard_trace_id", default="-")

TRACE_HEADER_IN = "X-Request-Id"
TRACE_HEADER_OUT = "X-Trace-Id"


def new_trace_id() -> str:
    return uuid.uuid4().hex


def set_trace_id(trace_id: str) -> Token[str]:
    return _trace_id_ctx.set(trace_id or "-")


def reset_trace_id(token: Token[str]) -> None:
    _trace_id_ctx.reset(token)


def get_trace_id() -> str:
    return _trace_id_ctx.get() or "-"

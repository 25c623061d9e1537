# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict

from postboard.common.errors import AppError, InternalError, MethodNotAllowedError
from postboard.common.trace import get_trace_id

logger = logging.getLogger(__name__)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_payload(status_code: int, code: str, message: str, detail: Any = None) -> Dict[str, Any]:
    """统一错误响应体：{error, message, code, reason, trace_id}"""
    data: Dict[str, Any] = {
        "error": _reason_phrase(status_code),
        "message": message,
        "code": status_code,
        "reason": code,
        "trace_id": get_trace_id(),
    }
    if detail is not None:
        data["detail"] = detail
    return data


def app_error_payload(exc: AppError) -> Dict[str, Any]:
    return error_payload(exc.status_code, exc.code, exc.message, exc.detail)


def app_error_headers(exc: AppError) -> Dict[str, str]:
    if isinstance(exc, MethodNotAllowedError) and exc.allowed:
        return {"Allow": ", ".join(exc.allowed)}
    return {}


def unhandled_error(exc: BaseException) -> InternalError:
    """未捕获异常：记录堆栈，对外只暴露通用 500"""
    logger.error("Unhandled error", exc_info=(type(exc), exc, exc.__traceback__))
    return InternalError()

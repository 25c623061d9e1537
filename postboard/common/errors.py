# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class AppError(Exception):
    """异常统一"""
    code: str
    message: str
    status_code: int = 400
    detail: Optional[Any] = None


class BadRequestError(AppError):
    def __init__(self, code: str = "BAD_REQUEST", message: str = "bad request", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=400, detail=detail)


class UnauthorizedError(AppError):
    def __init__(self, code: str = "UNAUTHORIZED", message: str = "unauthorized", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=401, detail=detail)


class NotFoundError(AppError):
    def __init__(self, code: str = "NOT_FOUND", message: str = "not found", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=404, detail=detail)


class MethodNotAllowedError(AppError):
    def __init__(self, allowed: tuple[str, ...] = (), message: str = "method not allowed") -> None:
        super().__init__(code="METHOD_NOT_ALLOWED", message=message, status_code=405, detail=None)
        self.allowed = allowed


class RequestTimeoutError(AppError):
    def __init__(self, code: str = "REQUEST_TIMEOUT", message: str = "request took too long", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=408, detail=detail)


class InternalError(AppError):
    def __init__(self, code: str = "INTERNAL_ERROR", message: str = "internal server error", detail: Any = None) -> None:
        super().__init__(code=code, message=message, status_code=500, detail=detail)

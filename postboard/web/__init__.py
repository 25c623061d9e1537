# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""最小 HTTP 框架：Router + Context + Middleware"""

from .application import Application  # noqa: F401
from .context import ANONYMOUS, Context  # noqa: F401
from .middleware import Middleware, authenticate, chain, timeout  # noqa: F401
from .router import Handler, Route, RouteConfigError, RouteConflictError, Router  # noqa: F401

__all__ = [
    "ANONYMOUS",
    "Application",
    "Context",
    "Handler",
    "Middleware",
    "Route",
    "RouteConfigError",
    "RouteConflictError",
    "Router",
    "authenticate",
    "chain",
    "timeout",
]

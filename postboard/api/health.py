# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from postboard.domain import schemas
from postboard.web import Application, Context


async def health_check(ctx: Context) -> None:
    ctx.respond_json(200, schemas.HealthResponse(status="ok", message="service is running"))


def mount(app: Application) -> None:
    app.get("/health", health_check)

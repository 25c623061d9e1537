# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from postboard.api.deps import Container, require_user_id
from postboard.domain import schemas
from postboard.web import Application, Context, Middleware


class AuthHandlers:
    def __init__(self, deps: Container) -> None:
        self._deps = deps
        self._uc = deps.auth_uc

    async def signup(self, ctx: Context) -> None:
        req = await ctx.decode_json(schemas.SignUpRequest)
        user = await self._deps.in_session(
            ctx, self._uc.signup, name=req.name, email=req.email, password=req.password
        )
        ctx.respond_json(
            201,
            schemas.SignUpResponse(
                message="user registered successfully",
                user=schemas.UserSummary.model_validate(user),
            ),
        )

    async def login(self, ctx: Context) -> None:
        req = await ctx.decode_json(schemas.LoginRequest)
        token = await self._deps.in_session(ctx, self._uc.login, email=req.email, password=req.password)
        ctx.respond_json(200, schemas.LoginResponse(message="login successful", token=token))

    async def me(self, ctx: Context) -> None:
        user_id = require_user_id(ctx)
        user = await self._deps.in_session(ctx, self._uc.get_user, user_id=user_id)
        ctx.respond_json(200, schemas.UserResponse(user=schemas.UserSummary.model_validate(user)))


def mount(app: Application, deps: Container, auth: Middleware) -> None:
    h = AuthHandlers(deps)
    app.post("/auth/signup", h.signup)
    app.post("/auth/login", h.login)
    app.get("/auth/me", h.me, auth)

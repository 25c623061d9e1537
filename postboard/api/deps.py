# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from postboard.application.auth.password import PasswordHasher
from postboard.application.auth.token_service import TokenService
from postboard.application.auth.usecase import AuthUsecase
from postboard.application.posts.usecase import PostUsecase
from postboard.common.errors import UnauthorizedError
from postboard.infra.config import Settings
from postboard.infra.db import build_engine, build_session_factory
from postboard.infra.repositories import PostRepository, UserRepository
from postboard.web.context import Context

T = TypeVar("T")


@dataclass
class Container:
    """启动时装配一次的依赖，显式传给各 handler"""

    settings: Settings
    engine: Engine
    sessions: sessionmaker[Session]
    tokens: TokenService
    auth_uc: AuthUsecase
    post_uc: PostUsecase

    async def in_session(self, ctx: Context, fn: Callable[..., T], /, **kwargs) -> T:
        """在线程池里开一个 Session 执行 usecase 方法，结束自动关闭"""

        def _run() -> T:
            with self.sessions() as db:
                return fn(db, **kwargs)

        return await ctx.run_sync(_run)


def build_container(settings: Settings, engine: Engine | None = None) -> Container:
    engine = engine or build_engine(settings)
    tokens = TokenService(settings.JWT_SECRET_KEY, expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return Container(
        settings=settings,
        engine=engine,
        sessions=build_session_factory(engine),
        tokens=tokens,
        auth_uc=AuthUsecase(UserRepository(), PasswordHasher(settings.BCRYPT_ROUNDS), tokens),
        post_uc=PostUsecase(PostRepository()),
    )


def require_user_id(ctx: Context) -> int:
    if not ctx.authenticated:
        raise UnauthorizedError(code="NOT_AUTHENTICATED", message="user not authenticated")
    return ctx.identity

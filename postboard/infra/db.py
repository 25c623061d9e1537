# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from postboard.infra.config import Settings


class Base(DeclarativeBase):
    """SQLAlchemy ORM 基类"""


def build_engine(settings: Settings) -> Engine:
    """按配置创建 engine；最多 pool_size + max_overflow 个连接同时打开"""
    kwargs: Dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": False,
    }
    if settings.DATABASE_URL.startswith("sqlite"):
        # sqlite 走线程池访问，需要关闭同线程检查
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
    return create_engine(settings.DATABASE_URL, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def create_all(engine: Engine) -> None:
    """脚本/测试使用：直接按 ORM 建表（线上用 alembic）"""
    from postboard.domain import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

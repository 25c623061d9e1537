# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""持久层：每个实体一组 create / find / update / delete

约定：
- 传入的 Session 由调用方管理生命周期（一个请求一个 Session）
- 找不到记录统一抛 NotFoundError，不返回 None
"""

from __future__ import annotations

from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from postboard.common.errors import BadRequestError, NotFoundError
from postboard.domain import models


class UserRepository:
    def create(self, db: Session, *, name: str, email: str, password_hash: str) -> models.User:
        user = models.User(name=name, email=email, password_hash=password_hash)
        db.add(user)
        try:
            db.commit()
        except IntegrityError as e:
            # 并发注册同一邮箱时由唯一索引兜底
            db.rollback()
            raise BadRequestError(code="EMAIL_ALREADY_REGISTERED", message="email already registered") from e
        db.refresh(user)
        return user

    def find_by_id(self, db: Session, user_id: int) -> models.User:
        user = db.get(models.User, user_id)
        if user is None:
            raise NotFoundError(code="USER_NOT_FOUND", message="user not found")
        return user

    def find_by_email(self, db: Session, email: str) -> models.User:
        user = db.scalars(select(models.User).where(models.User.email == email)).first()
        if user is None:
            raise NotFoundError(code="USER_NOT_FOUND", message="user not found")
        return user

    def email_exists(self, db: Session, email: str) -> bool:
        count = db.scalar(select(func.count()).select_from(models.User).where(models.User.email == email))
        return bool(count)


class PostRepository:
    def create(self, db: Session, *, user_id: int, title: str, content: str) -> models.Post:
        post = models.Post(user_id=user_id, title=title, content=content)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    def find_all(self, db: Session) -> List[models.Post]:
        stmt = select(models.Post).order_by(models.Post.created_at.desc(), models.Post.id.desc())
        return list(db.scalars(stmt).all())

    def find_by_id(self, db: Session, post_id: int) -> models.Post:
        post = db.get(models.Post, post_id)
        if post is None:
            raise NotFoundError(code="POST_NOT_FOUND", message="post not found")
        return post

    def find_by_user_id(self, db: Session, user_id: int) -> List[models.Post]:
        stmt = (
            select(models.Post)
            .where(models.Post.user_id == user_id)
            .order_by(models.Post.created_at.desc(), models.Post.id.desc())
        )
        return list(db.scalars(stmt).all())

    def update(self, db: Session, post: models.Post, *, title: str, content: str) -> models.Post:
        post.title = title
        post.content = content
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    def delete(self, db: Session, post_id: int) -> None:
        result = db.execute(delete(models.Post).where(models.Post.id == post_id))
        if not result.rowcount:
            db.rollback()
            raise NotFoundError(code="POST_NOT_FOUND", message="post not found")
        db.commit()

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from postboard.common.errors import BadRequestError
from postboard.domain import models
from postboard.infra.repositories import PostRepository


def _require_fields(title: str, content: str) -> None:
    if not title.strip():
        raise BadRequestError(code="TITLE_REQUIRED", message="title is required")
    if not content.strip():
        raise BadRequestError(code="CONTENT_REQUIRED", message="content is required")


class PostUsecase:
    """帖子域：只有作者本人能改 / 删"""

    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def create_post(self, db: Session, *, user_id: int, title: str, content: str) -> models.Post:
        _require_fields(title, content)
        return self._posts.create(db, user_id=user_id, title=title, content=content)

    def list_posts(self, db: Session) -> List[models.Post]:
        return self._posts.find_all(db)

    def get_post(self, db: Session, *, post_id: int) -> models.Post:
        return self._posts.find_by_id(db, post_id)

    def list_user_posts(self, db: Session, *, user_id: int) -> List[models.Post]:
        return self._posts.find_by_user_id(db, user_id)

    def update_post(self, db: Session, *, post_id: int, user_id: int, title: str, content: str) -> models.Post:
        post = self._posts.find_by_id(db, post_id)
        # 越权按 400 处理，与删除保持一致
        if post.user_id != user_id:
            raise BadRequestError(code="POST_NOT_OWNED", message="you are not allowed to update this post")

        _require_fields(title, content)
        return self._posts.update(db, post, title=title, content=content)

    def delete_post(self, db: Session, *, post_id: int, user_id: int) -> None:
        post = self._posts.find_by_id(db, post_id)
        if post.user_id != user_id:
            raise BadRequestError(code="POST_NOT_OWNED", message="you are not allowed to delete this post")

        self._posts.delete(db, post_id)

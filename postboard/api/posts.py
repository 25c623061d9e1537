# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import re

from postboard.api.deps import Container, require_user_id
from postboard.common.errors import BadRequestError
from postboard.domain import schemas
from postboard.web import Application, Context, Middleware

# posts.id 为 32 位有符号 INTEGER
_MAX_POST_ID = 2**31 - 1
_POST_ID = re.compile(r"[0-9]{1,10}")


def _post_id(ctx: Context) -> int:
    raw = ctx.path_param("id")
    if _POST_ID.fullmatch(raw) is None or not 0 < int(raw) <= _MAX_POST_ID:
        raise BadRequestError(code="PATH_PARAM_INVALID", message="invalid post id")
    return int(raw)


class PostHandlers:
    def __init__(self, deps: Container) -> None:
        self._deps = deps
        self._uc = deps.post_uc

    async def list_posts(self, ctx: Context) -> None:
        posts = await self._deps.in_session(ctx, self._uc.list_posts)
        ctx.respond_json(200, schemas.PostListResponse(posts=[schemas.PostOut.model_validate(p) for p in posts]))

    async def get_post(self, ctx: Context) -> None:
        post = await self._deps.in_session(ctx, self._uc.get_post, post_id=_post_id(ctx))
        ctx.respond_json(200, schemas.PostResponse(post=schemas.PostOut.model_validate(post)))

    async def create_post(self, ctx: Context) -> None:
        user_id = require_user_id(ctx)
        req = await ctx.decode_json(schemas.PostWriteRequest)
        post = await self._deps.in_session(
            ctx, self._uc.create_post, user_id=user_id, title=req.title, content=req.content
        )
        ctx.respond_json(
            201,
            schemas.PostMutationResponse(message="post created successfully", post=schemas.PostOut.model_validate(post)),
        )

    async def update_post(self, ctx: Context) -> None:
        user_id = require_user_id(ctx)
        post_id = _post_id(ctx)
        req = await ctx.decode_json(schemas.PostWriteRequest)
        post = await self._deps.in_session(
            ctx, self._uc.update_post, post_id=post_id, user_id=user_id, title=req.title, content=req.content
        )
        ctx.respond_json(
            200,
            schemas.PostMutationResponse(message="post updated successfully", post=schemas.PostOut.model_validate(post)),
        )

    async def delete_post(self, ctx: Context) -> None:
        user_id = require_user_id(ctx)
        await self._deps.in_session(ctx, self._uc.delete_post, post_id=_post_id(ctx), user_id=user_id)
        ctx.respond_json(200, schemas.MessageResponse(message="post deleted successfully"))

    async def my_posts(self, ctx: Context) -> None:
        user_id = require_user_id(ctx)
        posts = await self._deps.in_session(ctx, self._uc.list_user_posts, user_id=user_id)
        ctx.respond_json(200, schemas.PostListResponse(posts=[schemas.PostOut.model_validate(p) for p in posts]))


def mount(app: Application, deps: Container, auth: Middleware) -> None:
    h = PostHandlers(deps)
    app.get("/posts", h.list_posts)
    app.get("/posts/me", h.my_posts, auth)
    app.get("/posts/{id}", h.get_post)
    app.post("/posts", h.create_post, auth)
    app.put("/posts/{id}", h.update_post, auth)
    app.delete("/posts/{id}", h.delete_post, auth)

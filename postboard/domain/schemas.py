# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

# 请求体字段给空串默认值：缺字段与空字段统一由 usecase 报 “xxx 必填”


class SignUpRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class PostWriteRequest(BaseModel):
    title: str = ""
    content: str = ""


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    content: str
    created_at: int
    updated_at: Optional[int] = None


class UserResponse(BaseModel):
    user: UserSummary


class SignUpResponse(BaseModel):
    message: str
    user: UserSummary


class LoginResponse(BaseModel):
    message: str
    token: str


class PostResponse(BaseModel):
    post: PostOut


class PostMutationResponse(BaseModel):
    message: str
    post: PostOut


class PostListResponse(BaseModel):
    posts: List[PostOut]


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import time
from typing import Any, Dict

import jwt

from postboard.common.errors import UnauthorizedError


class TokenService:
    """access token 签发 / 校验（HS256，共享密钥）"""

    def __init__(self, secret: str, *, expire_minutes: int, algorithm: str = "HS256") -> None:
        self._jwt_secret = secret
        self._jwt_alg = algorithm
        self._expire_seconds = int(expire_minutes) * 60

    def make_access_token(self, *, user_id: int) -> str:
        now = int(time.time())
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "user_id": user_id,
            "type": "access",
            "iat": now,
            "exp": now + self._expire_seconds,
        }
        return jwt.encode(payload, self._jwt_secret, algorithm=self._jwt_alg)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[self._jwt_alg],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise UnauthorizedError(code="TOKEN_EXPIRED", message="access token expired") from e
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError(code="TOKEN_INVALID", message="invalid access token") from e

        if payload.get("type") != "access":
            raise UnauthorizedError(code="TOKEN_INVALID", message="invalid access token")
        return payload

    def subject_id(self, token: str) -> int:
        """校验 token 并取出用户 id"""
        payload = self.decode_access_token(token)
        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError) as e:
            raise UnauthorizedError(code="TOKEN_INVALID", message="user id not found in token") from e
        if user_id <= 0:
            raise UnauthorizedError(code="TOKEN_INVALID", message="user id not found in token")
        return user_id

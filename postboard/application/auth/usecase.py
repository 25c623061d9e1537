# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from sqlalchemy.orm import Session

from postboard.application.auth.password import PasswordHasher
from postboard.application.auth.token_service import TokenService
from postboard.common.errors import BadRequestError, NotFoundError, UnauthorizedError
from postboard.domain import models
from postboard.infra.repositories import UserRepository


class AuthUsecase:
    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenService) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    def signup(self, db: Session, *, name: str, email: str, password: str) -> models.User:
        name, email = name.strip(), email.strip()
        if not name or not email or not password:
            raise BadRequestError(code="FIELDS_REQUIRED", message="name, email and password are required")

        if self._users.email_exists(db, email):
            raise BadRequestError(code="EMAIL_ALREADY_REGISTERED", message="email already registered")

        return self._users.create(
            db,
            name=name,
            email=email,
            password_hash=self._hasher.hash(password),
        )

    def login(self, db: Session, *, email: str, password: str) -> str:
        email = email.strip()
        if not email or not password:
            raise BadRequestError(code="FIELDS_REQUIRED", message="email and password are required")

        try:
            user = self._users.find_by_email(db, email)
        except NotFoundError as e:
            raise UnauthorizedError(code="INVALID_CREDENTIALS", message="invalid credentials") from e

        if not self._hasher.verify(password, user.password_hash):
            raise UnauthorizedError(code="INVALID_CREDENTIALS", message="invalid credentials")

        return self._tokens.make_access_token(user_id=user.id)

    def get_user(self, db: Session, *, user_id: int) -> models.User:
        return self._users.find_by_id(db, user_id)

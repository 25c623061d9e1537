"""Shared pytest fixtures for postboard tests."""

from __future__ import annotations

import time
from typing import Any, AsyncIterator, Iterator

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from postboard.api.deps import Container, build_container
from postboard.infra.config import Settings
from postboard.infra.db import create_all
from postboard.main import create_app
from postboard.web import Application

TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path: Any) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'postboard.db'}",
        JWT_SECRET_KEY=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        REQUEST_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def container(settings: Settings) -> Iterator[Container]:
    deps = build_container(settings)
    create_all(deps.engine)
    yield deps
    deps.engine.dispose()


@pytest.fixture
def app(settings: Settings, container: Container) -> Application:
    return create_app(settings, container)


@pytest.fixture
async def client(app: Application) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects, optionally with a body."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "root_path": "",
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


def make_token(user_id: Any, *, exp_offset: int = 3600, secret: str = TEST_SECRET, **extra: Any) -> str:
    now = int(time.time())
    payload: dict[str, Any] = {"sub": str(user_id), "type": "access", "iat": now, "exp": now + exp_offset}
    payload.update(extra)
    return jwt.encode(payload, secret, algorithm="HS256")


async def signup_and_login(
    client: AsyncClient,
    email: str = "alice@example.com",
    password: str = "s3cret",
    name: str = "Alice",
) -> tuple[int, str]:
    resp = await client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    user_id = resp.json()["user"]["id"]

    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return user_id, resp.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Optional

from postboard.api import auth as auth_api, health as health_api, posts as posts_api
from postboard.api.deps import Container, build_container
from postboard.common.logging import setup_logging
from postboard.infra.config import Settings, load_settings
from postboard.web import Application, authenticate, timeout


def create_app(settings: Settings, deps: Optional[Container] = None) -> Application:
    deps = deps or build_container(settings)
    app = Application(settings)

    # ---------- middlewares ----------

    if settings.REQUEST_TIMEOUT_SECONDS > 0:
        app.use(timeout(settings.REQUEST_TIMEOUT_SECONDS, cancel_on_timeout=settings.CANCEL_ON_TIMEOUT))
    auth = authenticate(deps.tokens)

    # ---------- routes ----------

    health_api.mount(app)

    # Auth
    auth_api.mount(app, deps, auth)

    # Posts
    posts_api.mount(app, deps, auth)

    return app


def main() -> None:
    settings = load_settings()
    setup_logging(settings.LOG_LEVEL)
    create_app(settings).run()


if __name__ == "__main__":
    main()

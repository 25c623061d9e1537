# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from postboard.infra.config import load_settings
from postboard.infra.db import build_engine, create_all


def init_db() -> None:
    print("Creating tables...")
    create_all(build_engine(load_settings()))
    print("Done.")


if __name__ == "__main__":
    init_db()

# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
from typing import Union

from postboard.common.trace import get_trace_id

LOG_FORMAT = "[%(asctime)s - %(levelname)s - trace=%(trace_id)s - %(name)s - %(message)s]"


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        setattr(record, "trace_id", get_trace_id())
        return True


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """初始化全局日志（uvicorn 的 logger 也走 root handler）"""

    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # 给现有 handler 全部加 filter
    for h in root.handlers:
        has_filter = any(isinstance(f, TraceIdFilter) for f in getattr(h, "filters", []))
        if not has_filter:
            h.addFilter(TraceIdFilter())

    # access log 由 Router 自己打，避免重复
    logging.getLogger("uvicorn.access").disabled = True

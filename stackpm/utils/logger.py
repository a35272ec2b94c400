"""stackpm 日志配置

只配置 "stackpm" 命名空间下的日志器，不改动宿主进程的根日志器。
日志一律写 stderr，stdout 留给命令结果（宿主可能会解析）。

环境变量:
    STACKPM_LOG_LEVEL   DEBUG / INFO / WARNING(默认) / ERROR
    STACKPM_LOG_JSON    "1" 或 "true" 时输出单行 JSON
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import IO

LOGGER_NAME = "stackpm"
ENV_LEVEL = "STACKPM_LOG_LEVEL"
ENV_JSON = "STACKPM_LOG_JSON"

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """每条记录输出一行 JSON

        {"ts": "...", "level": "INFO", "logger": "stackpm.services.sync_service",
         "msg": "...", "where": "sync_service.py:64"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.filename}:{record.lineno}",
        }
        if record.exc_info and record.exc_info[1]:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(
    level: str = "WARNING",
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """(重新)配置 stackpm 日志器，重复调用不会叠加 handler；非法级别按 WARNING 处理"""
    log = logging.getLogger(LOGGER_NAME)
    reset_logging()
    log.setLevel(_parse_level(level))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    log.addHandler(handler)
    log.propagate = False
    return log


def setup_logging_from_env(environ: Mapping[str, str] | None = None) -> logging.Logger:
    env = os.environ if environ is None else environ
    return setup_logging(
        level=env.get(ENV_LEVEL, "WARNING"),
        json_output=env.get(ENV_JSON, "").lower() in ("1", "true"),
    )


def reset_logging() -> None:
    """移除 stackpm 日志器上的 handler，恢复向根日志器传播"""
    log = logging.getLogger(LOGGER_NAME)
    for handler in log.handlers[:]:
        log.removeHandler(handler)
        handler.close()
    log.setLevel(logging.NOTSET)
    log.propagate = True

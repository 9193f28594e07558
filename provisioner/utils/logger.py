"""日志配置

日志统一写 stderr，stdout 只留给阶段汇总，便于脚本解析汇总输出。
设置 PROVISION_LOG_JSON=1 时输出单行 JSON，供 CI 采集。

编排器在记录阶段日志时通过 extra={"stage": ...} 附带阶段名，
JSON 输出中对应 "stage" 字段，文本输出中以 [stage] 前缀呈现。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(stage_prefix)s%(message)s"


class StageFilter(logging.Filter):
    """为每条记录补齐 stage / stage_prefix 属性，未附带阶段的记录为空"""

    def filter(self, record: logging.LogRecord) -> bool:
        stage = getattr(record, "stage", "")
        record.stage = stage
        record.stage_prefix = f"[{stage}] " if stage else ""
        return True


class JSONFormatter(logging.Formatter):
    """单行 JSON 日志

    输出字段: timestamp, level, logger, message, stage（仅阶段日志）,
    exception（仅有异常时）。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        stage = getattr(record, "stage", "")
        if stage:
            entry["stage"] = stage
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器，重复调用不会叠加 handler

    未知的级别名按 INFO 处理。
    """
    root = logging.getLogger()
    reset_logging()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(StageFilter())
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

"""Логирование дашборда: консоль (text/json) и файл logs/app.log.

Использование:
    from dashboard.logging_config import setup_logging

    setup_logging()  # один раз, в dashboard.main

    logger = logging.getLogger(__name__)
    logger.info("Статус получен", extra={"job_id": "job-123", "seq": 4})

Переменные окружения (через dashboard.config):
    LOG_LEVEL - DEBUG, INFO, WARNING, ERROR. По умолчанию: INFO
    LOG_FORMAT - формат консоли: text или json. По умолчанию: text
    LOG_DIR - директория для app.log. По умолчанию: logs
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from dashboard.config import settings

# Библиотеки, которые пишут каждый HTTP-запрос на INFO
NOISY_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """Одна запись - одна JSON-строка, с контекстом задачи из extra."""

    CONTEXT_FIELDS = (
        "job_id",
        "seq",
        "event",
        "status",
        "status_code",
        "method",
        "path",
        "duration_ms",
        "exception_type",
    )

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
            "thread": record.threadName,
        }
        payload.update(
            (name, getattr(record, name))
            for name in self.CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def text_formatter() -> logging.Formatter:
    """Формат как в app.log desktop-клиента"""
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def get_log_level(level_name: Optional[str] = None) -> int:
    """Уровень по имени; неизвестное имя -> INFO"""
    level = logging.getLevelName((level_name or settings.log_level).upper())
    return level if isinstance(level, int) else logging.INFO


_logging_initialized = False


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> None:
    """Настроить корневой логгер. Повторный вызов ничего не делает."""
    global _logging_initialized
    if _logging_initialized:
        return

    level = get_log_level(log_level)
    use_json = (log_format or settings.log_format).lower() == "json"

    directory = Path(log_dir or settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(JSONFormatter() if use_json else text_formatter())

    # В файл всегда читаемый текст
    logfile = logging.FileHandler(directory / "app.log", encoding="utf-8", mode="a")
    logfile.setFormatter(text_formatter())

    logging.basicConfig(level=level, handlers=[console, logfile], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_initialized = True

"""
Конфигурация дашборда

Значения берутся из переменных окружения (и .env в рабочей директории).
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Настройки клиента бэкенда обогащения"""
    api_base_url: str = os.getenv("ENRICHMENT_API_URL", "http://localhost:3000")

    # Таймауты HTTP (сек); загрузка CSV идёт с отдельным, увеличенным
    api_timeout: float = float(os.getenv("ENRICHMENT_API_TIMEOUT", "120"))
    upload_timeout: float = float(os.getenv("ENRICHMENT_UPLOAD_TIMEOUT", "600"))

    # Количество попыток GET-запросов (1 = без ретраев)
    max_retries: int = int(os.getenv("ENRICHMENT_MAX_RETRIES", "1"))

    # Интервал опроса статуса задачи (мс)
    poll_interval_ms: int = int(os.getenv("ENRICHMENT_POLL_INTERVAL_MS", "5000"))

    # Логирование
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_format: str = os.getenv("LOG_FORMAT", "text").lower()
    log_dir: str = os.getenv("LOG_DIR", "logs")


settings = Settings()

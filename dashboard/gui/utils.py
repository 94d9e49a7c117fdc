"""Общие утилиты GUI"""
from __future__ import annotations

import logging
import webbrowser
from datetime import datetime, timezone
from typing import Optional

from enrich_core.progress import round_half_up

logger = logging.getLogger(__name__)

STATUS_TEXT = {
    "running": "🔄 Running",
    "completed": "✅ Completed",
    "failed": "❌ Failed",
}


def status_text(status: str) -> str:
    """Текст статуса с эмодзи (неизвестный статус - как есть)"""
    return STATUS_TEXT.get(status, f"🕒 {status}" if status else "🕒 Unknown")


def parse_iso(dt_str: Optional[str]) -> Optional[datetime]:
    """ISO-строка -> aware datetime (без зоны считаем UTC)"""
    if not dt_str:
        return None
    try:
        dt = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_distance(dt: datetime, now: Optional[datetime] = None) -> str:
    """Человекочитаемое расстояние между датами ("5 minutes", "about 2 hours")"""
    now = now or datetime.now(timezone.utc)
    seconds = abs((now - dt).total_seconds())
    minutes = round_half_up(seconds / 60)

    if minutes < 1:
        return "less than a minute"
    if minutes < 45:
        return "1 minute" if minutes == 1 else f"{minutes} minutes"
    hours = round_half_up(minutes / 60)
    if minutes < 90:
        return "about 1 hour"
    if hours < 24:
        return f"about {hours} hours"
    days = round_half_up(hours / 24)
    if days < 30:
        return "1 day" if days == 1 else f"{days} days"
    months = round_half_up(days / 30)
    if months < 12:
        return "about 1 month" if months == 1 else f"{months} months"
    years = round_half_up(days / 365)
    return "about 1 year" if years <= 1 else f"about {years} years"


def format_distance_to_now(dt_str: Optional[str], now: Optional[datetime] = None) -> str:
    """format_distance для ISO-строки; пусто или мусор -> N/A"""
    dt = parse_iso(dt_str)
    if dt is None:
        return "N/A"
    return format_distance(dt, now)


def format_date(dt_str: Optional[str]) -> str:
    """Дата в локальной зоне пользователя"""
    dt = parse_iso(dt_str)
    if dt is None:
        return dt_str or ""
    return dt.astimezone().strftime("%d.%m.%Y")


def open_url(url: str) -> bool:
    """Открыть ссылку в браузере по умолчанию"""
    logger.info(f"Opening URL: {url}")
    return webbrowser.open(url, new=2)

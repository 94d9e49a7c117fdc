"""Исключения клиента бэкенда обогащения"""
from __future__ import annotations

from typing import Optional


class EnrichmentAPIError(Exception):
    """Базовая ошибка API обогащения (текст - сообщение бэкенда, если есть)"""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(EnrichmentAPIError):
    """Нет доступа (401)"""

    pass


class ForbiddenError(EnrichmentAPIError):
    """Доступ запрещён (403)"""

    pass


class NotFoundError(EnrichmentAPIError):
    """Задача или ресурс не найдены (404)"""

    pass


class PayloadTooLargeError(EnrichmentAPIError):
    """Слишком большой файл (413)"""

    pass


class RateLimitError(EnrichmentAPIError):
    """Слишком много запросов (429)"""

    pass


class ServerError(EnrichmentAPIError):
    """Ошибка сервера (5xx)"""

    pass


class ServerUnavailableError(EnrichmentAPIError):
    """Ответ от сервера не получен (сетевая ошибка)"""

    pass


class InvalidResponseError(EnrichmentAPIError):
    """Ответ пришёл, но не соответствует контракту"""

    pass


def describe_error(exc: BaseException, fallback: str) -> str:
    """Текст ошибки для пользователя: сообщение исключения или fallback"""
    message = str(exc).strip()
    return message or fallback

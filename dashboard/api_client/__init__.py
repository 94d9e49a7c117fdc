"""
Модуль клиента бэкенда обогащения.

Компоненты:
- client.py - EnrichmentClient
- job_create.py / job_read.py / job_download.py - миксины по ресурсам
- exceptions.py - EnrichmentAPIError и наследники, describe_error
- http_pool.py - Connection pooling
"""

from dashboard.api_client.client import EnrichmentClient
from dashboard.api_client.exceptions import (
    AuthenticationError,
    EnrichmentAPIError,
    ForbiddenError,
    InvalidResponseError,
    NotFoundError,
    PayloadTooLargeError,
    RateLimitError,
    ServerError,
    ServerUnavailableError,
    describe_error,
)
from dashboard.api_client.http_pool import close_http_client

__all__ = [
    "EnrichmentClient",
    "EnrichmentAPIError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "PayloadTooLargeError",
    "RateLimitError",
    "ServerError",
    "ServerUnavailableError",
    "InvalidResponseError",
    "describe_error",
    "close_http_client",
]

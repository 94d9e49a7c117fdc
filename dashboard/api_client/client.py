"""HTTP-клиент бэкенда обогащения Instagram-профилей"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

import httpx

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
)
from dashboard.api_client.http_pool import get_http_client
from dashboard.api_client.job_create import JobCreateMixin
from dashboard.api_client.job_download import JobDownloadMixin
from dashboard.api_client.job_read import JobReadMixin
from dashboard.config import settings

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network Error: no response received from server"

_STATUS_ERRORS = {
    401: (AuthenticationError, "Unauthorized access"),
    403: (ForbiddenError, "Forbidden access"),
    404: (NotFoundError, "Resource not found"),
    413: (PayloadTooLargeError, "Payload too large"),
    429: (RateLimitError, "Too many requests - rate limited"),
}


def _error_text(resp: httpx.Response) -> Optional[str]:
    """Достать поле error из JSON ответа, если оно есть"""
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None


@dataclass
class EnrichmentClient(JobCreateMixin, JobReadMixin, JobDownloadMixin):
    """Клиент REST API /api/enrichment"""

    base_url: str = field(default_factory=lambda: settings.api_base_url)
    timeout: float = field(default_factory=lambda: settings.api_timeout)
    upload_timeout: float = field(default_factory=lambda: settings.upload_timeout)
    max_retries: int = field(default_factory=lambda: settings.max_retries)
    transport: Optional[httpx.BaseTransport] = None

    def __post_init__(self):
        """Логирование конфигурации при инициализации"""
        logger.info(
            f"EnrichmentClient initialized: base_url={self.base_url}, "
            f"timeout={self.timeout}, max_retries={self.max_retries}"
        )

    def _http(self, timeout: Optional[float] = None) -> httpx.Client:
        return get_http_client(self.base_url, timeout or self.timeout, self.transport)

    def _handle_response_error(self, resp: httpx.Response):
        """Обработать ошибки ответа: сообщение бэкенда, иначе общее"""
        if resp.is_success:
            return
        code = resp.status_code
        text = _error_text(resp)
        message = text or f"Request failed with status code {code}"

        if code in _STATUS_ERRORS:
            exc_class, log_text = _STATUS_ERRORS[code]
        elif code >= 500:
            exc_class, log_text = ServerError, "Server error"
        else:
            exc_class, log_text = EnrichmentAPIError, f"Error: {code}"

        logger.error(
            f"{log_text}: {resp.request.method} {resp.request.url.path} -> {code}",
            extra={"status_code": code, "path": resp.request.url.path},
        )
        raise exc_class(message, status_code=code)

    def _request_with_retry(
        self,
        method: str,
        path: str,
        *,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        **kwargs,
    ) -> httpx.Response:
        """Выполнить запрос; ретраи только для 5xx и сетевых ошибок"""
        timeout = timeout or self.timeout
        retries = max(1, retries if retries is not None else self.max_retries)

        client = self._http(timeout)
        for attempt in range(retries):
            try:
                resp = client.request(method, path, timeout=timeout, **kwargs)
            except httpx.TransportError as e:
                if attempt < retries - 1:
                    delay = 2**attempt
                    logger.warning(f"Сетевая ошибка: {e}, ретрай через {delay}с...")
                    time.sleep(delay)
                    continue
                logger.error(f"No response received from server: {method.upper()} {path}: {e}")
                raise ServerUnavailableError(NETWORK_ERROR_MESSAGE) from e

            if resp.status_code >= 500 and attempt < retries - 1:
                delay = 2**attempt
                logger.warning(f"Сервер вернул {resp.status_code}, ретрай через {delay}с...")
                time.sleep(delay)
                continue

            self._handle_response_error(resp)
            return resp

        raise ServerUnavailableError(NETWORK_ERROR_MESSAGE)

    @staticmethod
    def _json(resp: httpx.Response) -> dict:
        """Разобрать JSON-объект ответа"""
        try:
            data = resp.json()
        except ValueError as e:
            raise InvalidResponseError("Invalid response from server") from e
        if not isinstance(data, dict):
            raise InvalidResponseError("Invalid response from server")
        return data

    def _unwrap(self, resp: httpx.Response, fallback: str) -> dict:
        """Проверить флаг success; при false - ошибка с текстом бэкенда"""
        data = self._json(resp)
        if not data.get("success"):
            raise EnrichmentAPIError(data.get("error") or fallback, resp.status_code)
        return data

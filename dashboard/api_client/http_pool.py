"""HTTP connection pooling для клиента бэкенда обогащения"""
from __future__ import annotations

import logging
import threading
from typing import Optional

import httpx
from httpx import Limits

logger = logging.getLogger(__name__)

# Глобальный пул соединений
_http_client: httpx.Client | None = None
_http_client_key: tuple | None = None
# Клиент создаётся и закрывается из разных потоков (пул воркеров и GUI)
_http_client_lock = threading.RLock()


def get_http_client(
    base_url: str,
    timeout: float = 120.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Получить или создать HTTP клиент с connection pooling"""
    global _http_client, _http_client_key
    key = (base_url, id(transport) if transport is not None else None)
    with _http_client_lock:
        if _http_client is None or _http_client_key != key:
            if _http_client is not None:
                close_http_client()
            _http_client = httpx.Client(
                base_url=base_url,
                limits=Limits(max_connections=10, max_keepalive_connections=5),
                timeout=timeout,
                transport=transport,
            )
            _http_client_key = key
            logger.debug(f"HTTP client created for {base_url}")
        return _http_client


def close_http_client() -> None:
    """Закрыть пул соединений (при выходе из приложения)"""
    global _http_client, _http_client_key
    with _http_client_lock:
        if _http_client is not None:
            try:
                _http_client.close()
            except RuntimeError as e:
                logger.warning(f"Ошибка закрытия HTTP клиента: {e}")
        _http_client = None
        _http_client_key = None

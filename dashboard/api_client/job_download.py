"""Миксин получения ссылок на результаты."""
from __future__ import annotations

import logging
from typing import Optional

from dashboard.api_client.exceptions import InvalidResponseError

logger = logging.getLogger(__name__)


class JobDownloadMixin:
    """Ссылки на CSV с результатами задач."""

    def get_download_url(self, job_id: str) -> Optional[str]:
        """Получить ссылку на CSV задачи (None, если бэкенд её не вернул)."""
        resp = self._request_with_retry("get", f"/api/enrichment/{job_id}/download")
        data = self._unwrap(resp, "Failed to get download URL")
        url = data.get("csvUrl")
        if not url:
            logger.warning(f"Бэкенд не вернул csvUrl для задачи {job_id}")
            return None
        return str(url)

    def get_bulk_download_url(self) -> str:
        """Получить ссылку на общий CSV по всем задачам."""
        resp = self._request_with_retry("get", "/api/enrichment/download-all")
        data = self._json(resp)
        url = data.get("downloadUrl")
        if not url:
            raise InvalidResponseError(
                data.get("error") or "Download URL not available", resp.status_code
            )
        return str(url)

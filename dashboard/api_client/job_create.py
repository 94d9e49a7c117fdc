"""Миксин создания задач обогащения."""
from __future__ import annotations

import logging

import httpx

from dashboard.api_client.exceptions import InvalidResponseError, ServerUnavailableError
from enrich_core.models import JobStartResult
from enrich_core.validation import JobSubmission

logger = logging.getLogger(__name__)


class JobCreateMixin:
    """Создание задач обогащения."""

    def start_enrichment(self, submission: JobSubmission) -> JobStartResult:
        """
        Загрузить CSV и запустить задачу

        Запрос не ретраится: при ошибке пользователь отправляет форму заново.

        Args:
            submission: проверенные данные формы

        Returns:
            JobStartResult с jobId созданной задачи
        """
        form_data = {
            "name": submission.name,
            "email": submission.email,
            "numberOfNodes": str(submission.number_of_nodes),
        }

        # Используем увеличенный таймаут для загрузки
        client = self._http(self.upload_timeout)
        try:
            with open(submission.csv_path, "rb") as csv_file:
                resp = client.post(
                    "/api/enrichment/start",
                    data=form_data,
                    timeout=self.upload_timeout,
                    files={"csvFile": (submission.file_name, csv_file, "text/csv")},
                )
        except httpx.TransportError as e:
            logger.error(f"Upload error: {e}")
            raise ServerUnavailableError(
                "Network Error: no response received from server"
            ) from e

        logger.info(f"POST /api/enrichment/start response: {resp.status_code}")
        if resp.status_code >= 400:
            logger.error(f"POST /api/enrichment/start error response: {resp.text[:1000]}")
        self._handle_response_error(resp)

        data = self._json(resp)
        payload = data.get("data")
        if not data.get("success") or not isinstance(payload, dict) or not payload.get("jobId"):
            raise InvalidResponseError("Invalid response from server", resp.status_code)

        result = JobStartResult.from_dict(payload)
        logger.info(
            f"Задача создана: {result.job_id}, профилей={result.total_profiles}, "
            f"узлов={submission.number_of_nodes}",
            extra={"job_id": result.job_id},
        )
        return result

"""Миксин чтения задач обогащения."""
from __future__ import annotations

import logging
from typing import List

from dashboard.api_client.exceptions import InvalidResponseError
from enrich_core.models import JobStatus

logger = logging.getLogger(__name__)


def _parse_job(j: dict) -> JobStatus:
    """Парсинг JSON задачи в JobStatus."""
    if not isinstance(j, dict):
        raise InvalidResponseError("Invalid response from server")
    try:
        return JobStatus.from_dict(j)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidResponseError(f"Invalid job payload: {e}") from e


class JobReadMixin:
    """Чтение статуса и списка задач."""

    def get_job_status(self, job_id: str) -> JobStatus:
        """Получить снимок статуса задачи."""
        resp = self._request_with_retry("get", f"/api/enrichment/{job_id}/status")
        data = self._unwrap(resp, "Failed to fetch job status")
        job = _parse_job(data.get("data"))
        logger.debug(
            f"get_job_status {job_id}: status={job.status}, "
            f"processed={job.processed_profiles}/{job.total_profiles}",
            extra={"job_id": job_id},
        )
        return job

    def list_jobs(self) -> List[JobStatus]:
        """Получить список последних задач."""
        logger.debug(f"list_jobs: GET {self.base_url}/api/enrichment/jobs")
        resp = self._request_with_retry("get", "/api/enrichment/jobs")
        data = self._unwrap(resp, "Failed to fetch jobs")
        jobs = data.get("jobs") or []
        if not isinstance(jobs, list):
            raise InvalidResponseError("Invalid response from server")
        logger.debug(f"list_jobs response: {len(jobs)} jobs")
        return [_parse_job(j) for j in jobs]

"""
Состояние опроса статуса одной задачи.

Три наблюдаемых состояния: LOADING, READY (есть снимок), ERROR (есть текст
ошибки). Каждый запрос получает порядковый номер; ответ на устаревший
запрос отбрасывается, применяется только ответ на последний отправленный.
Таймер и сетевой слой живут снаружи (JobStatusPoller в GUI).
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from enrich_core.models import JobStatus
from enrich_core.progress import overall_progress

logger = logging.getLogger(__name__)


class PollState(Enum):
    """Наблюдаемое состояние панели статуса"""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class StatusTracker:
    """Машина состояний опроса статуса задачи"""

    def __init__(self, job_id: str):
        self.job_id = job_id
        self.state = PollState.LOADING
        self.job: Optional[JobStatus] = None
        self.error: Optional[str] = None
        self.download_url: Optional[str] = None
        self._seq = 0
        self._in_flight = False
        self._disposed = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def last_seq(self) -> int:
        return self._seq

    def begin_request(self) -> int:
        """Начать запрос статуса: LOADING, сброс ошибки, новый номер запроса"""
        self._seq += 1
        self._in_flight = True
        self.state = PollState.LOADING
        self.error = None
        return self._seq

    def _accept(self, seq: int) -> bool:
        if self._disposed:
            return False
        if seq != self._seq:
            logger.debug(
                f"Задача {self.job_id}: отброшен устаревший ответ #{seq} (текущий #{self._seq})"
            )
            return False
        self._in_flight = False
        return True

    def apply_status(self, seq: int, job: JobStatus) -> bool:
        """Применить снимок статуса. False - ответ устарел или трекер закрыт"""
        if not self._accept(seq):
            return False
        previous = self.job.status if self.job else None
        if previous is not None and previous != job.status:
            logger.info(f"Статус задачи {self.job_id} изменился: {previous} -> {job.status}")
        self.job = job
        self.state = PollState.READY
        return True

    def apply_error(self, seq: int, message: str) -> bool:
        """Применить ошибку запроса. False - ответ устарел или трекер закрыт"""
        if not self._accept(seq):
            return False
        self.error = message
        self.state = PollState.ERROR
        return True

    def set_download_url(self, url: str) -> bool:
        if self._disposed:
            return False
        self.download_url = url
        return True

    @property
    def should_poll(self) -> bool:
        """Нужен ли запрос на очередном тике таймера"""
        return (
            not self._disposed
            and not self._in_flight
            and self.state is not PollState.ERROR
            and self.job is not None
            and self.job.is_running
        )

    @property
    def is_terminal(self) -> bool:
        return self.job is not None and self.job.is_terminal

    @property
    def overall_progress(self) -> int:
        return overall_progress(self.job)

    def dispose(self):
        """Закрыть трекер: последующие ответы игнорируются"""
        self._disposed = True
        self._in_flight = False

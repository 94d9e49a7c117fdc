"""Контроллер polling статуса задачи"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from dashboard.api_client import describe_error
from dashboard.config import settings
from dashboard.gui.job_status.signals import WorkerSignals
from enrich_core.models import JobStatus
from enrich_core.status_tracker import StatusTracker

logger = logging.getLogger(__name__)

STATUS_ERROR_FALLBACK = "Failed to fetch job status"
DOWNLOAD_URL_ERROR = "Failed to get download URL. Please try again later."


class JobStatusPoller(QObject):
    """
    Опрос статуса одной задачи по таймеру

    Таймер тикает каждые poll_interval_ms; запрос уходит только если
    последний статус running и предыдущий запрос уже завершился.
    Таймер останавливается на completed/failed, на ошибке и в shutdown().

    Сигналы:
        - state_changed: изменилось состояние (StatusTracker)
        - download_url_ready: получена ссылка на CSV
        - download_url_error: не удалось получить ссылку (текст для toast)
    """

    state_changed = Signal(object)
    download_url_ready = Signal(str)
    download_url_error = Signal(str)

    def __init__(
        self,
        client,
        job_id: str,
        interval_ms: Optional[int] = None,
        executor: Optional[Executor] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._client = client
        self.tracker = StatusTracker(job_id)

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2)

        self._signals = WorkerSignals()
        self._signals.status_loaded.connect(self._on_status_loaded)
        self._signals.status_error.connect(self._on_status_error)
        self._signals.download_url_loaded.connect(self._on_download_url_loaded)
        self._signals.download_url_error.connect(self._on_download_url_error)

        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(interval_ms or settings.poll_interval_ms)
        self.refresh_timer.timeout.connect(self._on_tick)

    @property
    def job_id(self) -> str:
        return self.tracker.job_id

    @property
    def is_polling(self) -> bool:
        return self.refresh_timer.isActive()

    def start(self):
        """Первый запрос статуса и запуск таймера"""
        logger.info(f"Начат опрос статуса задачи {self.job_id}", extra={"job_id": self.job_id})
        self.refresh_timer.start()
        self.fetch_status()

    def refresh(self):
        """Ручное обновление (кнопка Refresh): запрос идёт всегда"""
        logger.debug(f"Ручное обновление статуса задачи {self.job_id}")
        self.fetch_status()

    def shutdown(self):
        """Остановить таймер и игнорировать все последующие ответы"""
        if self.tracker.disposed:
            return
        self.refresh_timer.stop()
        self.tracker.dispose()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info(f"Опрос статуса задачи {self.job_id} остановлен")

    def fetch_status(self):
        """Запросить статус задачи в фоне"""
        if self.tracker.disposed:
            return
        seq = self.tracker.begin_request()
        self.state_changed.emit(self.tracker)
        self._submit(self._fetch_status_bg, seq)

    def fetch_download_url(self):
        """Запросить ссылку на CSV в фоне (ошибка не трогает основной статус)"""
        if self.tracker.disposed:
            return
        self._submit(self._fetch_download_url_bg)

    def _submit(self, fn, *args):
        try:
            self._executor.submit(fn, *args)
        except RuntimeError as e:
            # executor уже закрыт
            logger.debug(f"Запрос для задачи {self.job_id} не отправлен: {e}")

    def _on_tick(self):
        """Тик таймера"""
        if self.tracker.should_poll:
            self.fetch_status()
        else:
            logger.debug(
                f"Тик пропущен: job={self.job_id}, state={self.tracker.state.value}, "
                f"in_flight={self.tracker.in_flight}"
            )

    def _fetch_status_bg(self, seq: int):
        """Фоновая загрузка статуса"""
        try:
            job = self._client.get_job_status(self.job_id)
        except Exception as e:
            logger.error(
                f"Error fetching job status {self.job_id}: {e}",
                extra={"job_id": self.job_id, "seq": seq},
            )
            self._signals.status_error.emit(seq, describe_error(e, STATUS_ERROR_FALLBACK))
            return
        self._signals.status_loaded.emit(seq, job)

    def _fetch_download_url_bg(self):
        """Фоновая загрузка ссылки на результат"""
        try:
            url = self._client.get_download_url(self.job_id)
        except Exception as e:
            logger.error(
                f"Error fetching download URL {self.job_id}: {e}",
                extra={"job_id": self.job_id},
            )
            self._signals.download_url_error.emit(DOWNLOAD_URL_ERROR)
            return
        self._signals.download_url_loaded.emit(url)

    def _on_status_loaded(self, seq: int, job: JobStatus):
        """Слот: статус получен"""
        if not self.tracker.apply_status(seq, job):
            return

        if job.is_terminal:
            if self.refresh_timer.isActive():
                logger.info(f"Задача {self.job_id} завершена ({job.status}), опрос остановлен")
            self.refresh_timer.stop()
        elif job.is_running and not self.refresh_timer.isActive():
            # После ошибки и ручного обновления опрос возобновляется
            self.refresh_timer.start()

        self.state_changed.emit(self.tracker)

        if job.is_completed:
            self.fetch_download_url()

    def _on_status_error(self, seq: int, message: str):
        """Слот: ошибка запроса статуса"""
        if not self.tracker.apply_error(seq, message):
            return
        self.refresh_timer.stop()
        self.state_changed.emit(self.tracker)

    def _on_download_url_loaded(self, url: Optional[str]):
        if not url or not self.tracker.set_download_url(url):
            return
        self.download_url_ready.emit(url)

    def _on_download_url_error(self, message: str):
        if self.tracker.disposed:
            return
        self.download_url_error.emit(message)


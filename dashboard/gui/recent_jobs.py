"""Панель последних задач (History)"""
from __future__ import annotations

import html
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import List, Optional

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from dashboard.api_client import describe_error
from dashboard.gui.toast import show_toast
from dashboard.gui.utils import format_date, format_distance_to_now, open_url, status_text
from enrich_core.models import JobState, JobStatus
from enrich_core.progress import ratio_percent

logger = logging.getLogger(__name__)

JOBS_ERROR_FALLBACK = "Failed to fetch recent jobs"
DOWNLOAD_ERROR_FALLBACK = "Failed to download results"


class _JobsSignals(QObject):
    """Сигналы фоновых запросов списка"""

    jobs_loaded = Signal(list)
    jobs_error = Signal(str)
    download_ready = Signal(str, str)  # job_id, url
    download_error = Signal(str, str)  # job_id, message


class RecentJobsPanel(QWidget):
    """
    Список последних задач

    Загружается один раз при первом показе вкладки, дальше только
    по кнопке Refresh. Ссылка на CSV запрашивается заново при каждом
    нажатии Download (без общего кэша с панелью статуса).

    Сигналы:
        - job_selected: пользователь открыл задачу (job_id)
    """

    job_selected = Signal(str)

    def __init__(self, client, executor: Optional[Executor] = None, parent=None):
        super().__init__(parent)
        self._client = client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2)
        self._signals = _JobsSignals()
        self._signals.jobs_loaded.connect(self._on_jobs_loaded)
        self._signals.jobs_error.connect(self._on_jobs_error)
        self._signals.download_ready.connect(self._on_download_ready)
        self._signals.download_error.connect(self._on_download_error)

        self.jobs: List[JobStatus] = []
        self.error: Optional[str] = None
        self._is_fetching = False
        self._activated = False

        self._setup_ui()

    def _setup_ui(self):
        """Настроить UI панели"""
        layout = QVBoxLayout(self)

        header_layout = QHBoxLayout()
        title_layout = QVBoxLayout()
        title = QLabel("Recent Jobs")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        title_layout.addWidget(title)
        subtitle = QLabel("View and manage your recent enrichment jobs")
        subtitle.setStyleSheet("color: #666;")
        title_layout.addWidget(subtitle)
        header_layout.addLayout(title_layout)
        header_layout.addStretch()

        self.refresh_btn = QPushButton("🔄 Refresh")
        self.refresh_btn.clicked.connect(self.refresh)
        header_layout.addWidget(self.refresh_btn)
        layout.addLayout(header_layout)

        self.status_label = QLabel()
        self.status_label.setTextFormat(Qt.PlainText)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.list_widget = QWidget()
        self.list_layout = QVBoxLayout(self.list_widget)
        self.list_layout.addStretch()
        self.scroll.setWidget(self.list_widget)
        layout.addWidget(self.scroll, 1)

    def activate(self):
        """Вкладка стала активной: первая загрузка списка"""
        if self._activated:
            return
        self._activated = True
        self.refresh()

    def refresh(self):
        """Загрузить список задач"""
        if self._is_fetching:
            return
        self._is_fetching = True
        self.error = None
        self.refresh_btn.setEnabled(False)
        self.status_label.setStyleSheet("")
        self.status_label.setText("⏳ Loading...")
        self.status_label.show()
        self._executor.submit(self._fetch_jobs_bg)

    def _fetch_jobs_bg(self):
        """Фоновая загрузка списка задач"""
        try:
            jobs = self._client.list_jobs()
        except Exception as e:
            logger.error(f"Error fetching recent jobs: {e}")
            self._signals.jobs_error.emit(describe_error(e, JOBS_ERROR_FALLBACK))
            return
        self._signals.jobs_loaded.emit(jobs)

    def _on_jobs_loaded(self, jobs):
        """Слот: список задач получен"""
        self._is_fetching = False
        self.refresh_btn.setEnabled(True)
        self.jobs = list(jobs)
        logger.info(f"Загружено задач: {len(self.jobs)}")
        self._update_list()

    def _on_jobs_error(self, message: str):
        """Слот: ошибка загрузки списка"""
        self._is_fetching = False
        self.refresh_btn.setEnabled(True)
        self.error = message
        self.status_label.setStyleSheet("color: #b91c1c;")
        self.status_label.setText(f"Error: {message}")
        self.status_label.show()
        self._clear_rows()

    def _clear_rows(self):
        while self.list_layout.count() > 1:
            item = self.list_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    def _update_list(self):
        """Перерисовать строки задач"""
        self._clear_rows()
        if not self.jobs:
            self.status_label.setText(
                "No jobs found. You haven't created any enrichment jobs yet."
            )
            self.status_label.show()
            return
        self.status_label.hide()
        for idx, job in enumerate(self.jobs):
            self.list_layout.insertWidget(idx, self._create_job_row(job))

    def _create_job_row(self, job: JobStatus) -> QWidget:
        """Создать строку задачи с кнопками действий"""
        row = QFrame()
        row.setObjectName(f"job-{job.id}")
        row.setFrameShape(QFrame.StyledPanel)
        row_layout = QHBoxLayout(row)

        info_layout = QVBoxLayout()
        title = QLabel(f"<b>{html.escape(job.name)}</b>  {html.escape(status_text(job.status))}")
        title.setObjectName("title")
        title.setTextFormat(Qt.RichText)
        info_layout.addWidget(title)
        id_label = QLabel(job.id)
        id_label.setStyleSheet("color: #888; font-family: monospace;")
        info_layout.addWidget(id_label)
        info_layout.addWidget(
            QLabel(
                f"🕒 {format_date(job.created_at)}   "
                f"{format_distance_to_now(job.created_at)} ago   "
                f"{job.total_profiles} profiles   {job.node_count} nodes"
            )
        )

        if job.is_running and job.processed_profiles is not None and job.total_profiles:
            percent = ratio_percent(job.processed_profiles, job.total_profiles)
            progress_label = QLabel(f"Progress: {percent}%")
            progress_label.setObjectName("progress")
            info_layout.addWidget(progress_label)
            bar = QProgressBar()
            bar.setRange(0, 100)
            bar.setValue(max(0, min(percent, 100)))
            bar.setTextVisible(False)
            info_layout.addWidget(bar)

        if job.state is JobState.FAILED and job.error_message:
            error_label = QLabel(f"Error: {job.error_message}")
            error_label.setTextFormat(Qt.PlainText)
            error_label.setStyleSheet("color: #b91c1c;")
            error_label.setWordWrap(True)
            info_layout.addWidget(error_label)

        row_layout.addLayout(info_layout, 1)

        view_btn = QPushButton("👁 View")
        view_btn.setObjectName("view")
        view_btn.clicked.connect(lambda checked=False, jid=job.id: self.job_selected.emit(jid))
        row_layout.addWidget(view_btn)

        if job.is_completed:
            download_btn = QPushButton("⬇️")
            download_btn.setObjectName("download")
            download_btn.setToolTip("Download results")
            download_btn.clicked.connect(
                lambda checked=False, jid=job.id: self.download(jid)
            )
            row_layout.addWidget(download_btn)

        return row

    def download(self, job_id: str):
        """Запросить ссылку на CSV задачи и открыть её"""
        self._executor.submit(self._fetch_download_bg, job_id)

    def _fetch_download_bg(self, job_id: str):
        try:
            url = self._client.get_download_url(job_id)
            if not url:
                raise ValueError("Download URL not available")
        except Exception as e:
            logger.error(f"Error downloading results for {job_id}: {e}")
            self._signals.download_error.emit(job_id, describe_error(e, DOWNLOAD_ERROR_FALLBACK))
            return
        self._signals.download_ready.emit(job_id, url)

    def _on_download_ready(self, job_id: str, url: str):
        open_url(url)

    def _on_download_error(self, job_id: str, message: str):
        show_toast(self, message, success=False, title="Download Failed")

    def shutdown(self):
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

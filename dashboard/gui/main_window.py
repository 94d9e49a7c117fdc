"""
Главное окно дашборда
Вкладки: загрузка CSV, статус задачи, история
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

from PySide6.QtCore import QObject, QSettings, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from dashboard.api_client import EnrichmentClient, close_http_client, describe_error
from dashboard.gui.job_status import JobStatusPanel
from dashboard.gui.recent_jobs import RecentJobsPanel
from dashboard.gui.toast import show_toast
from dashboard.gui.upload_form import UploadForm
from dashboard.gui.utils import open_url

logger = logging.getLogger(__name__)

BULK_DOWNLOAD_ERROR_FALLBACK = "Failed to download CSV"


class _BulkDownloadSignals(QObject):
    ready = Signal(str)
    failed = Signal(str)


class MainWindow(QMainWindow):
    """Главное окно дашборда обогащения"""

    def __init__(self, client: Optional[EnrichmentClient] = None, executor: Optional[Executor] = None):
        super().__init__()
        self.client = client or EnrichmentClient()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2)

        self.current_job_id: Optional[str] = None
        self.status_panel: Optional[JobStatusPanel] = None

        self._bulk_signals = _BulkDownloadSignals()
        self._bulk_signals.ready.connect(self._on_bulk_download_ready)
        self._bulk_signals.failed.connect(self._on_bulk_download_failed)

        self._setup_ui()

        self.setWindowTitle("Instagram Enrichment")
        self.resize(1000, 760)
        self._restore_settings()

    def _setup_ui(self):
        """Настройка интерфейса"""
        central = QWidget()
        layout = QVBoxLayout(central)

        header = QHBoxLayout()
        title_layout = QVBoxLayout()
        title = QLabel("Instagram Enrichment")
        title.setStyleSheet("font-size: 22px; font-weight: bold; color: #7c3aed;")
        title_layout.addWidget(title)
        subtitle = QLabel("Multi-node scraping dashboard")
        subtitle.setStyleSheet("color: #666;")
        title_layout.addWidget(subtitle)
        header.addLayout(title_layout)
        header.addStretch()

        self.download_all_btn = QPushButton("⬇️ Download All CSV")
        self.download_all_btn.clicked.connect(self.download_all)
        header.addWidget(self.download_all_btn)
        layout.addLayout(header)

        self.tabs = QTabWidget()
        self.upload_form = UploadForm(self.client, executor=self._executor)
        self.upload_form.job_created.connect(self._on_job_created)
        self.upload_form.job_error.connect(self._on_job_error)
        self.upload_tab_index = self.tabs.addTab(self.upload_form, "Upload")

        # Заглушка до появления первой задачи
        self.status_placeholder = QLabel("Create or select a job to see its status")
        self.status_tab_index = self.tabs.addTab(self.status_placeholder, "Status")
        self.tabs.setTabEnabled(self.status_tab_index, False)

        self.recent_jobs = RecentJobsPanel(self.client, executor=self._executor)
        self.recent_jobs.job_selected.connect(self.show_job)
        self.history_tab_index = self.tabs.addTab(self.recent_jobs, "History")

        self.tabs.currentChanged.connect(self._on_tab_changed)
        layout.addWidget(self.tabs, 1)

        self.setCentralWidget(central)

    def _on_tab_changed(self, index: int):
        if index == self.history_tab_index:
            self.recent_jobs.activate()

    def _on_job_created(self, job_id: str):
        """Задача создана: открыть её статус"""
        logger.info(f"Job created: {job_id}", extra={"job_id": job_id})
        show_toast(self, f"Your job ID is {job_id}", title="Job Created Successfully")
        self.show_job(job_id)

    def _on_job_error(self, message: str):
        show_toast(self, message, success=False, title="Error Creating Job")

    def show_job(self, job_id: str):
        """Показать статус задачи (предыдущая панель останавливается)"""
        if self.status_panel is not None:
            self.status_panel.shutdown()

        self.current_job_id = job_id
        panel = JobStatusPanel(self.client, job_id, executor=self._executor)

        old_widget = self.tabs.widget(self.status_tab_index)
        self.tabs.removeTab(self.status_tab_index)
        self.tabs.insertTab(self.status_tab_index, panel, "Status")
        if old_widget is not None:
            old_widget.deleteLater()

        self.status_panel = panel
        self.tabs.setTabEnabled(self.status_tab_index, True)
        self.tabs.setCurrentIndex(self.status_tab_index)
        panel.start()

    def download_all(self):
        """Скачать общий CSV по всем задачам"""
        self.download_all_btn.setEnabled(False)
        self._executor.submit(self._bulk_download_bg)

    def _bulk_download_bg(self):
        try:
            url = self.client.get_bulk_download_url()
        except Exception as e:
            logger.error(f"Error downloading CSV: {e}")
            self._bulk_signals.failed.emit(describe_error(e, BULK_DOWNLOAD_ERROR_FALLBACK))
            return
        self._bulk_signals.ready.emit(url)

    def _on_bulk_download_ready(self, url: str):
        self.download_all_btn.setEnabled(True)
        open_url(url)

    def _on_bulk_download_failed(self, message: str):
        self.download_all_btn.setEnabled(True)
        show_toast(self, message, success=False, title="Download Failed")

    def _save_settings(self):
        """Сохранить геометрию окна"""
        qsettings = QSettings("InstagramEnrichment", "MainWindow")
        qsettings.setValue("geometry", self.saveGeometry())

    def _restore_settings(self):
        """Восстановить геометрию окна"""
        qsettings = QSettings("InstagramEnrichment", "MainWindow")
        geometry = qsettings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def shutdown(self):
        """Остановить опрос и фоновые запросы"""
        if self.status_panel is not None:
            self.status_panel.shutdown()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        close_http_client()

    def closeEvent(self, event):
        """Обработка закрытия окна"""
        self._save_settings()
        self.shutdown()
        event.accept()

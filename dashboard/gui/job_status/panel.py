"""Панель статуса задачи обогащения"""
from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from dashboard.gui.job_status.polling_controller import JobStatusPoller
from dashboard.gui.toast import show_toast
from dashboard.gui.utils import format_distance_to_now, open_url, status_text
from enrich_core.progress import node_percent, throughput_per_minute
from enrich_core.status_tracker import PollState, StatusTracker

logger = logging.getLogger(__name__)


class JobStatusPanel(QWidget):
    """Карточка статуса одной задачи с автообновлением"""

    def __init__(
        self,
        client,
        job_id: str,
        interval_ms: Optional[int] = None,
        executor: Optional[Executor] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.job_id = job_id
        self.poller = JobStatusPoller(
            client, job_id, interval_ms=interval_ms, executor=executor, parent=self
        )
        self.poller.state_changed.connect(self._render)
        self.poller.download_url_ready.connect(self._on_download_url_ready)
        self.poller.download_url_error.connect(self._on_download_url_error)

        self._setup_ui()

    def _setup_ui(self):
        """Настроить UI панели"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        header_layout = QHBoxLayout()
        title_layout = QVBoxLayout()
        title = QLabel("Job Status")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        title_layout.addWidget(title)
        self.job_id_label = QLabel(f"Job ID: {self.job_id}")
        self.job_id_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        title_layout.addWidget(self.job_id_label)
        header_layout.addLayout(title_layout)
        header_layout.addStretch()

        self.refresh_btn = QPushButton("🔄 Refresh")
        self.refresh_btn.clicked.connect(self.poller.refresh)
        header_layout.addWidget(self.refresh_btn)
        layout.addLayout(header_layout)

        self.error_label = QLabel()
        self.error_label.setTextFormat(Qt.PlainText)
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet(
            "QLabel { background-color: #fee2e2; color: #b91c1c; "
            "border: 1px solid #fca5a5; border-radius: 6px; padding: 8px; }"
        )
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.loading_label = QLabel("⏳ Loading...")
        self.loading_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.loading_label)

        # Основная информация
        self.content = QWidget()
        content_layout = QVBoxLayout(self.content)
        content_layout.setContentsMargins(0, 0, 0, 0)

        summary_layout = QHBoxLayout()
        self.status_label = QLabel()
        self.status_label.setStyleSheet("font-weight: bold;")
        summary_layout.addWidget(self.status_label)
        self.name_label = QLabel()
        self.name_label.setTextFormat(Qt.PlainText)
        summary_layout.addWidget(self.name_label)
        summary_layout.addStretch()
        self.counts_label = QLabel()
        self.counts_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        summary_layout.addWidget(self.counts_label)
        content_layout.addLayout(summary_layout)

        progress_header = QHBoxLayout()
        progress_header.addWidget(QLabel("Overall Progress"))
        progress_header.addStretch()
        self.progress_label = QLabel("0%")
        progress_header.addWidget(self.progress_label)
        content_layout.addLayout(progress_header)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setTextVisible(False)
        content_layout.addWidget(self.progress_bar)

        details = QGridLayout()
        self.started_label = QLabel()
        self.nodes_label = QLabel()
        self.speed_label = QLabel()
        self.eta_label = QLabel()
        for col, (caption, value_label) in enumerate(
            (
                ("Started", self.started_label),
                ("Nodes", self.nodes_label),
                ("Speed", self.speed_label),
                ("ETA", self.eta_label),
            )
        ):
            caption_label = QLabel(caption)
            caption_label.setStyleSheet("color: #666;")
            details.addWidget(caption_label, 0, col)
            details.addWidget(value_label, 1, col)
        content_layout.addLayout(details)

        self.nodes_group = QGroupBox("Node Progress")
        self.nodes_layout = QGridLayout(self.nodes_group)
        content_layout.addWidget(self.nodes_group)

        stats_layout = QHBoxLayout()
        self.successful_label = QLabel()
        self.successful_label.setStyleSheet("color: #15803d; font-weight: bold;")
        self.failed_label = QLabel()
        self.failed_label.setStyleSheet("color: #b91c1c; font-weight: bold;")
        stats_layout.addWidget(self.successful_label)
        stats_layout.addWidget(self.failed_label)
        content_layout.addLayout(stats_layout)

        self.job_error_label = QLabel()
        self.job_error_label.setTextFormat(Qt.PlainText)
        self.job_error_label.setWordWrap(True)
        self.job_error_label.setStyleSheet("color: #b91c1c;")
        content_layout.addWidget(self.job_error_label)

        layout.addWidget(self.content)
        self.content.hide()

        self.no_data_label = QLabel(
            "No data available. Could not retrieve job status information."
        )
        self.no_data_label.hide()
        layout.addWidget(self.no_data_label)

        layout.addStretch()

        footer = QFrame()
        footer_layout = QHBoxLayout(footer)
        footer_layout.setContentsMargins(0, 0, 0, 0)
        self.download_btn = QPushButton("⬇️ Download Results")
        self.download_btn.setEnabled(False)
        self.download_btn.clicked.connect(self._handle_download)
        footer_layout.addWidget(self.download_btn)
        self.refresh_status_btn = QPushButton("🔄 Refresh Status")
        self.refresh_status_btn.clicked.connect(self.poller.refresh)
        footer_layout.addWidget(self.refresh_status_btn)
        layout.addWidget(footer)
        self.download_btn.hide()

    def start(self):
        """Запустить опрос статуса"""
        self.poller.start()

    def shutdown(self):
        """Остановить опрос (при закрытии панели или смене задачи)"""
        self.poller.shutdown()

    def closeEvent(self, event):
        self.shutdown()
        super().closeEvent(event)

    def _render(self, tracker: StatusTracker):
        """Отрисовать текущее состояние"""
        loading = tracker.state is PollState.LOADING
        self.refresh_btn.setEnabled(not loading)
        self.refresh_status_btn.setEnabled(not loading)

        if tracker.state is PollState.ERROR:
            self.error_label.setText(f"Error: {tracker.error}")
            self.error_label.show()
            self.loading_label.hide()
            self.content.hide()
            self.no_data_label.hide()
            return
        self.error_label.hide()

        job = tracker.job
        self.loading_label.setVisible(loading and job is None)
        if job is None:
            self.content.hide()
            self.no_data_label.setVisible(not loading)
            return
        self.no_data_label.hide()
        self.content.show()

        self.status_label.setText(status_text(job.status))
        self.name_label.setText(job.name)
        self.counts_label.setText(
            f"{job.processed_profiles or 0} / {job.total_profiles or 0} profiles processed"
        )

        progress = tracker.overall_progress
        self.progress_label.setText(f"{progress}%")
        self.progress_bar.setValue(progress)

        self.started_label.setText(
            f"{format_distance_to_now(job.created_at)} ago" if job.created_at else "N/A"
        )
        self.nodes_label.setText(f"{job.node_count} active")
        self.speed_label.setText(f"{throughput_per_minute(job)}/min")
        self.eta_label.setText(
            format_distance_to_now(job.estimated_completion)
            if job.estimated_completion
            else "Calculating..."
        )

        self._render_nodes(job.node_progress)

        has_stats = job.successful_profiles is not None
        self.successful_label.setVisible(has_stats)
        self.failed_label.setVisible(has_stats)
        if has_stats:
            self.successful_label.setText(f"✅ Successful: {job.successful_profiles or 0}")
            self.failed_label.setText(f"❌ Failed: {job.failed_profiles or 0}")

        self.job_error_label.setVisible(bool(job.error_message))
        self.job_error_label.setText(job.error_message or "")

        completed = job.is_completed
        self.download_btn.setVisible(completed)
        self.download_btn.setEnabled(completed and tracker.download_url is not None)
        self.refresh_status_btn.setVisible(not completed)

    def _render_nodes(self, nodes):
        """Перерисовать прогресс по узлам"""
        while self.nodes_layout.count():
            item = self.nodes_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        self.nodes_group.setVisible(bool(nodes))
        for idx, node in enumerate(nodes):
            percent = node_percent(node)
            label = QLabel(
                f"Node {node.node_id}: {percent}% ({node.completed} / {node.total} profiles)"
            )
            bar = QProgressBar()
            bar.setRange(0, 100)
            bar.setValue(percent)
            bar.setTextVisible(False)
            self.nodes_layout.addWidget(label, idx, 0)
            self.nodes_layout.addWidget(bar, idx, 1)

    def _on_download_url_ready(self, url: str):
        self.download_btn.setEnabled(True)

    def _on_download_url_error(self, message: str):
        show_toast(self, message, success=False, title="Error")

    def _handle_download(self):
        url = self.poller.tracker.download_url
        if url:
            open_url(url)

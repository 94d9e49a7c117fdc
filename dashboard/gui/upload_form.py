"""Форма загрузки CSV и запуска задачи обогащения"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QFileDialog,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from dashboard.api_client import describe_error
from enrich_core.node_tiers import DEFAULT_NODE_COUNT, NODE_TIERS, get_tier
from enrich_core.validation import ValidationError, build_submission, check_csv_path

logger = logging.getLogger(__name__)

SUBMIT_ERROR_FALLBACK = "Failed to start enrichment process"


class _UploadSignals(QObject):
    """Сигналы фоновой загрузки"""

    finished = Signal(str)  # job_id
    failed = Signal(str)  # message


class UploadForm(QWidget):
    """
    Форма создания задачи

    Сигналы:
        - job_created: задача создана (job_id)
        - job_error: ошибка создания (текст для пользователя)
    """

    job_created = Signal(str)
    job_error = Signal(str)

    def __init__(self, client, executor: Optional[Executor] = None, parent=None):
        super().__init__(parent)
        self._client = client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1)
        self._signals = _UploadSignals()
        self._signals.finished.connect(self._on_upload_finished)
        self._signals.failed.connect(self._on_upload_failed)

        self.file_path: Optional[Path] = None
        self.number_of_nodes = DEFAULT_NODE_COUNT
        self.is_uploading = False

        self._setup_ui()

    def _setup_ui(self):
        """Настройка интерфейса"""
        layout = QVBoxLayout(self)

        upload_group = QGroupBox("Upload Instagram Profiles")
        upload_layout = QVBoxLayout(upload_group)
        hint = QLabel(
            "Upload a CSV file containing Instagram usernames to enrich with additional data"
        )
        hint.setWordWrap(True)
        hint.setStyleSheet("color: #666;")
        upload_layout.addWidget(hint)

        file_layout = QHBoxLayout()
        self.file_label = QLabel("Click to upload a CSV file (up to 10MB)")
        file_layout.addWidget(self.file_label, 1)
        self.browse_btn = QPushButton("📂 Choose CSV...")
        self.browse_btn.clicked.connect(self._browse_file)
        file_layout.addWidget(self.browse_btn)
        upload_layout.addLayout(file_layout)

        self.file_error_label = QLabel()
        self.file_error_label.setStyleSheet("color: #dc2626;")
        self.file_error_label.hide()
        upload_layout.addWidget(self.file_error_label)

        form = QFormLayout()
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Enter a name for this job")
        form.addRow("Job Name:", self.name_edit)
        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("Your email for notifications")
        form.addRow("Email:", self.email_edit)
        upload_layout.addLayout(form)

        self.form_error_label = QLabel()
        self.form_error_label.setTextFormat(Qt.PlainText)
        self.form_error_label.setWordWrap(True)
        self.form_error_label.setStyleSheet(
            "QLabel { background-color: #fee2e2; color: #b91c1c; "
            "border-radius: 6px; padding: 6px; }"
        )
        self.form_error_label.hide()
        upload_layout.addWidget(self.form_error_label)
        layout.addWidget(upload_group)

        # Выбор количества узлов
        nodes_group = QGroupBox("Choose Processing Power")
        nodes_layout = QGridLayout(nodes_group)
        self.node_buttons = QButtonGroup(self)
        self.node_buttons.setExclusive(True)
        for idx, tier in enumerate(NODE_TIERS):
            text = (
                f"{tier.title}{'  ⭐ POPULAR' if tier.popular else ''}\n"
                f"{tier.nodes} {tier.nodes_label}\n{tier.speed_label}\n{tier.description}"
            )
            btn = QPushButton(text)
            btn.setCheckable(True)
            btn.setToolTip(tier.subtitle)
            btn.setMinimumHeight(90)
            self.node_buttons.addButton(btn, tier.nodes)
            nodes_layout.addWidget(btn, idx // 4, idx % 4)
        self.node_buttons.button(DEFAULT_NODE_COUNT).setChecked(True)
        self.node_buttons.idClicked.connect(self.set_number_of_nodes)

        self.config_label = QLabel()
        self.config_label.setWordWrap(True)
        nodes_layout.addWidget(self.config_label, 2, 0, 1, 4)
        layout.addWidget(nodes_group)

        self.submit_btn = QPushButton("🚀 Start Enrichment")
        self.submit_btn.setMinimumHeight(36)
        self.submit_btn.clicked.connect(self.submit)
        layout.addWidget(self.submit_btn)
        layout.addStretch()

        self._update_config_label()

    def _browse_file(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Select CSV file", "", "CSV files (*.csv);;All files (*)"
        )
        if path:
            self.set_file(path)

    def set_file(self, path) -> bool:
        """Выбрать файл; неподходящий файл не запоминается"""
        self.file_error_label.hide()
        try:
            self.file_path = check_csv_path(path)
        except ValidationError as e:
            self._show_error(e)
            return False
        self.file_label.setText(self.file_path.name)
        return True

    def set_number_of_nodes(self, nodes: int):
        if get_tier(nodes) is None:
            logger.warning(f"Недопустимое количество узлов: {nodes}")
            return
        self.number_of_nodes = nodes
        button = self.node_buttons.button(nodes)
        if button is not None and not button.isChecked():
            button.setChecked(True)
        self._update_config_label()

    def _update_config_label(self):
        tier = get_tier(self.number_of_nodes)
        self.config_label.setText(
            f"Selected Configuration: {tier.title} - {tier.nodes} "
            f"{tier.nodes_label.lower()} processing up to {tier.speed_label}"
        )

    def _show_error(self, error: ValidationError):
        if error.field == "file":
            self.file_error_label.setText(error.message)
            self.file_error_label.show()
        else:
            self.form_error_label.setText(error.message)
            self.form_error_label.show()

    def _set_inputs_enabled(self, enabled: bool):
        for widget in (self.name_edit, self.email_edit, self.browse_btn, self.submit_btn):
            widget.setEnabled(enabled)
        for button in self.node_buttons.buttons():
            button.setEnabled(enabled)

    def submit(self) -> bool:
        """Проверить форму и отправить задачу в фоне. False - форма не прошла проверку"""
        if self.is_uploading:
            return False
        self.file_error_label.hide()
        self.form_error_label.hide()
        try:
            submission = build_submission(
                self.file_path,
                self.name_edit.text(),
                self.email_edit.text(),
                self.number_of_nodes,
            )
        except ValidationError as e:
            logger.info(f"Форма не прошла проверку ({e.field}): {e.message}")
            self._show_error(e)
            return False

        self.is_uploading = True
        self._set_inputs_enabled(False)
        self.submit_btn.setText("⏳ Uploading...")
        self._executor.submit(self._upload_bg, submission)
        return True

    def _upload_bg(self, submission):
        """Фоновая загрузка CSV"""
        try:
            result = self._client.start_enrichment(submission)
        except Exception as e:
            logger.error(f"Upload error: {e}")
            self._signals.failed.emit(describe_error(e, SUBMIT_ERROR_FALLBACK))
            return
        self._signals.finished.emit(result.job_id)

    def _on_upload_finished(self, job_id: str):
        self._reset_uploading()
        self.job_created.emit(job_id)

    def _on_upload_failed(self, message: str):
        self._reset_uploading()
        self.form_error_label.setText(message)
        self.form_error_label.show()
        self.job_error.emit(message)

    def _reset_uploading(self):
        self.is_uploading = False
        self._set_inputs_enabled(True)
        self.submit_btn.setText("🚀 Start Enrichment")

    def shutdown(self):
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

"""Сигналы для фоновых запросов панели статуса"""

from PySide6.QtCore import QObject, Signal


class WorkerSignals(QObject):
    """Сигналы для фоновых задач (доставляются в GUI-поток)"""

    status_loaded = Signal(int, object)  # seq, JobStatus
    status_error = Signal(int, str)  # seq, message
    download_url_loaded = Signal(object)  # str или None
    download_url_error = Signal(str)

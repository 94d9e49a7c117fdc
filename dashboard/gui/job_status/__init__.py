"""Модуль панели статуса задачи"""

from dashboard.gui.job_status.panel import JobStatusPanel
from dashboard.gui.job_status.polling_controller import JobStatusPoller
from dashboard.gui.job_status.signals import WorkerSignals

__all__ = ["JobStatusPanel", "JobStatusPoller", "WorkerSignals"]

"""Перечисления для моделей данных"""
from enum import Enum


class JobState(str, Enum):
    """Статус задачи обогащения на бэкенде"""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


# После этих статусов задача больше не меняется
TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED})

"""
Модели данных дашборда.
Снимки задач обогащения в том виде, в каком их отдаёт бэкенд.
"""
from enrich_core.models.enums import TERMINAL_STATES, JobState
from enrich_core.models.job import (
    BatchDistribution,
    JobStartResult,
    JobStatus,
    NodeProgress,
)

__all__ = [
    # Основные классы
    "JobStatus",
    "NodeProgress",
    "BatchDistribution",
    "JobStartResult",
    # Enums
    "JobState",
    "TERMINAL_STATES",
]

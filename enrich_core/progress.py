"""Расчёт прогресса задачи и скорости обработки"""
from __future__ import annotations

import math
from typing import Optional

from enrich_core.models import JobStatus, NodeProgress
from enrich_core.node_tiers import PROFILES_PER_NODE_PER_MINUTE

# 100% только для completed, пока задача идёт - не больше 99
MAX_RUNNING_PROGRESS = 99


def round_half_up(value: float) -> int:
    """Округление как в UI: .5 всегда вверх (round() в Python - банковское)"""
    return int(math.floor(value + 0.5))


def ratio_percent(processed: Optional[int], total: Optional[int]) -> int:
    """Процент processed/total без ограничения сверху (для списка задач)"""
    if not processed or not total:
        return 0
    return round_half_up(processed / total * 100)


def overall_progress(job: Optional[JobStatus]) -> int:
    """
    Общий прогресс задачи в процентах

    completed -> 100; иначе processed/total, но не больше 99
    (100% без завершения выглядело бы противоречием). Если счётчиков
    нет или total == 0 -> 0.
    """
    if job is None:
        return 0
    if job.is_completed:
        return 100
    if job.processed_profiles and job.total_profiles:
        percent = ratio_percent(job.processed_profiles, job.total_profiles)
        return max(0, min(percent, MAX_RUNNING_PROGRESS))
    return 0


def node_percent(node: NodeProgress) -> int:
    """Прогресс узла для отображения (значение бэкенда, только округление)"""
    return max(0, min(round_half_up(node.progress), 100))


def throughput_per_minute(job: Optional[JobStatus]) -> int:
    """Заявленная скорость: 50 профилей в минуту на узел"""
    if job is None:
        return 0
    return job.node_count * PROFILES_PER_NODE_PER_MINUTE

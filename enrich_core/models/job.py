"""
Модель задачи обогащения (снимок статуса с бэкенда).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from enrich_core.models.enums import TERMINAL_STATES, JobState


def _opt_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class NodeProgress:
    """Прогресс одного узла (progress уже посчитан бэкендом, 0..100)"""

    node_id: str
    completed: int = 0
    total: int = 0
    progress: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "NodeProgress":
        return cls(
            node_id=str(data["nodeId"]),
            completed=int(data.get("completed") or 0),
            total=int(data.get("total") or 0),
            progress=float(data.get("progress") or 0.0),
        )


@dataclass
class JobStatus:
    """
    Снимок задачи обогащения

    Клиент никогда не меняет задачу, только заменяет снимок целиком
    при следующем запросе статуса.

    Attributes:
        id: непрозрачный идентификатор задачи
        name: название, заданное при создании
        email: email для уведомлений
        status: running / completed / failed (неизвестные значения сохраняются как есть)
        total_profiles: всего профилей в CSV
        processed_profiles: обработано профилей (может отсутствовать)
        successful_profiles: успешно обогащено
        failed_profiles: с ошибкой
        selected_nodes: идентификаторы узлов, назначенных задаче
        created_at: время создания (ISO), единственная гарантированная метка
        updated_at: время последнего обновления
        completed_at: время завершения
        estimated_completion: прогноз завершения
        download_path: путь к результату на бэкенде
        error_message: текст ошибки (только для failed)
        node_progress: прогресс по узлам в порядке назначения
        progress: произвольная строка прогресса от бэкенда
    """

    id: str
    name: str = ""
    email: str = ""
    status: str = JobState.RUNNING.value
    total_profiles: int = 0
    processed_profiles: Optional[int] = None
    successful_profiles: Optional[int] = None
    failed_profiles: Optional[int] = None
    selected_nodes: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None
    estimated_completion: Optional[str] = None
    download_path: Optional[str] = None
    error_message: Optional[str] = None
    node_progress: List[NodeProgress] = field(default_factory=list)
    progress: Optional[str] = None

    @property
    def state(self) -> Optional[JobState]:
        try:
            return JobState(self.status)
        except ValueError:
            return None

    @property
    def is_running(self) -> bool:
        return self.state is JobState.RUNNING

    @property
    def is_completed(self) -> bool:
        return self.state is JobState.COMPLETED

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def node_count(self) -> int:
        return len(self.selected_nodes)

    @classmethod
    def from_dict(cls, data: dict) -> "JobStatus":
        """Разобрать JSON задачи (ключи как в REST API бэкенда)"""
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            email=data.get("email") or "",
            status=data.get("status") or "",
            total_profiles=int(data.get("total_profiles") or 0),
            processed_profiles=_opt_int(data.get("processed_profiles")),
            successful_profiles=_opt_int(data.get("successful_profiles")),
            failed_profiles=_opt_int(data.get("failed_profiles")),
            selected_nodes=[str(n) for n in data.get("selected_nodes") or []],
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at"),
            completed_at=data.get("completed_at"),
            estimated_completion=data.get("estimated_completion"),
            download_path=data.get("download_path"),
            error_message=data.get("error_message"),
            node_progress=[
                NodeProgress.from_dict(n) for n in data.get("nodeProgress") or []
            ],
            progress=_opt_str(data.get("progress")),
        )


@dataclass
class BatchDistribution:
    """Распределение профилей по узлу при старте задачи"""

    node_id: str
    profile_count: int = 0
    estimated_minutes: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "BatchDistribution":
        return cls(
            node_id=str(data["nodeId"]),
            profile_count=int(data.get("profileCount") or 0),
            estimated_minutes=float(data.get("estimatedMinutes") or 0.0),
        )


@dataclass
class JobStartResult:
    """Ответ на создание задачи (поле data ответа /start)"""

    job_id: str
    message: str = ""
    total_profiles: int = 0
    estimated_completion_minutes: float = 0.0
    requests_per_minute: float = 0.0
    batch_distribution: List[BatchDistribution] = field(default_factory=list)
    status: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "JobStartResult":
        return cls(
            job_id=str(data["jobId"]),
            message=data.get("message") or "",
            total_profiles=int(data.get("totalProfiles") or 0),
            estimated_completion_minutes=float(
                data.get("estimatedCompletionMinutes") or 0.0
            ),
            requests_per_minute=float(data.get("requestsPerMinute") or 0.0),
            batch_distribution=[
                BatchDistribution.from_dict(b)
                for b in data.get("batchDistribution") or []
            ],
            status=data.get("status") or "",
        )

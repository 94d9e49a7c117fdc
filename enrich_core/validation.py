"""
Локальная валидация формы создания задачи.

Все проверки выполняются до любого сетевого запроса. Каждая ошибка
несёт поле формы, к которому относится (file / name / email / nodes),
чтобы UI мог показать её в нужном месте.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from enrich_core.node_tiers import NODE_COUNTS

MAX_CSV_SIZE_BYTES = 10 * 1024 * 1024


class ValidationError(ValueError):
    """Ошибка заполнения формы"""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.message = message
        self.field = field


@dataclass(frozen=True)
class JobSubmission:
    """Проверенные данные для POST /api/enrichment/start"""

    csv_path: Path
    name: str
    email: str
    number_of_nodes: int

    @property
    def file_name(self) -> str:
        return self.csv_path.name


def check_csv_file(file_name: Optional[str], size: int) -> None:
    """Проверить имя и размер выбранного файла"""
    if not file_name:
        raise ValidationError("Please select a CSV file", "file")
    if not file_name.lower().endswith(".csv"):
        raise ValidationError("Please upload a CSV file", "file")
    if size > MAX_CSV_SIZE_BYTES:
        raise ValidationError("File size exceeds 10MB limit", "file")


def check_csv_path(path: Union[str, Path, None]) -> Path:
    """Проверить файл на диске, вернуть Path"""
    if not path:
        raise ValidationError("Please select a CSV file", "file")
    csv_path = Path(path)
    if not csv_path.is_file():
        raise ValidationError("Please select a CSV file", "file")
    check_csv_file(csv_path.name, csv_path.stat().st_size)
    return csv_path


def check_job_name(name: Optional[str]) -> None:
    if not name or not name.strip():
        raise ValidationError("Please enter a job name", "name")


def check_email(email: Optional[str]) -> None:
    # Намеренно слабая проверка: непустое значение с "@"
    if not email or not email.strip() or "@" not in email:
        raise ValidationError("Please enter a valid email address", "email")


def check_node_count(number_of_nodes: int) -> None:
    if number_of_nodes not in NODE_COUNTS:
        raise ValidationError("Please select a valid number of nodes", "nodes")


def build_submission(
    csv_path: Union[str, Path, None],
    name: Optional[str],
    email: Optional[str],
    number_of_nodes: int,
) -> JobSubmission:
    """
    Проверить форму и собрать JobSubmission

    Порядок проверок: файл, название, email, количество узлов.
    Первая же ошибка прерывает проверку.

    Raises:
        ValidationError: с текстом для пользователя и полем формы
    """
    path = check_csv_path(csv_path)
    check_job_name(name)
    check_email(email)
    check_node_count(number_of_nodes)
    return JobSubmission(
        csv_path=path,
        name=name,
        email=email,
        number_of_nodes=number_of_nodes,
    )

"""
Общие фикстуры тестов дашборда
"""
import os
import sys
from concurrent.futures import Executor, Future
from pathlib import Path

# Добавляем корень проекта в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

# Тесты виджетов без дисплея
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from dashboard.api_client import close_http_client
from enrich_core.models import JobStatus


class ImmediateExecutor(Executor):
    """Executor, выполняющий задачу сразу в текущем потоке"""

    def __init__(self):
        self.calls = []
        self.deferred = False
        self.pending = []
        self._shutdown = False

    def submit(self, fn, *args, **kwargs):
        if self._shutdown:
            raise RuntimeError("cannot schedule new futures after shutdown")
        self.calls.append((fn, args))
        future = Future()
        if self.deferred:
            self.pending.append((future, fn, args, kwargs))
            return future
        self._run(future, fn, args, kwargs)
        return future

    @staticmethod
    def _run(future, fn, args, kwargs):
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)

    def run_pending(self, index=None):
        """Выполнить отложенные задачи (все или одну по индексу)"""
        if index is None:
            items, self.pending = self.pending, []
        else:
            items = [self.pending.pop(index)]
        for future, fn, args, kwargs in items:
            self._run(future, fn, args, kwargs)

    def shutdown(self, wait=True, *, cancel_futures=False):
        self._shutdown = True


class FakeClient:
    """Подставной EnrichmentClient: ответы берутся из очередей"""

    def __init__(self):
        self.statuses = []
        self.download_urls = []
        self.jobs = []
        self.start_results = []
        self.calls = []

    @staticmethod
    def _next(queue):
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def get_job_status(self, job_id):
        self.calls.append(("status", job_id))
        return self._next(self.statuses)

    def get_download_url(self, job_id):
        self.calls.append(("download", job_id))
        return self._next(self.download_urls)

    def list_jobs(self):
        self.calls.append(("jobs",))
        return self._next(self.jobs)

    def start_enrichment(self, submission):
        self.calls.append(("start", submission))
        return self._next(self.start_results)

    def get_bulk_download_url(self):
        self.calls.append(("download_all",))
        return self._next(self.download_urls)

    def count(self, kind):
        return sum(1 for call in self.calls if call[0] == kind)


def make_job(status="running", processed=30, total=100, **overrides):
    data = {
        "id": "job-123",
        "name": "Spring campaign",
        "email": "ops@example.com",
        "status": status,
        "total_profiles": total,
        "processed_profiles": processed,
        "selected_nodes": ["node-1", "node-2"],
        "created_at": "2024-03-01T10:00:00Z",
    }
    data.update(overrides)
    return JobStatus.from_dict(data)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def executor():
    return ImmediateExecutor()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture(autouse=True)
def _close_pool():
    yield
    close_http_client()


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "profiles.csv"
    path.write_text("username\ninstagram\nnatgeo\n", encoding="utf-8")
    return path

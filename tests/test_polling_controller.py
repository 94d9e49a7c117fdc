"""
Тесты опроса статуса задачи (JobStatusPoller) и панели статуса
"""
import pytest

from conftest import make_job
from dashboard.api_client import ServerUnavailableError
from dashboard.gui.job_status import JobStatusPanel, JobStatusPoller
from enrich_core.status_tracker import PollState

CSV_URL = "https://cdn.example.com/job-123.csv"


@pytest.fixture
def poller(qapp, fake_client, executor):
    p = JobStatusPoller(fake_client, "job-123", interval_ms=5000, executor=executor)
    yield p
    p.shutdown()


def test_running_then_completed(poller, fake_client):
    """Тест: running 30/100 -> 30%, затем completed -> 100%, таймер стоп, ссылка"""
    fake_client.statuses = [make_job(), make_job(status="completed", processed=100)]
    fake_client.download_urls = [CSV_URL]
    ready = []
    poller.download_url_ready.connect(ready.append)

    poller.start()
    assert poller.tracker.state is PollState.READY
    assert poller.tracker.overall_progress == 30
    assert poller.is_polling
    assert fake_client.count("download") == 0

    poller._on_tick()
    assert poller.tracker.job.is_completed
    assert poller.tracker.overall_progress == 100
    assert not poller.is_polling
    assert fake_client.count("download") == 1
    assert poller.tracker.download_url == CSV_URL
    assert ready == [CSV_URL]

    # Завершённая задача больше не опрашивается
    poller._on_tick()
    assert fake_client.count("status") == 2


def test_failed_job_stops_polling_without_download(poller, fake_client):
    fake_client.statuses = [make_job(status="failed", error_message="Proxy pool exhausted")]
    poller.start()
    assert not poller.is_polling
    assert poller.tracker.job.error_message == "Proxy pool exhausted"
    assert fake_client.count("download") == 0


def test_network_error_stops_polling(poller, fake_client):
    """Тест: сетевая ошибка -> ERROR, таймер остановлен, тик ничего не шлёт"""
    fake_client.statuses = [make_job(), ServerUnavailableError("Network Error: no response")]
    poller.start()
    poller._on_tick()

    assert poller.tracker.state is PollState.ERROR
    assert poller.tracker.error == "Network Error: no response"
    assert not poller.is_polling

    poller._on_tick()
    assert fake_client.count("status") == 2


def test_empty_error_message_uses_fallback(poller, fake_client):
    """Тест: исключение без текста -> общее сообщение, опрос остановлен"""
    fake_client.statuses = [ServerUnavailableError("")]
    poller.start()

    assert poller.tracker.state is PollState.ERROR
    assert poller.tracker.error == "Failed to fetch job status"
    assert not poller.is_polling


def test_manual_refresh_resumes_polling_after_error(poller, fake_client):
    fake_client.statuses = [ServerUnavailableError("Network Error"), make_job()]
    poller.start()
    assert poller.tracker.state is PollState.ERROR
    assert not poller.is_polling

    poller.refresh()
    assert poller.tracker.state is PollState.READY
    assert poller.is_polling


def test_tick_skipped_while_in_flight(qapp, fake_client, executor):
    executor.deferred = True
    fake_client.statuses = [make_job()]
    poller = JobStatusPoller(fake_client, "job-123", executor=executor)
    poller.start()
    executor.run_pending()

    poller._on_tick()
    poller._on_tick()
    assert len(executor.pending) == 1
    poller.shutdown()


def test_latest_request_wins(qapp, fake_client, executor):
    """Тест: ответ на более ранний запрос отбрасывается"""
    executor.deferred = True
    fake_client.statuses = [make_job(processed=60), make_job(processed=30)]
    poller = JobStatusPoller(fake_client, "job-123", executor=executor)
    poller.start()
    poller.refresh()

    # Второй (свежий) запрос завершается первым
    executor.run_pending(1)
    executor.run_pending(0)
    assert poller.tracker.job.processed_profiles == 60
    assert poller.tracker.last_seq == 2
    poller.shutdown()


def test_download_url_error_keeps_status(poller, fake_client):
    fake_client.statuses = [make_job(status="completed", processed=100)]
    fake_client.download_urls = [ServerUnavailableError("boom")]
    errors = []
    poller.download_url_error.connect(errors.append)

    poller.start()
    assert poller.tracker.state is PollState.READY
    assert errors == ["Failed to get download URL. Please try again later."]


def test_missing_download_url_ignored(poller, fake_client):
    fake_client.statuses = [make_job(status="completed", processed=100)]
    fake_client.download_urls = [None]
    poller.start()
    assert poller.tracker.download_url is None


def test_shutdown_ignores_late_responses(qapp, fake_client, executor):
    executor.deferred = True
    fake_client.statuses = [make_job()]
    states = []
    poller = JobStatusPoller(fake_client, "job-123", executor=executor)
    poller.state_changed.connect(lambda tracker: states.append(tracker.state))
    poller.start()
    poller.shutdown()
    executor.run_pending()

    assert not poller.is_polling
    assert poller.tracker.job is None
    assert states == [PollState.LOADING]
    poller.fetch_status()
    assert len(executor.calls) == 1


def test_panel_renders_progress_and_download(qapp, fake_client, executor, monkeypatch):
    """Тест: панель показывает прогресс, кнопка скачивания после completed"""
    opened = []
    monkeypatch.setattr("dashboard.gui.job_status.panel.open_url", opened.append)
    fake_client.statuses = [make_job(), make_job(status="completed", processed=100)]
    fake_client.download_urls = [CSV_URL]

    panel = JobStatusPanel(fake_client, "job-123", executor=executor)
    panel.start()
    assert panel.progress_label.text() == "30%"
    assert panel.progress_bar.value() == 30
    assert panel.counts_label.text() == "30 / 100 profiles processed"
    assert panel.nodes_label.text() == "2 active"
    assert panel.speed_label.text() == "100/min"
    assert panel.download_btn.isHidden()
    assert not panel.content.isHidden()

    panel.poller._on_tick()
    assert panel.progress_label.text() == "100%"
    assert not panel.download_btn.isHidden()
    assert panel.download_btn.isEnabled()

    panel.download_btn.click()
    assert opened == [CSV_URL]
    panel.shutdown()


def test_panel_shows_error_banner(qapp, fake_client, executor):
    fake_client.statuses = [ServerUnavailableError("Network Error: no response")]
    panel = JobStatusPanel(fake_client, "job-123", executor=executor)
    panel.start()
    assert not panel.error_label.isHidden()
    assert panel.error_label.text() == "Error: Network Error: no response"
    assert panel.content.isHidden()
    panel.shutdown()

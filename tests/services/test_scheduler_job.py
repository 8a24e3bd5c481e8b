import logging

from fastapi.testclient import TestClient

import main
from app.core import scheduler as scheduler_module
from app.services.notification_worker import TickSummary


def test_start_scheduler_is_disabled_while_testing(monkeypatch):
    monkeypatch.setenv("TESTING", "true")
    scheduler_module.start_scheduler()
    assert scheduler_module.scheduler.running is False
    assert scheduler_module.scheduler.get_job(scheduler_module.REMINDER_JOB_ID) is None


def test_job_swallows_tick_failures(monkeypatch, caplog):
    def explode(*args, **kwargs):
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(scheduler_module.notification_worker, "process_due_schedules", explode)
    monkeypatch.setattr(logging.getLogger("app"), "propagate", True)

    scheduler_module.process_due_schedules()

    assert "database unreachable" in caplog.text


def test_job_delegates_to_worker(monkeypatch):
    calls = []

    def record(*args, **kwargs):
        calls.append(kwargs)
        return TickSummary()

    monkeypatch.setattr(scheduler_module.notification_worker, "process_due_schedules", record)

    scheduler_module.process_due_schedules()

    assert len(calls) == 1


def test_app_lifespan_starts_and_stops_scheduler(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "start_scheduler", lambda: calls.append("start"))
    monkeypatch.setattr(main, "stop_scheduler", lambda: calls.append("stop"))

    with TestClient(main.app) as test_client:
        assert calls == ["start"]
        assert test_client.get("/health").status_code == 200
    assert calls == ["start", "stop"]

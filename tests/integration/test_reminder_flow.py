from datetime import datetime

from fastapi.testclient import TestClient

from app.services.notification_worker import NotificationWorker
from tests.helpers.asserts import api_call


def test_scheduled_activity_becomes_reminder_then_completed(client: TestClient, auth_headers, session_factory):
    """
    Schedule a run before it is due, let the worker tick after 07:00,
    poll the due reminders, read one and complete the activity.
    """
    created = api_call(client, "POST", "/schedule", headers=auth_headers, json={
        "scheduled_date": "2024-06-01",
        "scheduled_time": "07:00:00",
        "activity_type": "Exercise",
        "activity_details": "Morning Run",
    })
    schedule_id = created.json()["data"]["schedule_id"]

    worker = NotificationWorker(session_factory=session_factory)
    before = worker.process_due_schedules(now=datetime(2024, 6, 1, 6, 59, 0))
    assert before.created == 0

    after = worker.process_due_schedules(now=datetime(2024, 6, 1, 7, 1, 0))
    assert after.created == 1
    assert worker.process_due_schedules(now=datetime(2024, 6, 1, 7, 2, 0)).created == 0

    due = api_call(client, "GET", "/schedule/notifications/due?now=2024-06-01%2007:01:00", headers=auth_headers)
    reminders = due.json()["data"]
    assert [r["message"] for r in reminders] == ["Reminder: Exercise (Morning Run) at 07:00:00"]

    api_call(client, "PATCH", f"/schedule/notifications/{reminders[0]['notification_id']}/read", headers=auth_headers)
    assert api_call(client, "GET", "/schedule/notifications/due", headers=auth_headers).json()["data"] == []

    completed = api_call(client, "PATCH", f"/schedule/{schedule_id}", headers=auth_headers, json={"is_completed": "yes"})
    assert completed.json()["data"]["status"] == "completed"

    # Completed activities are no longer due, so later ticks find nothing
    assert worker.process_due_schedules(now=datetime(2024, 6, 1, 8, 0, 0)).scanned == 0

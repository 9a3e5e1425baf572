"""
Celery wiring for the daily reset check.
"""
from ordering.tasks import inventory_tasks
from ordering.tasks.celery_app import celery_app


def test_beat_schedules_reset_check_every_minute():
    entry = celery_app.conf.beat_schedule["daily-inventory-reset-check"]
    assert entry["task"] == "check_daily_reset"
    assert entry["schedule"] == 60.0


def test_task_returns_outcome(monkeypatch):
    async def _fake_check():
        return {"today": "19/10/2026", "last_reset": "18/10/2026", "reset_applied": True, "items_reset": 9}

    monkeypatch.setattr(inventory_tasks, "_run_reset_check", _fake_check)

    outcome = inventory_tasks.check_daily_reset.run()

    assert outcome["reset_applied"] is True
    assert outcome["items_reset"] == 9

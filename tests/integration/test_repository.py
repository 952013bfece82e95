from __future__ import annotations

from pathfinder.db.models import JobRecord
from pathfinder.db.repositories import Repository
from pathfinder.db.session import SessionLocal


def test_replace_clears_fields_missing_from_payload() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        job = repo.create_job({"title": "A", "company": "B", "notes": "keep?", "tags": ["x"]})

        updated = repo.update_job(job.id, {"title": "A2", "company": "B", "status": "Applied"})

        assert updated.title == "A2"
        assert updated.notes is None
        assert updated.tags is None
        assert updated.date_added == job.date_added


def test_json_columns_are_stored_as_text() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        job = repo.create_job({"title": "A", "company": "B", "contact_ids": [2, 1], "salary_info": {"range": "€90k"}})

        raw = db.get(JobRecord, job.id)
        assert raw.contact_ids == "[2, 1]"
        assert raw.salary_info == '{"range": "€90k"}'


def test_unknown_keys_are_dropped() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        event = repo.create_event({"title": "Call", "date": "2026-01-02", "type": "Task", "color": "red"})

        assert not hasattr(event, "color")
        assert repo.get_event(event.id).title == "Call"


def test_update_missing_returns_none() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        assert repo.update_resume(999, {"name": "x"}) is None
        assert repo.update_contact(999, {"name": "x"}) is None
        assert repo.get_job(999) is None


def test_settings_singleton_upsert_and_export() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        assert repo.get_settings() is None
        assert repo.export_all()["settings"] is None

        repo.replace_settings({"profile": {"name": "Dana"}, "agents": {"coach": {"name": "Coach"}}})
        record = repo.replace_settings({"profile": {"name": "Sam"}})

        assert record.id == 1
        assert record.agents is None
        assert repo.export_all()["settings"] == {"profile": {"name": "Sam"}}


def test_delete_all_keeps_autoincrement_moving_forward() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        first = repo.create_job({"title": "A", "company": "B"})
        repo.delete_all()
        second = repo.create_job({"title": "C", "company": "D"})

        assert second.id > first.id
        assert [job.id for job in repo.list_jobs()] == [second.id]

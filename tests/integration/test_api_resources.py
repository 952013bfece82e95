from __future__ import annotations

from fastapi.testclient import TestClient

JOB = {
    "title": "Platform Engineer",
    "company": "Acme",
    "status": "Applied",
    "description": "Own the deploy pipeline.",
    "contactIds": [3, 1],
    "communicationLog": [{"id": 1, "date": "2026-03-01", "type": "Email", "summary": "Sent CV"}],
    "salaryInfo": {"range": "$150k", "expectations": "", "discussed": "no", "currency": "USD"},
    "tags": ["remote"],
    "dateAdded": 1_700_000_000_000,
}


def test_job_create_get_list_update_delete(client: TestClient) -> None:
    create_resp = client.post("/api/jobs", json=JOB)
    assert create_resp.status_code == 201
    job = create_resp.json()
    job_id = job["id"]

    assert job["contactIds"] == [3, 1]
    assert job["communicationLog"][0]["summary"] == "Sent CV"
    assert job["salaryInfo"]["currency"] == "USD"
    assert job["dateAdded"] == 1_700_000_000_000

    assert client.get(f"/api/jobs/{job_id}").json() == job
    assert [item["id"] for item in client.get("/api/jobs").json()] == [job_id]

    update_resp = client.put(
        f"/api/jobs/{job_id}",
        json={**job, "status": "Interviewing", "tags": [], "dateAdded": 1},
    )
    assert update_resp.status_code == 200
    updated = update_resp.json()
    assert updated["status"] == "Interviewing"
    assert updated["tags"] == []
    assert updated["dateAdded"] == 1_700_000_000_000

    assert client.delete(f"/api/jobs/{job_id}").status_code == 204
    assert client.get(f"/api/jobs/{job_id}").status_code == 404
    assert client.get("/api/jobs").json() == []


def test_job_defaults_and_free_text(client: TestClient) -> None:
    job = client.post("/api/jobs", json={"title": "", "company": "Acme", "description": '{"looks": "like json"}'}).json()

    assert job["title"] == ""
    assert job["status"] == "Wishlist"
    assert job["dateAdded"] > 0
    assert job["description"] == '{"looks": "like json"}'
    assert job["contactIds"] == []


def test_jobs_are_listed_newest_first(client: TestClient) -> None:
    old = client.post("/api/jobs", json={"title": "Old", "company": "A", "dateAdded": 1_000}).json()
    new = client.post("/api/jobs", json={"title": "New", "company": "B", "dateAdded": 2_000}).json()
    tie = client.post("/api/jobs", json={"title": "Tie", "company": "C", "dateAdded": 2_000}).json()

    assert [item["id"] for item in client.get("/api/jobs").json()] == [tie["id"], new["id"], old["id"]]


def test_ids_in_request_bodies_are_ignored(client: TestClient) -> None:
    first = client.post("/api/jobs", json={"id": 99, "title": "A", "company": "B"}).json()
    assert first["id"] != 99

    other = client.post("/api/jobs", json={"title": "C", "company": "D"}).json()
    resp = client.put(f"/api/jobs/{first['id']}", json={**first, "id": other["id"], "title": "A2"})
    assert resp.json()["id"] == first["id"]
    assert client.get(f"/api/jobs/{other['id']}").json()["title"] == "C"


def test_missing_entities_return_404(client: TestClient) -> None:
    assert client.get("/api/jobs/404").json() == {"detail": "Job not found"}
    assert client.put("/api/resumes/404", json={"name": "x"}).json() == {"detail": "Resume not found"}
    assert client.put("/api/contacts/404", json={"name": "x"}).status_code == 404
    assert client.get("/api/events/404").json() == {"detail": "Event not found"}


def test_delete_is_idempotent(client: TestClient) -> None:
    assert client.delete("/api/jobs/12345").status_code == 204
    assert client.delete("/api/events/12345").status_code == 204


def test_invalid_enum_is_rejected(client: TestClient) -> None:
    assert client.post("/api/jobs", json={"title": "A", "company": "B", "status": "Ghosted"}).status_code == 422
    assert client.post("/api/events", json={"title": "A", "date": "2026-01-01", "type": "Party"}).status_code == 422


def test_resume_round_trip_keeps_nested_fields(client: TestClient) -> None:
    body = {
        "name": "Main",
        "contact": {"name": "Dana", "email": "dana@example.com"},
        "summary": "Engineer",
        "experience": [{"id": 1, "role": "Dev", "company": "Acme", "startDate": "2020"}],
        "education": [],
        "skills": "Python",
        "customSections": [{"id": 2, "title": "Talks", "content": "PyCon"}],
    }
    created = client.post("/api/resumes", json=body).json()
    second = client.post("/api/resumes", json={"name": "Second"}).json()

    assert created["experience"][0]["startDate"] == "2020"
    assert created["customSections"][0]["title"] == "Talks"
    assert second["customSections"] is None
    assert [item["id"] for item in client.get("/api/resumes").json()] == [second["id"], created["id"]]


def test_contacts_stamp_interactions_and_sort_by_them(client: TestClient) -> None:
    first = client.post("/api/contacts", json={"name": "Dana", "tags": ["recruiter"]}).json()
    assert first["lastInteraction"] == first["dateAdded"]

    second = client.post("/api/contacts", json={"name": "Sam", "lastInteraction": 1}).json()
    assert second["lastInteraction"] == 1

    resp = client.put(f"/api/contacts/{second['id']}", json={**second, "lastInteraction": None, "dateAdded": 5})
    touched = resp.json()
    assert touched["lastInteraction"] > 1
    assert touched["dateAdded"] == second["dateAdded"]

    names = [item["name"] for item in client.get("/api/contacts").json()]
    assert names[0] == "Sam"


def test_events_sorted_by_date(client: TestClient) -> None:
    later = client.post("/api/events", json={"title": "Onsite", "date": "2026-05-02", "type": "Interview"}).json()
    sooner = client.post(
        "/api/events", json={"title": "Call", "date": "2026-05-01", "time": "09:30", "type": "Networking", "jobId": 4}
    ).json()

    events = client.get("/api/events").json()
    assert [item["id"] for item in events] == [sooner["id"], later["id"]]
    assert events[0]["jobId"] == 4
    assert events[0]["time"] == "09:30"

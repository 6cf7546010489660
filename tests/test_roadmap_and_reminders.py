"""Roadmap upsert and reminder settings."""

from app.services.progress_service import MOTIVATIONAL_QUOTES, REFLECTION_PROMPTS


def test_roadmap_empty_then_upsert(client, auth_headers):
    response = client.get("/api/roadmap", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() is None

    payload = {
        "target_role": "SDE",
        "company_type": "product",
        "monthly_goals": [
            {"month": "Month 1", "goals": ["Arrays", "  ", "Strings"]},
            {"month": "Month 2", "goals": ["", " "]},
        ],
        "skill_priorities": [{"skill": "DSA", "priority": "high"}],
        "weaknesses": "DP"
    }
    first = client.put("/api/roadmap", json=payload, headers=auth_headers)
    assert first.status_code == 200
    saved = first.json()
    assert saved["monthly_goals"] == [{"month": "Month 1", "goals": ["Arrays", "Strings"]}]
    assert saved["skill_priorities"] == [{"skill": "DSA", "priority": "high"}]

    payload["target_role"] = "Backend Engineer"
    second = client.put("/api/roadmap", json=payload, headers=auth_headers).json()
    assert second["id"] == saved["id"]
    assert second["target_role"] == "Backend Engineer"
    assert client.get("/api/roadmap", headers=auth_headers).json()["target_role"] == "Backend Engineer"


def test_roadmap_rejects_blank_skill(client, auth_headers):
    response = client.put(
        "/api/roadmap",
        json={"skill_priorities": [{"skill": " ", "priority": "low"}]},
        headers=auth_headers
    )
    assert response.status_code == 422


def test_roadmap_is_per_user(client, auth_headers, other_headers):
    client.put("/api/roadmap", json={"target_role": "SDE"}, headers=auth_headers)
    assert client.get("/api/roadmap", headers=other_headers).json() is None


def test_reminder_crud(client, auth_headers):
    response = client.post(
        "/api/reminders",
        json={"reminder_type": "daily_practice", "message": "Solve one problem"},
        headers=auth_headers
    )
    assert response.status_code == 201
    reminder = response.json()
    assert reminder["is_active"] is True

    url = f"/api/reminders/{reminder['id']}"
    toggled = client.put(url, json={"is_active": False}, headers=auth_headers).json()
    assert toggled["is_active"] is False
    assert toggled["message"] == "Solve one problem"

    assert client.post(
        "/api/reminders", json={"reminder_type": "daily_learning", "message": " "}, headers=auth_headers
    ).status_code == 422

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get("/api/reminders", headers=auth_headers).json() == []


def test_motivation(client, auth_headers):
    data = client.get("/api/reminders/motivation", headers=auth_headers).json()
    assert {"quote": data["quote"], "author": data["author"]} in MOTIVATIONAL_QUOTES
    assert data["reflection_prompt"] in REFLECTION_PROMPTS

"""Mock test session lifecycle."""

import inspect
import json
from datetime import timedelta

from sqlalchemy import text

from app.api.routes import mock_test_routes
from app.db.postgres import get_db_session
from app.services.ai_client import AIServiceError
from app.services.records_service import utc_now
from tests.helpers import make_questions, questions_reply


def _start(client, headers, **fields):
    payload = {"category": "aptitude", "difficulty": "easy", "num_questions": 3}
    payload.update(fields)
    response = client.post("/api/mock-tests", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _age(test_id, seconds):
    """Move a test's start time into the past."""
    with get_db_session() as db:
        db.execute(
            text("UPDATE mock_tests SET created_at = :ts WHERE id = :id"),
            {"ts": (utc_now() - timedelta(seconds=seconds)).isoformat(), "id": test_id}
        )


def _count_tests():
    with get_db_session() as db:
        return db.execute(text("SELECT COUNT(*) FROM mock_tests")).scalar()


def test_start_hides_answers(client, auth_headers, ai_client):
    ai_client.questions_reply = questions_reply(4, "B")
    test = _start(client, auth_headers, category="technical", subcategory="dbms",
                  difficulty="hard", num_questions=4)

    assert test["status"] == "in_progress"
    assert test["total_questions"] == 4
    assert test["max_time"] == 240
    assert 230 <= test["time_remaining"] <= 240
    assert test["answers"] == ["", "", "", ""]
    assert all(q["correctAnswer"] is None and q["explanation"] is None for q in test["questions"])
    assert ai_client.calls[-1] == ("generate_questions", "technical", "dbms", "hard", 4)


def test_subcategory_only_for_technical(client, auth_headers, ai_client):
    test = _start(client, auth_headers, category="verbal", subcategory="os")
    assert test["subcategory"] is None
    assert ai_client.calls[-1][2] is None


def test_answer_then_submit_scores(client, auth_headers, ai_client):
    ai_client.questions_reply = questions_reply(4, "B")
    test = _start(client, auth_headers, num_questions=4)
    url = f"/api/mock-tests/{test['id']}"

    for index, answer in enumerate(["B", "B", "C"]):
        response = client.put(f"{url}/answers/{index}", json={"answer": answer}, headers=auth_headers)
        assert response.status_code == 200
    assert response.json()["answers"] == ["B", "B", "C", ""]

    result = client.post(f"{url}/submit", headers=auth_headers).json()
    assert result["status"] == "completed"
    assert result["correct_answers"] == 2
    assert result["score"] == 50.0
    assert 0 <= result["time_taken"] <= result["max_time"]
    assert result["completed_at"] is not None
    assert result["time_remaining"] == 0
    assert all(q["correctAnswer"] == "B" for q in result["questions"])


def test_score_rounded_to_two_decimals(client, auth_headers):
    test = _start(client, auth_headers)
    result = client.post(
        f"/api/mock-tests/{test['id']}/submit", json={"answers": ["A", "A", ""]}, headers=auth_headers
    ).json()
    assert result["correct_answers"] == 2
    assert result["score"] == 66.67


def test_answer_validation(client, auth_headers):
    test = _start(client, auth_headers)
    url = f"/api/mock-tests/{test['id']}/answers"
    assert client.put(f"{url}/3", json={"answer": "A"}, headers=auth_headers).status_code == 422
    assert client.put(f"{url}/-1", json={"answer": "A"}, headers=auth_headers).status_code == 422
    assert client.put(f"{url}/0", json={"answer": "E"}, headers=auth_headers).status_code == 422


def test_completed_test_is_closed(client, auth_headers):
    test = _start(client, auth_headers)
    url = f"/api/mock-tests/{test['id']}"
    assert client.post(f"{url}/submit", headers=auth_headers).status_code == 200

    assert client.post(f"{url}/submit", headers=auth_headers).status_code == 409
    assert client.put(f"{url}/answers/0", json={"answer": "A"}, headers=auth_headers).status_code == 409


def test_expired_test_auto_submits_on_read(client, auth_headers):
    test = _start(client, auth_headers)
    url = f"/api/mock-tests/{test['id']}"
    client.put(f"{url}/answers/0", json={"answer": "A"}, headers=auth_headers)
    _age(test["id"], 1000)

    result = client.get(url, headers=auth_headers).json()
    assert result["status"] == "completed"
    assert result["correct_answers"] == 1
    assert result["time_taken"] == result["max_time"] == 180


def test_late_answer_auto_submits_and_conflicts(client, auth_headers):
    test = _start(client, auth_headers)
    url = f"/api/mock-tests/{test['id']}"
    _age(test["id"], 1000)

    response = client.put(f"{url}/answers/0", json={"answer": "A"}, headers=auth_headers)
    assert response.status_code == 409

    stored = client.get(url, headers=auth_headers).json()
    assert stored["status"] == "completed"
    assert stored["answers"] == ["", "", ""]


def test_unparsable_questions_store_nothing(client, auth_headers, ai_client):
    ai_client.questions_reply = "I could not think of any questions."
    response = client.post("/api/mock-tests", json={"category": "aptitude"}, headers=auth_headers)
    assert response.status_code == 502
    assert _count_tests() == 0


def test_gateway_errors_mapped(client, auth_headers, ai_client):
    ai_client.error = AIServiceError(402, "AI credits exhausted. Please add more credits.")
    response = client.post("/api/mock-tests", json={"category": "aptitude"}, headers=auth_headers)
    assert response.status_code == 402
    assert _count_tests() == 0


def test_malformed_questions_dropped(client, auth_headers, ai_client):
    questions = make_questions(3)
    questions[1]["options"].pop("D")
    questions[2]["correctAnswer"] = "Z"
    ai_client.questions_reply = "Here you go:\n" + json.dumps({"questions": questions})

    test = _start(client, auth_headers)
    assert test["total_questions"] == 1
    assert test["max_time"] == 60
    assert [q["id"] for q in test["questions"]] == [1]


def test_history_lists_completed_only(client, auth_headers, other_headers):
    done = _start(client, auth_headers)
    client.post(f"/api/mock-tests/{done['id']}/submit", headers=auth_headers)
    _start(client, auth_headers)
    other = _start(client, other_headers)
    client.post(f"/api/mock-tests/{other['id']}/submit", headers=other_headers)

    history = client.get("/api/mock-tests", headers=auth_headers).json()
    assert [t["id"] for t in history] == [done["id"]]


def test_history_limited_to_ten(client, auth_headers):
    for _ in range(12):
        test = _start(client, auth_headers)
        client.post(f"/api/mock-tests/{test['id']}/submit", headers=auth_headers)
    assert len(client.get("/api/mock-tests", headers=auth_headers).json()) == 10


def test_delete_test(client, auth_headers, other_headers):
    test = _start(client, auth_headers)
    url = f"/api/mock-tests/{test['id']}"
    assert client.delete(url, headers=other_headers).status_code == 404
    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_stats_over_completed_tests(client, auth_headers):
    assert client.get("/api/mock-tests/stats", headers=auth_headers).json() == {
        "tests_taken": 0, "average_score": 0, "correct_answers": 0, "time_spent_minutes": 0
    }

    for answers in (["A", "A", "A"], ["A", "", ""]):
        test = _start(client, auth_headers)
        client.post(f"/api/mock-tests/{test['id']}/submit", json={"answers": answers}, headers=auth_headers)
    _start(client, auth_headers)

    stats = client.get("/api/mock-tests/stats", headers=auth_headers).json()
    assert stats["tests_taken"] == 2
    assert stats["correct_answers"] == 4
    assert stats["average_score"] == 67
    assert stats["time_spent_minutes"] == 0


def test_question_generation_runs_off_the_event_loop():
    assert not inspect.iscoroutinefunction(mock_test_routes.start_test)

"""Streamed mock interviews and feedback."""

import inspect

from app.api.routes import mock_interview_routes
from app.services.ai_client import AIServiceError
from tests.helpers import sse_frames


def _start(client, headers, **fields):
    payload = {"interview_type": "technical", "target_role": "Backend Engineer", "difficulty": "medium"}
    payload.update(fields)
    response = client.post("/api/mock-interviews", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    assert response.headers["content-type"].startswith("text/event-stream")
    frames = sse_frames(response.text)
    return frames[0]["interview_id"], frames


def test_start_streams_greeting(client, auth_headers, ai_client):
    interview_id, frames = _start(client, auth_headers)

    assert [f["type"] for f in frames] == ["start", "content", "content", "content", "complete"]
    assert "".join(f["content"] for f in frames if f["type"] == "content") == "Hello! Tell me about yourself."
    assert frames[-1] == {
        "type": "complete", "message": "Hello! Tell me about yourself.", "questions_asked": 1
    }
    assert ai_client.calls[-1] == ("stream_interview", "start", [])

    stored = client.get(f"/api/mock-interviews/{interview_id}", headers=auth_headers).json()
    assert stored["status"] == "in_progress"
    assert stored["target_role"] == "Backend Engineer"
    assert stored["questions_asked"] == 1
    assert stored["messages"] == [{"role": "assistant", "content": "Hello! Tell me about yourself."}]


def test_blank_role_defaults(client, auth_headers):
    interview_id, _ = _start(client, auth_headers, target_role="  ", interview_type="hr")
    stored = client.get(f"/api/mock-interviews/{interview_id}", headers=auth_headers).json()
    assert stored["target_role"] == "Software Engineer"


def test_answer_appends_both_turns(client, auth_headers, ai_client):
    interview_id, _ = _start(client, auth_headers)
    ai_client.stream_chunks = ["Nice. ", "What is a B-tree?"]

    response = client.post(
        f"/api/mock-interviews/{interview_id}/messages",
        json={"content": "I build APIs in Python."},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert sse_frames(response.text)[-1]["questions_asked"] == 2

    action, sent = ai_client.calls[-1][1:]
    assert action == "continue"
    assert sent[-1] == {"role": "user", "content": "I build APIs in Python."}

    messages = client.get(f"/api/mock-interviews/{interview_id}", headers=auth_headers).json()["messages"]
    assert [m["role"] for m in messages] == ["assistant", "user", "assistant"]
    assert messages[-1]["content"] == "Nice. What is a B-tree?"


def test_broken_stream_keeps_partial_reply(client, auth_headers, ai_client):
    ai_client.stream_failure = RuntimeError("connection reset")
    interview_id, frames = _start(client, auth_headers)

    assert frames[-1]["type"] == "error"
    assert "complete" not in [f["type"] for f in frames]

    stored = client.get(f"/api/mock-interviews/{interview_id}", headers=auth_headers).json()
    assert stored["messages"] == [{"role": "assistant", "content": "Hello! Tell me about yourself."}]


def test_rate_limit_before_streaming(client, auth_headers, ai_client):
    ai_client.error = AIServiceError(429, "Rate limit exceeded. Please try again later.")
    response = client.post("/api/mock-interviews", json={"interview_type": "hr"}, headers=auth_headers)

    assert response.status_code == 429
    assert client.get("/api/mock-interviews", headers=auth_headers).json() == []


def test_rate_limit_on_answer_keeps_transcript(client, auth_headers, ai_client):
    interview_id, _ = _start(client, auth_headers)
    ai_client.error = AIServiceError(402, "AI credits exhausted. Please add more credits.")

    response = client.post(
        f"/api/mock-interviews/{interview_id}/messages", json={"content": "My answer"}, headers=auth_headers
    )
    assert response.status_code == 402
    messages = client.get(f"/api/mock-interviews/{interview_id}", headers=auth_headers).json()["messages"]
    assert len(messages) == 1


def test_blank_answer_rejected(client, auth_headers):
    interview_id, _ = _start(client, auth_headers)
    response = client.post(
        f"/api/mock-interviews/{interview_id}/messages", json={"content": "   "}, headers=auth_headers
    )
    assert response.status_code == 422


def test_end_interview_feedback(client, auth_headers, ai_client):
    interview_id, _ = _start(client, auth_headers)
    url = f"/api/mock-interviews/{interview_id}"

    response = client.post(f"{url}/end", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["overall_rating"] == 7.5
    assert data["feedback"]["strengths"] == ["Clear communication"]
    assert data["completed_at"] is not None

    assert client.post(f"{url}/end", headers=auth_headers).status_code == 409
    assert client.post(f"{url}/messages", json={"content": "one more"}, headers=auth_headers).status_code == 409


def test_unparsable_feedback_placeholder(client, auth_headers, ai_client):
    interview_id, _ = _start(client, auth_headers)
    ai_client.feedback_reply = "Great job overall!"

    data = client.post(f"/api/mock-interviews/{interview_id}/end", headers=auth_headers).json()
    assert data["status"] == "completed"
    assert data["overall_rating"] == 0
    assert data["feedback"]["rawResponse"] == "Great job overall!"


def test_end_without_messages(client, auth_headers, ai_client):
    ai_client.stream_chunks = []
    interview_id, frames = _start(client, auth_headers)
    assert frames[-1]["questions_asked"] == 0

    response = client.post(f"/api/mock-interviews/{interview_id}/end", headers=auth_headers)
    assert response.status_code == 400


def test_interviews_are_private(client, auth_headers, other_headers):
    interview_id, _ = _start(client, auth_headers)
    url = f"/api/mock-interviews/{interview_id}"

    assert client.get(url, headers=other_headers).status_code == 404
    assert client.post(f"{url}/messages", json={"content": "hi"}, headers=other_headers).status_code == 404
    assert client.post(f"{url}/end", headers=other_headers).status_code == 404
    assert client.delete(url, headers=other_headers).status_code == 404
    assert client.get("/api/mock-interviews", headers=other_headers).json() == []

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_wrong_shaped_feedback_still_completes(client, auth_headers, ai_client):
    interview_id, _ = _start(client, auth_headers)
    ai_client.feedback_reply = '{"overallRating": 6, "questionFeedback": 5, "tips": "Breathe"}'

    response = client.post(f"/api/mock-interviews/{interview_id}/end", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["overall_rating"] == 6
    assert data["feedback"]["questionFeedback"] == []
    assert data["feedback"]["tips"] == []


def test_interview_stats(client, auth_headers, other_headers, ai_client):
    first, _ = _start(client, auth_headers)
    client.post(f"/api/mock-interviews/{first}/end", headers=auth_headers)
    _start(client, auth_headers, interview_type="behavioral")
    _start(client, other_headers)

    assert client.get("/api/mock-interviews/stats", headers=auth_headers).json() == {
        "interviews": 2, "average_rating": 7.5, "technical": 1, "non_technical": 1
    }


def test_ai_handlers_run_off_the_event_loop():
    for handler in (mock_interview_routes.start_interview, mock_interview_routes.send_answer,
                    mock_interview_routes.end_interview):
        assert not inspect.iscoroutinefunction(handler)

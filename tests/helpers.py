"""Shared builders for the test suite."""
import json


def make_questions(count: int, answer: str = "A") -> list:
    return [
        {
            "id": i + 1,
            "question": f"Question {i + 1}?",
            "options": {"A": "one", "B": "two", "C": "three", "D": "four"},
            "correctAnswer": answer,
            "explanation": f"{answer} is correct"
        }
        for i in range(count)
    ]


def questions_reply(count: int, answer: str = "A") -> str:
    return json.dumps({"questions": make_questions(count, answer)})


def sse_frames(body: str) -> list:
    """Decode a text/event-stream body into its JSON payloads."""
    return [
        json.loads(line[len("data: "):])
        for line in body.splitlines()
        if line.startswith("data: ")
    ]

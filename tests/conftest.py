import json
import os

os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from resume_api.config import Settings  # noqa: E402
from resume_api.main import create_app  # noqa: E402
from resume_api.services.llm import LLMClient  # noqa: E402


class StubClient(LLMClient):
    """Records every prompt and answers with a canned reply (or raises it)."""

    def __init__(self, reply="") -> None:
        self.reply = reply
        self.calls: list[tuple[str, bool]] = []

    def generate(self, prompt: str, expect_json: bool = False) -> str:
        self.calls.append((prompt, expect_json))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def sample_resume() -> dict:
    return {
        "name": "Jane Doe",
        "title": "Software Engineer",
        "contact": {"phone": "555-0100", "email": "jane@example.com", "address": "Springfield, IL"},
        "summary": "Computer science graduate who enjoys building web services.",
        "sections": [
            {
                "title": "EDUCATION",
                "items": [
                    {
                        "heading": "State University | 2020-2024",
                        "subheading": "B.Sc. Computer Science",
                        "description": "Graduated with honours.",
                    }
                ],
            },
            {
                "title": "WORK EXPERIENCE",
                "items": [
                    {
                        "heading": "Acme Corp | 2023",
                        "subheading": "Software Engineering Intern",
                        "description": "Built internal dashboards.",
                    }
                ],
            },
            {
                "title": "PROJECTS",
                "items": [
                    {
                        "heading": "Course Planner",
                        "subheading": "Python, FastAPI",
                        "description": "Timetable builder used by 200 students.",
                    },
                    {"heading": "Chess Bot", "subheading": "", "description": "Minimax engine."},
                ],
            },
            {"title": "SKILLS", "items": ["Python", "SQL", "Docker"]},
        ],
        "atsScore": "91%",
        "suggestions": "Add metrics.\nMention leadership.",
    }


@pytest.fixture
def resume_dict() -> dict:
    return sample_resume()


@pytest.fixture
def resume_json() -> str:
    return json.dumps(sample_resume())


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key", request_timeout=5)


@pytest.fixture
def stub() -> StubClient:
    return StubClient()


@pytest.fixture
def client(settings: Settings, stub: StubClient) -> TestClient:
    return TestClient(create_app(settings, llm_client=stub))

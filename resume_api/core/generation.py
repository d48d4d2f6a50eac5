from typing import Optional

from resume_api.core.parsing import parse_resume_document
from resume_api.core.prompting import (
    build_cover_letter_prompt,
    build_improve_prompt,
    build_interview_prep_prompt,
    build_resume_prompt,
)
from resume_api.errors import EmptyResponse
from resume_api.schemas import ResumeDocument
from resume_api.services.llm import LLMClient


def _require_text(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise EmptyResponse("The AI model returned an empty or invalid response.")
    return content


def generate_resume(client: LLMClient, student_data: str, jd_text: Optional[str] = None) -> ResumeDocument:
    raw = client.generate(build_resume_prompt(student_data, jd_text), expect_json=True)
    return parse_resume_document(raw)


def improve_text(client: LLMClient, text: str) -> str:
    return _require_text(client.generate(build_improve_prompt(text)))


def generate_cover_letter(client: LLMClient, student_data: str, jd_text: str, doc: ResumeDocument) -> str:
    return _require_text(client.generate(build_cover_letter_prompt(student_data, jd_text, doc)))


def generate_interview_prep(client: LLMClient, student_data: str, jd_text: Optional[str] = None) -> str:
    return _require_text(client.generate(build_interview_prep_prompt(student_data, jd_text)))

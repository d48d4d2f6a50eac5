import json
import logging
import re

from pydantic import ValidationError as PydanticValidationError

from resume_api.errors import MalformedSchema
from resume_api.schemas import ResumeDocument

logger = logging.getLogger(__name__)

MALFORMED_MESSAGE = "Failed to generate structured resume data. The AI response might be malformed."

_FENCE_OPEN = re.compile(r"^```[ \t]*(?:json)?[ \t]*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```/```json fence. Stripping twice equals stripping once."""
    s = (text or "").strip()
    while True:
        opened = _FENCE_OPEN.match(s)
        closed = _FENCE_CLOSE.search(s)
        if not (opened and closed) or opened.end() > closed.start():
            return s
        s = s[opened.end():closed.start()].strip()


def extract_json_object(text: str) -> dict:
    """
    Gemini sometimes wraps JSON with fences or a sentence of chatter.
    We try:
      1) json.loads on the fence-stripped text
      2) parse substring from first '{' to last '}'
    """
    s = strip_code_fences(text)
    try:
        parsed = json.loads(s)
    except ValueError:
        start = s.find("{")
        end = s.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise ValueError("Model did not return a JSON object.")
        parsed = json.loads(s[start : end + 1])

    if not isinstance(parsed, dict):
        raise ValueError("Model did not return a JSON object.")
    return parsed


def parse_resume_document(text: str) -> ResumeDocument:
    try:
        data = extract_json_object(text)
    except ValueError as e:
        logger.warning("Unparseable resume JSON (%s): %.300s", e, text)
        raise MalformedSchema(MALFORMED_MESSAGE) from e

    missing = [k for k in ("name", "sections") if k not in data]
    if missing:
        logger.warning("Resume JSON missing required fields %s", missing)
        raise MalformedSchema(MALFORMED_MESSAGE)

    try:
        return ResumeDocument.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Resume JSON failed validation: %s", e)
        raise MalformedSchema(MALFORMED_MESSAGE) from e

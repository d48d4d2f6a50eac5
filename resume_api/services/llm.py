import logging
import time
from abc import ABC, abstractmethod

import requests

from resume_api.config import Settings
from resume_api.errors import EmptyResponse, UpstreamFailure

logger = logging.getLogger(__name__)

GENERATION_FAILED = "Failed to get a response from the AI model."


class LLMClient(ABC):
    """Anything that turns one prompt into one block of model text."""

    @abstractmethod
    def generate(self, prompt: str, expect_json: bool = False) -> str:
        ...


class GeminiClient(LLMClient):
    """Calls the Gemini ``generateContent`` REST endpoint, one request per prompt."""

    def __init__(self, settings: Settings):
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.timeout = settings.request_timeout
        self.url = f"{settings.gemini_api_base}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str, expect_json: bool) -> dict:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        if expect_json:
            payload["generationConfig"] = {"responseMimeType": "application/json"}
        return payload

    def generate(self, prompt: str, expect_json: bool = False) -> str:
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        started = time.monotonic()
        try:
            r = requests.post(
                self.url,
                json=self.build_payload(prompt, expect_json),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Gemini request failed: %s", e)
            raise UpstreamFailure(GENERATION_FAILED) from e

        elapsed = time.monotonic() - started
        logger.info(
            "Gemini %s responded %s in %.2fs (prompt %d chars, json=%s)",
            self.model, r.status_code, elapsed, len(prompt), expect_json,
        )
        if r.status_code != 200:
            logger.error("Gemini error %s: %s", r.status_code, r.text[:500])
            raise UpstreamFailure(GENERATION_FAILED)

        try:
            data = r.json()
        except ValueError as e:
            logger.error("Gemini returned a non-JSON body: %s", r.text[:500])
            raise UpstreamFailure(GENERATION_FAILED) from e

        text = first_candidate_text(data)
        if not text:
            logger.warning("Gemini returned no usable candidate: %s", str(data)[:500])
            raise EmptyResponse("The AI model returned an empty or invalid response.")
        return text


def first_candidate_text(data: dict) -> str:
    # candidates[0].content.parts[0].text; any other shape counts as empty
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""

# carit/services/flowchart_generator.py
"""
Client for the external flowchart generator.
The generator owns prompt construction and the AI call; this side only posts the
diagnostic context and returns the generated text (follow-up questions or a flowchart).
"""

from typing import Optional

import requests

from carit.config import settings
from carit.exceptions import ServiceUnavailableError, UpstreamError
from carit.utils.logger import get_logger

logger = get_logger(__name__)


class FlowchartGenerator:
    def __init__(self, url: str, timeout: int = 60, questions_url: Optional[str] = None):
        self.url = url
        self.timeout = timeout
        self.questions_url = questions_url

    def _post(self, url: str, payload: dict, what: str) -> str:
        try:
            resp = requests.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"[Generator] Request to {url} failed: {e}")
            raise UpstreamError("Flowchart generator unavailable") from e

        if not resp.text.strip():
            raise UpstreamError(f"Flowchart generator returned empty {what}")
        return resp.text

    def generate_questions(self, vehicle, issues) -> str:
        """Follow-up questions for a reported issue; their answers become `responses`."""
        if not self.questions_url:
            raise ServiceUnavailableError("Question generator not configured")
        return self._post(self.questions_url, {"vehicle": vehicle, "issues": issues}, "questions")

    def generate(self, vehicle, issues, responses) -> str:
        payload = {"vehicle": vehicle, "issues": issues, "responses": responses}
        return self._post(self.url, payload, "flowchart")


def get_flowchart_generator() -> FlowchartGenerator:
    """FastAPI dependency. Answers 503 when no generator is configured."""
    if not settings.FLOWCHART_GENERATOR_URL:
        raise ServiceUnavailableError("Flowchart generator not configured")
    return FlowchartGenerator(
        settings.FLOWCHART_GENERATOR_URL,
        settings.FLOWCHART_GENERATOR_TIMEOUT_SECONDS,
        questions_url=settings.QUESTION_GENERATOR_URL,
    )

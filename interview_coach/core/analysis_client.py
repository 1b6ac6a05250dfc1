"""
Analysis Client for Interview Coach

Stateless request/response calls to the Gemini API:
- Question generation from a job description
- Structured feedback for one answered question

Both calls request JSON constrained by a response schema and validate the
result with pydantic. Anything other than a well-formed, conforming
response surfaces as AnalysisFailure.
"""

import json
import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from interview_coach.config.settings import Settings, get_settings
from interview_coach.core.errors import AnalysisFailure, PreconditionViolation
from interview_coach.models.feedback import Feedback
from interview_coach.prompts.coach import CoachPrompts

logger = logging.getLogger(__name__)

_QUESTION_LIST = TypeAdapter(list[str])


class AnalysisClient:
    """
    Client for the external reasoning service (Gemini ``generateContent``).

    The HTTP client can be injected, which is how tests supply an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize with settings and an optional preconfigured HTTP client."""
        self.settings = settings or get_settings()
        self.prompts = CoachPrompts()

        self.client = client or httpx.AsyncClient(
            base_url=self.settings.gemini_base_url.rstrip("/"),
            headers={
                "x-goog-api-key": self.settings.gemini_api_key,
                "Content-Type": "application/json",
            },
            timeout=self.settings.analysis_timeout_seconds,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # CORE CALL
    # =========================================================================

    def _extract_content(self, result: Any) -> str:
        """
        Extract the text of the first candidate, joining multi-part output.

        Returns an empty string when the envelope does not have the
        expected ``candidates[0].content.parts`` shape.
        """
        if not isinstance(result, dict):
            return ""
        candidates = result.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        if not isinstance(content, dict):
            return ""
        parts = content.get("parts")
        if not isinstance(parts, list):
            return ""

        text_parts = []
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                text_parts.append(part["text"])
        return "".join(text_parts)

    async def _generate_json(self, prompt: str, schema: dict, purpose: str) -> Any:
        """
        Call the model with a JSON response schema and decode the reply.

        Raises:
            AnalysisFailure: on transport errors, non-2xx responses or
                unparsable output
        """
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }

        try:
            response = await self.client.post(
                f"/models/{self.settings.gemini_model}:generateContent",
                json=payload,
            )
            response.raise_for_status()
            content = self._extract_content(response.json()).strip()
        except httpx.HTTPError as e:
            logger.error(f"Gemini API error during {purpose}: {e}")
            raise AnalysisFailure(f"{purpose} request failed", {"error": str(e)}) from e
        except ValueError as e:
            raise AnalysisFailure(f"{purpose} returned a non-JSON envelope") from e

        if not content:
            logger.warning(f"Gemini returned no usable content for {purpose}")
            raise AnalysisFailure(f"{purpose} returned no content")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse {purpose} JSON: {e}")
            raise AnalysisFailure(f"{purpose} returned malformed JSON", {"content": content[:200]}) from e

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def generate_questions(self, job_description: str, count: int = 5) -> list[str]:
        """
        Generate interview questions tailored to a job description.

        Args:
            job_description: Free text pasted by the user
            count: Number of questions wanted

        Returns:
            Exactly ``count`` question strings, in the order returned

        Raises:
            AnalysisFailure: if the call fails or yields fewer usable questions
        """
        prompt = self.prompts.generate_questions_prompt(job_description, count)
        data = await self._generate_json(prompt, CoachPrompts.QUESTIONS_SCHEMA, "question generation")

        try:
            questions = _QUESTION_LIST.validate_python(data)
        except ValidationError as e:
            raise AnalysisFailure("question generation returned an unexpected shape") from e

        questions = [q.strip() for q in questions if q and q.strip()]
        if len(questions) < count:
            raise AnalysisFailure(
                f"question generation returned {len(questions)} questions, expected {count}"
            )

        logger.info(f"Generated {count} questions from job description")
        return questions[:count]

    # =========================================================================
    # ANSWER FEEDBACK
    # =========================================================================

    async def get_feedback(
        self,
        question_text: str,
        answer_text: str,
        words_per_minute: int,
    ) -> Feedback:
        """
        Get structured coaching feedback for one answer.

        Raises:
            PreconditionViolation: if the answer is empty
            AnalysisFailure: if the call fails or the result does not conform
        """
        if not answer_text or not answer_text.strip():
            raise PreconditionViolation("Feedback requested for an empty answer")

        prompt = self.prompts.feedback_prompt(question_text, answer_text, words_per_minute)
        data = await self._generate_json(prompt, CoachPrompts.FEEDBACK_SCHEMA, "answer feedback")

        try:
            return Feedback.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Feedback failed schema validation: {e.error_count()} errors")
            raise AnalysisFailure("answer feedback did not match the schema") from e

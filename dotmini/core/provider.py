"""
Gemini generation provider.

Builds the google-genai client once (per app) and reduces each SDK response to a
GenerationOutcome of plain strings, so the mediator never touches SDK types and
tests can hand it a fake provider instead.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

# Same blocking level for every harm category
SAFETY_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


@dataclass(frozen=True)
class SafetyRating:
    category: str
    probability: str


@dataclass(frozen=True)
class GenerationOutcome:
    """What the mediator needs from one generation call. All fields optional."""

    block_reason: str | None = None
    finish_reason: str | None = None
    safety_ratings: list[SafetyRating] = field(default_factory=list)
    text: str | None = None


class GenerationProvider(Protocol):
    async def generate(self, prompt: str) -> GenerationOutcome: ...


def _enum_name(value: Any) -> str | None:
    """SDK enums -> their wire name ("STOP", "HIGH", ...); plain strings pass through."""
    if value is None:
        return None
    value = getattr(value, "value", value)
    return str(value) if value != "" else None


def outcome_from_response(response: Any) -> GenerationOutcome:
    """Read block reason, first candidate's finish reason / safety ratings / first part text."""
    if response is None:
        return GenerationOutcome()
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = _enum_name(getattr(feedback, "block_reason", None))

    candidates = getattr(response, "candidates", None) or []
    candidate = candidates[0] if candidates else None
    if candidate is None:
        return GenerationOutcome(block_reason=block_reason)

    ratings = [
        SafetyRating(category=_enum_name(r.category) or "", probability=_enum_name(r.probability) or "")
        for r in (getattr(candidate, "safety_ratings", None) or [])
    ]
    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) or []
    text = getattr(parts[0], "text", None) if parts else None
    return GenerationOutcome(
        block_reason=block_reason,
        finish_reason=_enum_name(getattr(candidate, "finish_reason", None)),
        safety_ratings=ratings,
        text=text,
    )


class GeminiProvider:
    """google-genai backed provider. One instance per app, shared by all requests."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        temperature: float = 0.9,
        top_k: int = 1,
        top_p: float = 1.0,
        max_output_tokens: int = 2048,
        client: genai.Client | None = None,
    ):
        if not api_key and client is None:
            raise ValueError("GOOGLE_API_KEY is required for the Gemini provider")
        self.model = model
        self._client = client or genai.Client(api_key=api_key)
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            top_k=top_k,
            top_p=top_p,
            max_output_tokens=max_output_tokens,
            safety_settings=[
                types.SafetySetting(
                    category=category,
                    threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                )
                for category in SAFETY_CATEGORIES
            ],
        )

    async def generate(self, prompt: str) -> GenerationOutcome:
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self._config,
        )
        outcome = outcome_from_response(response)
        logger.debug(
            "Gemini %s: block=%s finish=%s text=%s",
            self.model,
            outcome.block_reason,
            outcome.finish_reason,
            "yes" if outcome.text is not None else "no",
        )
        return outcome

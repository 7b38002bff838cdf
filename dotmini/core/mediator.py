"""
Response mediator: one prompt in, one ChatResult out.

Order of checks (first match wins): provider failure -> prompt block -> abnormal
finish reason -> extracted text -> extraction failure. Provider errors are logged
and replaced by a generic message; nothing from upstream reaches the client
except the block/finish reason names and safety category names.
"""
import asyncio
import logging
from dataclasses import dataclass

from dotmini.core.errors import InvalidInput
from dotmini.core.provider import GenerationProvider, SafetyRating

logger = logging.getLogger(__name__)

NORMAL_FINISH_REASONS = frozenset({"STOP", "MAX_TOKENS"})
# Ratings at these levels are not reported as harmful
LOW_PROBABILITIES = frozenset({"NEGLIGIBLE", "LOW"})

# Finish-reason stand-in when the call itself failed or timed out
PROVIDER_ERROR = "PROVIDER_ERROR"
PROVIDER_ERROR_MESSAGE = "Server error while communicating with Gemini API."
INVALID_PROMPT_MESSAGE = "Prompt is required and must be a non-empty string."


@dataclass(frozen=True)
class Success:
    text: str
    status_code = 200


@dataclass(frozen=True)
class Blocked:
    reason: str
    status_code = 400

    @property
    def message(self) -> str:
        return f"Request blocked by safety settings: {self.reason}"


@dataclass(frozen=True)
class GenerationFailed:
    reason: str
    detail: str | None = None
    status_code = 500

    @property
    def message(self) -> str:
        if self.reason == PROVIDER_ERROR:
            return PROVIDER_ERROR_MESSAGE
        msg = f"Generation failed or stopped: {self.reason}."
        if self.detail:
            msg += f" Harmful categories detected: {self.detail}"
        return msg


@dataclass(frozen=True)
class ExtractionFailed:
    status_code = 500
    message = "Failed to extract valid text content from Gemini response."


ChatResult = Success | Blocked | GenerationFailed | ExtractionFailed


def harmful_ratings(ratings: list[SafetyRating]) -> list[SafetyRating]:
    """Ratings above LOW probability, in provider order."""
    return [r for r in ratings if r.probability not in LOW_PROBABILITIES]


def safety_detail(ratings: list[SafetyRating]) -> str | None:
    """'CATEGORY(PROBABILITY), ...' for harmful ratings, or None if there are none."""
    pairs = [f"{r.category}({r.probability})" for r in harmful_ratings(ratings)]
    return ", ".join(pairs) or None


def _preview(prompt: str, limit: int = 50) -> str:
    return prompt[:limit] + ("..." if len(prompt) > limit else "")


class ResponseMediator:
    """Stateless; safe to share across concurrent requests."""

    def __init__(self, provider: GenerationProvider, *, timeout_seconds: float = 60.0):
        self.provider = provider
        self.timeout_seconds = timeout_seconds

    async def mediate(self, prompt: object) -> ChatResult:
        if not isinstance(prompt, str) or not prompt.strip():
            logger.warning("Bad request: prompt is missing or invalid.")
            raise InvalidInput(INVALID_PROMPT_MESSAGE)
        logger.info("Received prompt (start): %s", _preview(prompt))

        try:
            outcome = await asyncio.wait_for(self.provider.generate(prompt), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("Gemini call exceeded %.1fs deadline", self.timeout_seconds)
            return GenerationFailed(reason=PROVIDER_ERROR)
        except Exception:
            logger.exception("Gemini call failed")
            return GenerationFailed(reason=PROVIDER_ERROR)

        if outcome.block_reason:
            logger.warning("Prompt blocked by safety settings. Reason: %s", outcome.block_reason)
            return Blocked(reason=outcome.block_reason)

        finish_reason = outcome.finish_reason
        if finish_reason and finish_reason not in NORMAL_FINISH_REASONS:
            logger.warning("Generation stopped abnormally. Reason: %s", finish_reason)
            detail = None
            if finish_reason == "SAFETY":
                detail = safety_detail(outcome.safety_ratings)
                logger.warning("Safety block details: %s", detail or "none above LOW")
            return GenerationFailed(reason=finish_reason, detail=detail)

        if outcome.text is not None:
            logger.info("Generated %d chars (finish=%s)", len(outcome.text), finish_reason)
            return Success(text=outcome.text)

        logger.error("Could not extract text content from Gemini response. Finish reason: %s", finish_reason)
        flagged = harmful_ratings(outcome.safety_ratings)
        if flagged:
            logger.warning(
                "No text found despite finish reason %s. High-prob safety categories: %s",
                finish_reason,
                ", ".join(r.category for r in flagged),
            )
        return ExtractionFailed()

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from dotmini.core.provider import GeminiProvider, GenerationOutcome, SafetyRating, outcome_from_response


def _response(**kwargs) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(**kwargs)


def test_outcome_from_sdk_response_uses_enum_names() -> None:
    response = _response(
        candidates=[
            types.Candidate(
                finish_reason=types.FinishReason.SAFETY,
                safety_ratings=[
                    types.SafetyRating(
                        category=types.HarmCategory.HARM_CATEGORY_HARASSMENT,
                        probability=types.HarmProbability.HIGH,
                    )
                ],
                content=types.Content(role="model", parts=[types.Part(text="partial"), types.Part(text="more")]),
            )
        ]
    )

    outcome = outcome_from_response(response)

    assert outcome == GenerationOutcome(
        block_reason=None,
        finish_reason="SAFETY",
        safety_ratings=[SafetyRating(category="HARM_CATEGORY_HARASSMENT", probability="HIGH")],
        text="partial",
    )


def test_outcome_from_blocked_prompt() -> None:
    response = _response(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(block_reason=types.BlockedReason.SAFETY)
    )

    outcome = outcome_from_response(response)

    assert outcome.block_reason == "SAFETY"
    assert outcome.finish_reason is None
    assert outcome.text is None


def test_outcome_without_parts_has_no_text() -> None:
    candidate = SimpleNamespace(finish_reason="STOP", safety_ratings=None, content=SimpleNamespace(parts=[]))

    outcome = outcome_from_response(SimpleNamespace(prompt_feedback=None, candidates=[candidate]))

    assert outcome == GenerationOutcome(finish_reason="STOP")


def test_outcome_from_none() -> None:
    assert outcome_from_response(None) == GenerationOutcome()


@pytest.mark.asyncio
async def test_generate_sends_model_and_safety_config() -> None:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=_response(
            candidates=[
                types.Candidate(
                    finish_reason=types.FinishReason.STOP,
                    content=types.Content(role="model", parts=[types.Part(text="Hello")]),
                )
            ]
        )
    )
    provider = GeminiProvider("", "gemini-test", client=client)

    outcome = await provider.generate("hi")

    assert outcome.text == "Hello"
    assert outcome.finish_reason == "STOP"
    kwargs = client.aio.models.generate_content.await_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["contents"] == "hi"
    config: types.GenerateContentConfig = kwargs["config"]
    assert config.temperature == 0.9
    assert config.max_output_tokens == 2048
    assert len(config.safety_settings) == 4
    assert all(s.threshold == types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE for s in config.safety_settings)


def test_provider_requires_key() -> None:
    with pytest.raises(ValueError):
        GeminiProvider("", "gemini-test")

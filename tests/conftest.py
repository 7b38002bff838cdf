from typing import Generator

import pytest
from fastapi.testclient import TestClient

from dotmini.core.config import Settings
from dotmini.core.provider import GenerationOutcome, SafetyRating
from dotmini.core.simulator import ExecutionSimulator
from dotmini.main import create_app


class FakeProvider:
    """Returns a preset outcome (or raises a preset error) and records prompts."""

    def __init__(self, outcome: GenerationOutcome | None = None, error: Exception | None = None):
        self.outcome = outcome or GenerationOutcome(finish_reason="STOP", text="Hello")
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> GenerationOutcome:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def instant_simulator() -> ExecutionSimulator:
    return ExecutionSimulator(delay_seconds=(0.0, 0.0))


@pytest.fixture
def client(fake_provider: FakeProvider, instant_simulator: ExecutionSimulator) -> Generator[TestClient, None, None]:
    app = create_app(settings=Settings(), provider=fake_provider, simulator=instant_simulator)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def safety_ratings() -> list[SafetyRating]:
    return [
        SafetyRating(category="HARASSMENT", probability="HIGH"),
        SafetyRating(category="HATE_SPEECH", probability="LOW"),
    ]

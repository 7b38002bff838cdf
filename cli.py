"""CLI: send a single prompt through the mediator. For the API, use: python run_api.py."""
import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from dotmini.core.config import get_settings
from dotmini.core.errors import InvalidInput
from dotmini.core.mediator import ResponseMediator, Success
from dotmini.core.provider import GeminiProvider
from dotmini.main import require_api_key


async def run(prompt: str) -> int:
    settings = get_settings()
    provider = GeminiProvider(require_api_key(settings), settings.gemini_model)
    mediator = ResponseMediator(provider, timeout_seconds=settings.generation_timeout_seconds)
    try:
        result = await mediator.mediate(prompt)
    except InvalidInput as e:
        print(e.message, file=sys.stderr)
        return 2
    if isinstance(result, Success):
        print(result.text)
        return 0
    print(result.message, file=sys.stderr)
    return 1


if __name__ == "__main__":
    prompt = " ".join(sys.argv[1:]) or "Write a haiku about Python."
    sys.exit(asyncio.run(run(prompt)))

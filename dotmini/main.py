"""FastAPI application entrypoint. Run with: uvicorn dotmini.main:create_app --factory"""
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Project root (parent of dotmini/)
_ROOT = Path(__file__).resolve().parent.parent

# Load .env FIRST so GOOGLE_API_KEY etc. are set before any settings are read.
from dotenv import load_dotenv
load_dotenv(_ROOT / ".env", override=True)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotmini.api.routes import health_router, router
from dotmini.core.config import Settings, get_settings
from dotmini.core.mediator import INVALID_PROMPT_MESSAGE, ResponseMediator
from dotmini.core.provider import GeminiProvider, GenerationProvider
from dotmini.core.simulator import MISSING_CODE_MESSAGE, ExecutionSimulator
from dotmini.models.schemas import ExecuteResult

logging.basicConfig(level=getattr(logging, get_settings().log_level, logging.INFO))
_log = logging.getLogger(__name__)

# Keep HTTP/SDK libs out of DEBUG (avoids leaking API keys/headers into logs)
for _name in ("httpx", "httpcore", "urllib3", "google_genai"):
    logging.getLogger(_name).setLevel(logging.WARNING)


def require_api_key(settings: Settings) -> str:
    """Return GOOGLE_API_KEY or stop the process: the server cannot work without it."""
    if not settings.google_api_key:
        _log.critical("CRITICAL ERROR: GOOGLE_API_KEY environment variable is not set.")
        raise SystemExit(1)
    return settings.google_api_key


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    _log.info("Dotmini AI Lab Backend running")
    _log.info("   - Listening on port: %s", settings.port)
    _log.info("   - Accepting requests from: %s", ", ".join(settings.cors_origins))
    _log.info("   - Model: %s", settings.gemini_model)
    if settings.google_api_key:
        _log.info("   - GOOGLE_API_KEY is set.")
    else:
        _log.warning("   - GOOGLE_API_KEY is not set!")
    yield


async def _log_request(request: Request, call_next):
    _log.debug("Incoming Request Origin: %s", request.headers.get("origin"))
    _log.debug("Request Path: %s %s", request.method, request.url.path)
    return await call_next(request)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors in the endpoint's own error shape."""
    _log.warning("Bad Request on %s: %s", request.url.path, exc.errors())
    if request.url.path.endswith("/execute"):
        return JSONResponse(status_code=400, content=ExecuteResult.failure(MISSING_CODE_MESSAGE).model_dump())
    if request.url.path.endswith("/chat"):
        return JSONResponse(status_code=400, content={"error": INVALID_PROMPT_MESSAGE})
    return JSONResponse(status_code=400, content={"error": "Bad Request"})


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # Starlette only calls this before the response has started
    _log.error("Unhandled Error caught by middleware", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def create_app(
    settings: Settings | None = None,
    provider: GenerationProvider | None = None,
    simulator: ExecutionSimulator | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if provider is None:
        provider = GeminiProvider(require_api_key(settings), settings.gemini_model)
    if simulator is None:
        simulator = ExecutionSimulator(
            language=settings.execution_language,
            max_code_length=settings.simulation_max_code_length,
            delay_seconds=settings.simulation_delay_seconds,
        )

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mediator = ResponseMediator(provider, timeout_seconds=settings.generation_timeout_seconds)
    app.state.simulator = simulator

    app.middleware("http")(_log_request)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)
    app.include_router(router)
    app.include_router(health_router)
    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    require_api_key(settings)
    uvicorn.run("dotmini.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    sys.exit(main())

"""FastAPI routes: chat, simulated execution, health."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from dotmini.core.errors import InternalError, InvalidInput
from dotmini.core.mediator import ResponseMediator, Success
from dotmini.core.simulator import ExecutionSimulator
from dotmini.models.schemas import ChatRequest, ChatResponse, ErrorResponse, ExecuteRequest, ExecuteResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["lab"])
health_router = APIRouter(tags=["health"])


def _mediator(request: Request) -> ResponseMediator:
    return request.app.state.mediator


def _simulator(request: Request) -> ExecutionSimulator:
    return request.app.state.simulator


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(req: ChatRequest, request: Request):
    """Send a prompt to Gemini and return the generated text."""
    logger.info("--- /api/chat endpoint hit! ---")
    try:
        result = await _mediator(request).mediate(req.prompt)
    except InvalidInput as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})

    if isinstance(result, Success):
        logger.info("/api/chat: Sending successful response to client.")
        return ChatResponse(response=result.text)
    return JSONResponse(status_code=result.status_code, content={"error": result.message})


@router.post(
    "/execute",
    response_model=ExecuteResult,
    responses={400: {"model": ExecuteResult}, 500: {"model": ExecuteResult}},
)
async def execute(req: ExecuteRequest, request: Request):
    """Simulate running a code block. No code is executed."""
    logger.info("--- /api/execute endpoint hit! --- language=%s", req.language)
    try:
        return await _simulator(request).simulate(req.code, req.language)
    except InvalidInput as e:
        logger.warning("/api/execute: %s", e.message)
        return JSONResponse(status_code=e.status_code, content=ExecuteResult.failure(e.message).model_dump())
    except Exception:
        logger.exception("/api/execute: Error during simulation process")
        err = InternalError()
        return JSONResponse(status_code=err.status_code, content=ExecuteResult.failure(err.message).model_dump())


@health_router.get("/health", response_class=PlainTextResponse)
def health() -> PlainTextResponse:
    """Liveness only; does not call Gemini."""
    return PlainTextResponse("OK", headers={"Cache-Control": "no-cache"})

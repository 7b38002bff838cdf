"""API request and response models."""
from typing import Any

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    prompt: str | None = Field(None, description="User prompt forwarded to the model")


class ChatResponse(BaseModel):
    response: str = Field(..., description="Generated text")


class ErrorResponse(BaseModel):
    error: str


class ExecuteRequest(BaseModel):
    code: str | None = Field(None, description="Source code from a fenced block")
    # Any JSON value; non-strings are rejected as unsupported languages
    language: Any = Field(None, description="Declared language of the block")


class ExecuteResult(BaseModel):
    stdout: str | None = None
    stderr: str | None = None
    error: str | None = None

    @classmethod
    def failure(cls, message: str) -> "ExecuteResult":
        """Result for a rejected or failed run: only ``error`` is set."""
        return cls(stdout=None, stderr=None, error=message)

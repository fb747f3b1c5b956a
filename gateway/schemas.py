from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    app: str


class MessageIn(BaseModel):
    role: Literal["system", "user", "assistant", "tool"]
    content: str


class CompletionRequest(BaseModel):
    # Left as a plain string so unknown providers reach the dispatcher and
    # come back as unsupported_vendor instead of a validation error.
    provider: str
    model: str = Field(min_length=1)
    messages: list[MessageIn] = Field(min_length=1)
    max_tokens: int | None = Field(default=None, ge=1)
    temperature: float | None = Field(default=None, ge=0)
    web_access: bool = False
    functions: list[dict[str, Any]] | None = None


class ToolCallFunctionOut(BaseModel):
    name: str
    arguments: str


class ToolCallOut(BaseModel):
    id: str
    type: Literal["function"] = "function"
    function: ToolCallFunctionOut


class AssistantMessageOut(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str
    tool_calls: list[ToolCallOut] = Field(default_factory=list)


class ChoiceOut(BaseModel):
    message: AssistantMessageOut
    finish_reason: str | None = None


class UsageOut(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionResponse(BaseModel):
    choices: list[ChoiceOut]
    usage: UsageOut


class ErrorResponse(BaseModel):
    error: str


class ProviderStatusOut(BaseModel):
    vendor: str
    configured: bool

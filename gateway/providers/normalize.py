from __future__ import annotations

from typing import Any

from gateway.providers.types import CanonicalRequest, ChatMessage, FunctionSpec
from gateway.schemas import CompletionRequest, MessageIn


def build_messages(messages: list[MessageIn]) -> list[ChatMessage]:
    return [ChatMessage(role=msg.role, content=msg.content) for msg in messages]


def build_tools(functions: list[dict[str, Any]] | None) -> list[FunctionSpec] | None:
    if not functions:
        return None
    return [FunctionSpec.from_payload(fn) for fn in functions]


def build_request(payload: CompletionRequest) -> CanonicalRequest:
    return CanonicalRequest(
        vendor=payload.provider,
        model=payload.model,
        messages=build_messages(payload.messages),
        max_tokens=payload.max_tokens,
        temperature=payload.temperature,
        web_access=payload.web_access,
        tools=build_tools(payload.functions),
    )

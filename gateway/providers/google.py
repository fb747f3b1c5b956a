from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Callable
from urllib.parse import quote

from gateway.providers.errors import empty_response
from gateway.providers.types import (
    AssistantMessage,
    CanonicalRequest,
    CanonicalResponse,
    Choice,
    FunctionSpec,
    OutboundRequest,
    ToolCall,
    Usage,
    Vendor,
    as_dict,
    optional_str,
    split_system_message,
    usage_count,
)

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
MODEL_ROLE = "model"
USER_ROLE = "user"

# (ordinal within the response, function name, JSON arguments) -> id
ToolCallIdFactory = Callable[[int, str, str], str]


def ordinal_call_id(ordinal: int, name: str, arguments: str) -> str:
    """Build a tool-call id for a vendor that does not issue one.

    The ordinal keeps ids unique within a single response; the digest keeps
    calls from different turns apart without depending on the clock.
    """
    digest = hashlib.sha256(f"{name}\x00{arguments}".encode("utf-8")).hexdigest()[:12]
    return f"call_{ordinal}_{digest}"


class GoogleAdapter:
    vendor = Vendor.GOOGLE
    credential_name = "google_ai_api_key"

    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com",
        id_factory: ToolCallIdFactory = ordinal_call_id,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.id_factory = id_factory

    def build_request(self, request: CanonicalRequest, api_key: str) -> OutboundRequest:
        system, conversation, dropped = split_system_message(request.messages)
        if dropped:
            logger.warning("Gemini accepts one system instruction; ignoring %d additional system message(s)", dropped)

        generation_config: dict[str, Any] = {
            "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
        }
        if request.max_tokens:
            generation_config["maxOutputTokens"] = request.max_tokens

        body: dict[str, Any] = {
            "contents": [
                {
                    "role": MODEL_ROLE if msg.role == "assistant" else USER_ROLE,
                    "parts": [{"text": msg.content}],
                }
                for msg in conversation
            ],
            "generationConfig": generation_config,
        }
        if system is not None:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if request.tools:
            body["tools"] = [{"functionDeclarations": [self._to_function_declaration(tool) for tool in request.tools]}]

        return OutboundRequest(
            url=f"{self.base_url}/v1beta/models/{quote(request.model, safe='')}:generateContent",
            headers={
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
            },
            body=body,
        )

    def parse_response(self, body: Any) -> CanonicalResponse:
        if not isinstance(body, dict):
            raise empty_response("response body is not a JSON object", vendor=self.vendor.value)
        candidates = body.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise empty_response("response contained no candidates", vendor=self.vendor.value)

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise empty_response("first candidate is not a JSON object", vendor=self.vendor.value)
        parts = as_dict(candidate.get("content")).get("parts")
        if not isinstance(parts, list) or not parts:
            reason = candidate.get("finishReason")
            raise empty_response(f"candidate has no content parts (finishReason={reason})", vendor=self.vendor.value)

        text_parts: list[str] = []
        tool_calls: list[ToolCall] = []
        for part in parts:
            if not isinstance(part, dict):
                continue
            # Thought summaries are not part of the reply.
            if isinstance(part.get("text"), str) and not part.get("thought"):
                text_parts.append(part["text"])
            function_call = part.get("functionCall")
            if isinstance(function_call, dict):
                name = str(function_call.get("name") or "")
                arguments = json.dumps(function_call.get("args") or {})
                tool_calls.append(
                    ToolCall(id=self.id_factory(len(tool_calls), name, arguments), name=name, arguments=arguments)
                )
        if not text_parts and not tool_calls:
            raise empty_response("candidate contained no text or functionCall parts", vendor=self.vendor.value)

        usage = as_dict(body.get("usageMetadata"))
        return CanonicalResponse(
            choices=[
                Choice(
                    message=AssistantMessage(content="".join(text_parts), tool_calls=tool_calls),
                    finish_reason=optional_str(candidate.get("finishReason")),
                )
            ],
            usage=Usage(
                prompt_tokens=usage_count(usage.get("promptTokenCount")),
                completion_tokens=usage_count(usage.get("candidatesTokenCount")),
                total_tokens=usage_count(usage.get("totalTokenCount")),
            ),
            vendor=self.vendor.value,
            model=optional_str(body.get("modelVersion")),
        )

    def _to_function_declaration(self, tool: FunctionSpec) -> dict[str, Any]:
        return {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        }

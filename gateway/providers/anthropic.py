from __future__ import annotations

import json
import logging
from typing import Any

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

DEFAULT_MAX_TOKENS = 2000


class AnthropicAdapter:
    vendor = Vendor.ANTHROPIC
    credential_name = "anthropic_api_key"

    def __init__(self, base_url: str = "https://api.anthropic.com", api_version: str = "2023-06-01") -> None:
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version

    def build_request(self, request: CanonicalRequest, api_key: str) -> OutboundRequest:
        system, conversation, dropped = split_system_message(request.messages)
        if dropped:
            logger.warning("Anthropic accepts one system prompt; ignoring %d additional system message(s)", dropped)

        messages: list[dict[str, Any]] = []
        for msg in conversation:
            # No tool role for plain-text turns; tool output is relayed as user content.
            role = msg.role if msg.role in {"user", "assistant"} else "user"
            messages.append({"role": role, "content": msg.content})

        body: dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "max_tokens": request.max_tokens or DEFAULT_MAX_TOKENS,
        }
        if system is not None:
            body["system"] = system
        if request.temperature is not None:
            body["temperature"] = request.temperature
        if request.tools:
            body["tools"] = [self._to_anthropic_tool(tool) for tool in request.tools]

        return OutboundRequest(
            url=f"{self.base_url}/v1/messages",
            headers={
                "x-api-key": api_key,
                "anthropic-version": self.api_version,
                "Content-Type": "application/json",
            },
            body=body,
        )

    def parse_response(self, body: Any) -> CanonicalResponse:
        if not isinstance(body, dict):
            raise empty_response("response body is not a JSON object", vendor=self.vendor.value)
        blocks = body.get("content")
        if not isinstance(blocks, list) or not blocks:
            raise empty_response("response contained no content blocks", vendor=self.vendor.value)

        text_parts: list[str] = []
        tool_calls: list[ToolCall] = []
        for block in blocks:
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if block_type == "text" and isinstance(block.get("text"), str):
                text_parts.append(block["text"])
            elif block_type == "tool_use":
                tool_calls.append(
                    ToolCall(
                        id=str(block.get("id") or ""),
                        name=str(block.get("name") or ""),
                        arguments=json.dumps(block.get("input") or {}),
                    )
                )
        if not text_parts and not tool_calls:
            raise empty_response("response contained no text or tool_use blocks", vendor=self.vendor.value)

        usage = as_dict(body.get("usage"))
        prompt_tokens = usage_count(usage.get("input_tokens"))
        completion_tokens = usage_count(usage.get("output_tokens"))
        return CanonicalResponse(
            choices=[
                Choice(
                    message=AssistantMessage(content="".join(text_parts), tool_calls=tool_calls),
                    finish_reason=optional_str(body.get("stop_reason")),
                )
            ],
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            vendor=self.vendor.value,
            model=optional_str(body.get("model")),
        )

    def _to_anthropic_tool(self, tool: FunctionSpec) -> dict[str, Any]:
        return {
            "name": tool.name,
            "description": tool.description,
            "input_schema": tool.parameters,
        }

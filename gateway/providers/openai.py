from __future__ import annotations

import json
import logging
from typing import Any

from gateway.providers.errors import empty_response
from gateway.providers.models import classify_model
from gateway.providers.types import (
    AssistantMessage,
    CanonicalRequest,
    CanonicalResponse,
    ChatMessage,
    Choice,
    FunctionSpec,
    OutboundRequest,
    ToolCall,
    Usage,
    Vendor,
    as_dict,
    optional_str,
    usage_count,
)

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    vendor = Vendor.OPENAI
    credential_name = "openai_api_key"

    def __init__(self, base_url: str = "https://api.openai.com") -> None:
        self.base_url = base_url.rstrip("/")

    def build_request(self, request: CanonicalRequest, api_key: str) -> OutboundRequest:
        capabilities = classify_model(request.model)
        body: dict[str, Any] = {
            "model": request.model,
            "messages": [self._to_openai_message(msg) for msg in request.messages],
        }
        if request.max_tokens:
            body[capabilities.token_field] = request.max_tokens
        if request.temperature is not None and capabilities.supports_temperature:
            body["temperature"] = request.temperature
        if request.web_access and capabilities.supports_web_search_option:
            body["web_search_options"] = {}

        if request.tools:
            if capabilities.supports_tools:
                body["tools"] = [self._to_openai_tool(tool) for tool in request.tools]
                body["tool_choice"] = "auto"
            else:
                logger.warning("Dropping %d tool(s): model %s does not accept tools", len(request.tools), request.model)

        return OutboundRequest(
            url=f"{self.base_url}/v1/chat/completions",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            body=body,
        )

    def parse_response(self, body: Any) -> CanonicalResponse:
        if not isinstance(body, dict):
            raise empty_response("response body is not a JSON object", vendor=self.vendor.value)
        raw_choices = body.get("choices")
        if not isinstance(raw_choices, list) or not raw_choices:
            raise empty_response("response contained no choices", vendor=self.vendor.value)

        choices: list[Choice] = []
        for raw in raw_choices:
            if not isinstance(raw, dict):
                continue
            message = as_dict(raw.get("message"))
            content = message.get("content")
            raw_tool_calls = message.get("tool_calls")
            choices.append(
                Choice(
                    message=AssistantMessage(
                        content=content if isinstance(content, str) else "",
                        tool_calls=[
                            self._from_openai_tool_call(tc)
                            for tc in (raw_tool_calls if isinstance(raw_tool_calls, list) else [])
                            if isinstance(tc, dict)
                        ],
                    ),
                    finish_reason=optional_str(raw.get("finish_reason")),
                )
            )
        if not choices:
            raise empty_response("response contained no usable choices", vendor=self.vendor.value)

        usage = as_dict(body.get("usage"))
        return CanonicalResponse(
            choices=choices,
            usage=Usage(
                prompt_tokens=usage_count(usage.get("prompt_tokens")),
                completion_tokens=usage_count(usage.get("completion_tokens")),
                total_tokens=usage_count(usage.get("total_tokens")),
            ),
            vendor=self.vendor.value,
            model=optional_str(body.get("model")),
        )

    def _to_openai_message(self, msg: ChatMessage) -> dict[str, Any]:
        return {"role": msg.role, "content": msg.content}

    def _to_openai_tool(self, tool: FunctionSpec) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }

    def _from_openai_tool_call(self, tool_call: dict[str, Any]) -> ToolCall:
        fn = as_dict(tool_call.get("function"))
        arguments = fn.get("arguments")
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments if arguments is not None else {})
        return ToolCall(id=str(tool_call.get("id") or ""), name=str(fn.get("name") or ""), arguments=arguments)

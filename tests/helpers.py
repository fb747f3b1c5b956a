"""Shared request builders and recorded vendor payloads for the test suite."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

from gateway.core.settings import Settings
from gateway.providers.types import CanonicalRequest, ChatMessage

Handler = Callable[[httpx.Request], httpx.Response]

OPENAI_FIXTURE: dict[str, Any] = {
    "id": "chatcmpl-123",
    "model": "gpt-4o",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": "call_abc",
                        "type": "function",
                        "function": {"name": "generate_image", "arguments": '{"prompt": "a cat"}'},
                    }
                ],
            },
            "finish_reason": "tool_calls",
        }
    ],
    "usage": {"prompt_tokens": 12, "completion_tokens": 8, "total_tokens": 20},
}

ANTHROPIC_FIXTURE: dict[str, Any] = {
    "id": "msg_01",
    "type": "message",
    "model": "claude-x",
    "content": [
        {"type": "text", "text": "Let me draw "},
        {"type": "text", "text": "that."},
        {"type": "tool_use", "id": "toolu_01", "name": "generate_image", "input": {"prompt": "a cat"}},
    ],
    "stop_reason": "tool_use",
    "usage": {"input_tokens": 30, "output_tokens": 12},
}

GOOGLE_FIXTURE: dict[str, Any] = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [
                    {"text": "Checking both."},
                    {"functionCall": {"name": "lookup", "args": {"city": "Paris"}}},
                    {"functionCall": {"name": "lookup", "args": {"city": "Paris"}}},
                ],
            },
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 9, "candidatesTokenCount": 5, "totalTokenCount": 14},
    "modelVersion": "gemini-2.0-flash",
}


def make_settings(**overrides: Any) -> Settings:
    # Every field is passed explicitly so variables in the environment cannot leak in.
    values: dict[str, Any] = {
        "app_name": "Completion Gateway",
        "openai_api_key": "openai-key",
        "anthropic_api_key": "anthropic-key",
        "google_ai_api_key": "google-key",
        "openai_base_url": "https://api.openai.com",
        "anthropic_base_url": "https://api.anthropic.com",
        "google_base_url": "https://generativelanguage.googleapis.com",
        "anthropic_version": "2023-06-01",
        "request_timeout_seconds": 60.0,
        "cors_allow_origins": ["*"],
        "log_level": "INFO",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_request(vendor: str = "openai", model: str = "gpt-4o", **kwargs: Any) -> CanonicalRequest:
    messages = kwargs.pop(
        "messages",
        [
            ChatMessage(role="system", content="Be terse"),
            ChatMessage(role="user", content="2+2?"),
        ],
    )
    return CanonicalRequest(vendor=vendor, model=model, messages=messages, **kwargs)


def json_handler(payload: Any, status_code: int = 200, calls: list[httpx.Request] | None = None) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


def sent_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)



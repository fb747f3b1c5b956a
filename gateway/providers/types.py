from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Vendor(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


@dataclass
class ChatMessage:
    role: str
    content: str


@dataclass
class FunctionSpec:
    name: str
    description: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> FunctionSpec:
        # Callers send either the OpenAI tool wrapper or the bare function object.
        fn = payload.get("function") if isinstance(payload.get("function"), dict) else payload
        return cls(
            name=str(fn.get("name", "")),
            description=str(fn.get("description") or ""),
            parameters=dict(fn.get("parameters") or {}),
        )


@dataclass
class CanonicalRequest:
    vendor: str
    model: str
    messages: list[ChatMessage]
    max_tokens: int | None = None
    temperature: float | None = None
    web_access: bool = False
    tools: list[FunctionSpec] | None = None


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: str


@dataclass
class AssistantMessage:
    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    role: str = "assistant"


@dataclass
class Choice:
    message: AssistantMessage
    finish_reason: str | None = None


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class CanonicalResponse:
    choices: list[Choice]
    usage: Usage = field(default_factory=Usage)
    vendor: str | None = None
    model: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "choices": [
                {
                    "message": {
                        "role": choice.message.role,
                        "content": choice.message.content,
                        "tool_calls": [
                            {
                                "id": call.id,
                                "type": "function",
                                "function": {"name": call.name, "arguments": call.arguments},
                            }
                            for call in choice.message.tool_calls
                        ],
                    },
                    "finish_reason": choice.finish_reason,
                }
                for choice in self.choices
            ],
            "usage": {
                "prompt_tokens": self.usage.prompt_tokens,
                "completion_tokens": self.usage.completion_tokens,
                "total_tokens": self.usage.total_tokens,
            },
        }


@dataclass
class OutboundRequest:
    url: str
    headers: dict[str, str]
    body: dict[str, Any]


def split_system_message(messages: list[ChatMessage]) -> tuple[str | None, list[ChatMessage], int]:
    """Pull the first system message out of a conversation.

    Returns the system text (or None), the remaining non-system messages in
    their original order, and the number of extra system messages that were
    dropped because the vendor only has one system slot.
    """
    system: str | None = None
    dropped = 0
    conversation: list[ChatMessage] = []
    for msg in messages:
        if msg.role == "system":
            if system is None:
                system = msg.content
            else:
                dropped += 1
            continue
        conversation.append(msg)
    return system, conversation, dropped


def usage_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None

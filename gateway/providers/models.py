"""Model-name capability table for the OpenAI chat completions API.

Rows are matched in order; the first row whose pattern matches the model id
wins. New models are supported by adding a row, not a branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

LEGACY_TOKEN_FIELD = "max_tokens"
COMPLETION_TOKEN_FIELD = "max_completion_tokens"


@dataclass(frozen=True)
class ModelCapabilities:
    token_field: str = LEGACY_TOKEN_FIELD
    supports_temperature: bool = True
    supports_web_search_option: bool = False
    supports_tools: bool = True


@dataclass(frozen=True)
class ModelRule:
    pattern: str
    match: Literal["exact", "prefix"]
    capabilities: ModelCapabilities

    def matches(self, model: str) -> bool:
        if self.match == "exact":
            return model == self.pattern
        return model.startswith(self.pattern)


_SEARCH_PREVIEW = ModelCapabilities(
    supports_temperature=False,
    supports_web_search_option=True,
    supports_tools=False,
)
_NEXT_GENERATION = ModelCapabilities(token_field=COMPLETION_TOKEN_FIELD)

OPENAI_MODEL_RULES: tuple[ModelRule, ...] = (
    ModelRule("gpt-4o-search-preview", "exact", _SEARCH_PREVIEW),
    ModelRule("gpt-4o-mini-search-preview", "exact", _SEARCH_PREVIEW),
    ModelRule("gpt-5", "prefix", _NEXT_GENERATION),
    ModelRule("o1", "prefix", _NEXT_GENERATION),
    ModelRule("o3", "prefix", _NEXT_GENERATION),
    ModelRule("o4", "prefix", _NEXT_GENERATION),
)

DEFAULT_CAPABILITIES = ModelCapabilities()


def classify_model(model: str, rules: tuple[ModelRule, ...] = OPENAI_MODEL_RULES) -> ModelCapabilities:
    for rule in rules:
        if rule.matches(model):
            return rule.capabilities
    return DEFAULT_CAPABILITIES

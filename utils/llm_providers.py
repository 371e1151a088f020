"""
Thin adapter layer over LLM provider SDKs (OpenAI, Anthropic).

Each provider exposes the same ``generate`` interface so callers never import
provider-specific code.  ``generate_structured`` asks for JSON matching a
pydantic model and validates the reply against it.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from config.settings import config

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class LLMOutputError(Exception):
    """The model's reply could not be parsed into the requested schema."""


def _schema_instruction(output_schema: Dict[str, Any]) -> str:
    return (
        "\n\nRespond ONLY with valid JSON matching this schema:\n"
        f"{json.dumps(output_schema, indent=2)}"
    )


class BaseLLMProvider(ABC):
    """Common interface that every concrete provider implements."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.3,
        model: str | None = None,
        max_tokens: int = 2048,
        output_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Return the raw completion text."""
        ...

    async def generate_structured(
        self,
        prompt: str,
        output_model: Type[M],
        *,
        temperature: float = 0.3,
        model: str | None = None,
    ) -> M:
        schema = output_model.model_json_schema(by_alias=True)
        text = await self.generate(prompt, temperature=temperature, model=model, output_schema=schema)
        try:
            return output_model.model_validate_json(_strip_fences(text))
        except ValidationError as exc:
            logger.warning("LLM reply did not match %s: %s", output_model.__name__, exc)
            raise LLMOutputError(f"Model output did not match {output_model.__name__}") from exc


def _strip_fences(text: str) -> str:
    """Drop a surrounding ```json … ``` block if the model added one."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


# ═══════════════════════════════════════════════════════════════════════════════
# OpenAI
# ═══════════════════════════════════════════════════════════════════════════════


class OpenAIProvider(BaseLLMProvider):
    def __init__(self, api_key: str, default_model: str = "gpt-4o-mini"):
        from openai import AsyncOpenAI

        self.client = AsyncOpenAI(api_key=api_key)
        self.default_model = default_model

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.3,
        model: str | None = None,
        max_tokens: int = 2048,
        output_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        kwargs: Dict[str, Any] = {}
        if output_schema is not None:
            kwargs["response_format"] = {"type": "json_object"}
            prompt += _schema_instruction(output_schema)

        response = await self.client.chat.completions.create(
            model=model or self.default_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        return response.choices[0].message.content or ""


# ═══════════════════════════════════════════════════════════════════════════════
# Anthropic
# ═══════════════════════════════════════════════════════════════════════════════


class AnthropicProvider(BaseLLMProvider):
    def __init__(self, api_key: str, default_model: str = "claude-3-5-sonnet-20241022"):
        from anthropic import AsyncAnthropic

        self.client = AsyncAnthropic(api_key=api_key)
        self.default_model = default_model

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.3,
        model: str | None = None,
        max_tokens: int = 2048,
        output_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        if output_schema is not None:
            prompt += _schema_instruction(output_schema)

        response = await self.client.messages.create(
            model=model or self.default_model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text


# ═══════════════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════════════

_provider_cache: Dict[str, BaseLLMProvider] = {}


def get_llm_provider(
    provider_name: str | None = None,
    *,
    api_key: str | None = None,
    default_model: str | None = None,
) -> BaseLLMProvider:
    """
    Return (and cache) an LLM provider instance.

    Parameters
    ----------
    provider_name : "openai" | "anthropic"; defaults to ``INSIGHTS_MODEL_PROVIDER``.
    api_key       : explicit key; if omitted, read from config.
    default_model : defaults to ``INSIGHTS_MODEL``.
    """
    provider_name = provider_name or config.insights_model_provider
    default_model = default_model or config.insights_model

    cache_key = f"{provider_name}:{default_model}"
    if cache_key in _provider_cache:
        return _provider_cache[cache_key]

    if provider_name == "openai":
        instance: BaseLLMProvider = OpenAIProvider(
            api_key=api_key or config.openai_api_key,
            default_model=default_model,
        )
    elif provider_name == "anthropic":
        instance = AnthropicProvider(
            api_key=api_key or (config.anthropic_api_key or ""),
            default_model=default_model,
        )
    else:
        raise ValueError(f"Unsupported LLM provider: {provider_name}")

    _provider_cache[cache_key] = instance
    return instance

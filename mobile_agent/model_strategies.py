"""Model variants for the command executor."""
from __future__ import annotations

from typing import Any, Dict, Optional
import os

from openai import OpenAI

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "openai/gpt-4o-mini"


class OpenRouterModel:
    """Single-turn chat model on the OpenRouter-hosted OpenAI-compatible API."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        site_url: Optional[str] = None,
        site_name: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ) -> None:
        self._client = client or _build_openrouter_client(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        self.extra_headers: Dict[str, str] = {}
        site_url = site_url or os.getenv("OPENROUTER_SITE_URL")
        site_name = site_name or os.getenv("OPENROUTER_SITE_NAME")
        if site_url:
            self.extra_headers["HTTP-Referer"] = site_url
        if site_name:
            self.extra_headers["X-Title"] = site_name

    def prompt(self, text: str) -> str:
        if not self.model:
            raise ValueError("Model name must be provided.")
        kwargs: Dict[str, Any] = {}
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": text}],
            temperature=self.temperature,
            extra_headers=(self.extra_headers or None),
            **kwargs,
        )
        if not response.choices:
            raise RuntimeError("Model response contained no choices.")
        return response.choices[0].message.content or ""


def _build_openrouter_client(
    api_key: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: Optional[float] = None,
) -> OpenAI:
    """Return an OpenRouter client using explicit or environment credentials."""
    resolved_api_key = api_key or os.getenv("OPENROUTER_API_KEY")
    if not resolved_api_key:
        raise RuntimeError("Missing OPENROUTER_API_KEY.")
    return OpenAI(base_url=base_url, api_key=resolved_api_key, timeout=timeout)

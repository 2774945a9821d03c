"""
LLM access for structured extraction.

Every request asks the provider for a single JSON object (OpenAI JSON mode,
Anthropic assistant prefill) at temperature 0. Transient API errors such as
rate limits, overload and dropped connections are retried with exponential
backoff; everything else propagates to the caller.
"""

import json
import os
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LLM_MAX_RETRIES = max(1, int(os.getenv("LLM_MAX_RETRIES", "3")))
RETRY_BASE_DELAY = 1.0

# Resume extraction returns a large JSON document
DEFAULT_MAX_TOKENS = 4096


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    truncated: bool = False


class LLMProvider(ABC):
    """
    Abstract base for JSON-producing LLM providers.

    Subclasses set ``provider_name`` and ``default_model``, list the exception
    types worth retrying in ``transient_errors``, and implement
    ``_request_json()`` as a single API call.
    """

    provider_name: str
    default_model: str
    transient_errors: Tuple[Type[Exception], ...] = ()
    max_tokens: int = DEFAULT_MAX_TOKENS

    def __init__(self, model: Optional[str] = None):
        self.model = model or self.default_model

    @property
    def name(self) -> str:
        return f"{self.provider_name}/{self.model}"

    @abstractmethod
    def _request_json(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Make one API call asking for a JSON object. No retries."""

    def generate_json(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """
        Request a JSON object, retrying transient errors.

        Raises:
            The last transient error once retries are exhausted, or any other
            provider error immediately.
        """
        for attempt in range(1, LLM_MAX_RETRIES + 1):
            try:
                response = self._request_json(system_prompt, user_prompt)
            except self.transient_errors as e:
                if attempt == LLM_MAX_RETRIES:
                    raise
                delay = RETRY_BASE_DELAY * 2 ** (attempt - 1)
                logger.warning(
                    f"{self.name}: {type(e).__name__}, retrying in {delay:.1f}s "
                    f"(attempt {attempt}/{LLM_MAX_RETRIES})"
                )
                time.sleep(delay)
                continue

            if response.truncated:
                logger.warning(f"{self.name}: response cut off at {self.max_tokens} tokens")
            return response


class AnthropicProvider(LLMProvider):
    """Claude models. JSON output is forced by prefilling the reply with ``{``."""

    provider_name = "anthropic"
    default_model = "claude-sonnet-4-20250514"

    def __init__(self, model: Optional[str] = None):
        # Lazy import - only needed when this provider is selected
        import anthropic

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        super().__init__(model)
        self.client = anthropic.Anthropic(api_key=api_key)
        self.transient_errors = (
            anthropic.OverloadedError,
            anthropic.RateLimitError,
            anthropic.APIConnectionError,
        )

    def _request_json(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=0,
            system=system_prompt,
            messages=[
                {"role": "user", "content": user_prompt},
                {"role": "assistant", "content": "{"},
            ],
        )
        text = "".join(block.text for block in response.content if block.type == "text")
        return LLMResponse(
            content="{" + text,
            model=self.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            truncated=response.stop_reason == "max_tokens",
        )


class OpenAIProvider(LLMProvider):
    """GPT models in JSON mode."""

    provider_name = "openai"
    default_model = "gpt-4o"

    def __init__(self, model: Optional[str] = None):
        # Lazy import - only needed when this provider is selected
        import openai

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        super().__init__(model)
        self.client = openai.OpenAI(api_key=api_key)
        self.transient_errors = (openai.RateLimitError, openai.APIConnectionError)

    def _request_json(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=0,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        choice = response.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=self.model,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
            truncated=choice.finish_reason == "length",
        )


PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


def get_provider(provider_name: Optional[str] = None, model: Optional[str] = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "anthropic" or "openai" (default: LLM_PROVIDER env var, then openai)
        model: Model name (default: LLM_MODEL env var, then the provider's default)

    Raises:
        ValueError: If the provider is unknown or its API key is not set
    """
    name = (provider_name or os.getenv("LLM_PROVIDER", "openai")).lower()
    if name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}. Use one of {sorted(PROVIDERS)}")
    return PROVIDERS[name](model=model or os.getenv("LLM_MODEL"))


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Recover a JSON object from a model reply.

    Tries the reply as-is, then with markdown code fences stripped, then the
    outermost ``{...}`` span.

    Returns:
        Parsed dict (empty if no JSON object could be recovered)
    """
    text = (text or "").strip()
    unfenced = re.sub(r"^```(?:json)?\s*|\s*```$", "", text)
    candidates = [text, unfenced]

    start, end = unfenced.find("{"), unfenced.rfind("}")
    if start != -1 and end > start:
        candidates.append(unfenced[start : end + 1])

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict):
            return result
    return {}

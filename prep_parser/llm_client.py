"""
LLM client with an OpenAI / Anthropic / OpenRouter provider switch.

LLMClient.create picks the provider from an explicit argument or the
LLM_PROVIDER env var. Every provider implements BaseLLMClient, so the
question generator and the summarizer never care which model answers.
"""

import os
import json
from abc import ABC, abstractmethod
from typing import Optional
from enum import Enum

from .logger import get_module_logger
from .exceptions import LLMClientError

logger = get_module_logger("llm_client")


class LLMProvider(Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OPENROUTER = "openrouter"


def strip_code_fences(text: str) -> str:
    """Remove a ```json ... ``` wrapper around a reply, if there is one."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    provider: str = "unknown"

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Send a prompt to the LLM and return the response text.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt
            temperature: Sampling temperature (provider default if None)
            max_tokens: Completion token cap (provider default if None)

        Returns:
            The LLM's response text
        """
        pass

    def complete_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> dict:
        """
        Send a prompt and parse the response as JSON.

        Providers without a native JSON mode get an explicit instruction
        appended to the prompt; code fences around the reply are stripped.
        """
        json_prompt = f"{prompt}\n\nRespond with valid JSON only, no additional text."
        response_text = self.complete(json_prompt, system_prompt, temperature, max_tokens)
        return self._parse_json(response_text)

    def _parse_json(self, response_text: Optional[str]) -> dict:
        if not response_text:
            raise LLMClientError("Empty response from model", provider=self.provider)
        try:
            return json.loads(strip_code_fences(response_text))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {self.provider} response as JSON: {e}")
            raise LLMClientError(
                f"Failed to parse response as JSON: {str(e)}",
                provider=self.provider,
                details={"response": response_text}
            )


class OpenAIClient(BaseLLMClient):
    """OpenAI chat-completions client."""

    provider = "openai"
    api_key_env = "OPENAI_API_KEY"
    default_model = "gpt-4o"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None
    ):
        self.api_key = api_key or os.getenv(self.api_key_env)
        if not self.api_key:
            raise LLMClientError(
                f"{self.provider} API key not provided (set {self.api_key_env})",
                provider=self.provider
            )
        self.model = model or self.default_model

        # Lazy import: only require the openai SDK when this provider is used
        try:
            from openai import OpenAI
        except ImportError:
            raise LLMClientError(
                "openai package not installed. Run: pip install openai",
                provider=self.provider
            )
        self.client = OpenAI(api_key=self.api_key, **self._client_kwargs())

    def _client_kwargs(self) -> dict:
        return {}

    def _messages(self, prompt: str, system_prompt: Optional[str]) -> list[dict]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _create(self, messages: list[dict], temperature, max_tokens, **extra):
        kwargs = {"model": self.model, "messages": messages, **extra}
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = self.client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(f"{self.provider} API error: {e}")
            raise LLMClientError(
                f"{self.provider} API call failed: {str(e)}",
                provider=self.provider,
                details={"error": str(e)}
            )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """Send prompt and return response."""
        return self._create(self._messages(prompt, system_prompt), temperature, max_tokens)

    def complete_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> dict:
        """Send prompt in native JSON mode and parse the response."""
        content = self._create(
            self._messages(prompt, system_prompt),
            temperature,
            max_tokens,
            response_format={"type": "json_object"}
        )
        return self._parse_json(content)


class OpenRouterClient(OpenAIClient):
    """
    OpenRouter client.

    OpenRouter speaks the OpenAI chat-completions protocol, so this is the
    OpenAI client pointed at a different base URL with attribution headers.
    """

    provider = "openrouter"
    api_key_env = "OPENROUTER_API_KEY"
    default_model = "google/gemini-3-flash-preview"
    base_url = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        site_url: str = "https://upsc-prep-app.com",
        site_name: str = "UPSC Prep App"
    ):
        self.site_url = site_url
        self.site_name = site_name
        super().__init__(api_key=api_key, model=model)

    def _client_kwargs(self) -> dict:
        return {
            "base_url": self.base_url,
            "default_headers": {
                "HTTP-Referer": self.site_url,
                "X-Title": self.site_name,
            },
        }


class AnthropicClient(BaseLLMClient):
    """Anthropic API client."""

    provider = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None
    ):
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise LLMClientError(
                "Anthropic API key not provided (set ANTHROPIC_API_KEY)",
                provider="anthropic"
            )
        self.model = model or "claude-sonnet-4-20250514"

        try:
            import anthropic
        except ImportError:
            raise LLMClientError(
                "anthropic package not installed. Run: pip install anthropic",
                provider="anthropic"
            )
        self.client = anthropic.Anthropic(api_key=self.api_key)

    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """Send prompt to Anthropic and return response."""
        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens or 4096,
            "messages": [{"role": "user", "content": prompt}]
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = self.client.messages.create(**kwargs)
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise LLMClientError(
                f"Anthropic API call failed: {str(e)}",
                provider="anthropic",
                details={"error": str(e)}
            )

        # Text blocks only; a reply can open with a non-text block
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )


class LLMClient:
    """
    Factory class for creating LLM clients with provider switch.

    Usage:
        # Using environment variable LLM_PROVIDER
        client = LLMClient.create()

        # Explicit provider
        client = LLMClient.create(provider=LLMProvider.OPENROUTER)
    """

    _CLIENTS = {
        LLMProvider.OPENAI: OpenAIClient,
        LLMProvider.ANTHROPIC: AnthropicClient,
        LLMProvider.OPENROUTER: OpenRouterClient,
    }

    @staticmethod
    def create(
        provider: Optional[LLMProvider] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None
    ) -> BaseLLMClient:
        """
        Create an LLM client for the specified provider.

        Args:
            provider: LLM provider (defaults to env var LLM_PROVIDER or 'openai')
            api_key: API key (defaults to provider-specific env var)
            model: Model name (defaults to provider-specific default)

        Returns:
            Configured LLM client
        """
        # Resolve provider: explicit arg > env var > default to OpenAI
        if provider is None:
            provider_str = os.getenv("LLM_PROVIDER", "openai").lower()
            try:
                provider = LLMProvider(provider_str)
            except ValueError:
                logger.warning(
                    f"Unknown LLM_PROVIDER '{provider_str}', defaulting to openai"
                )
                provider = LLMProvider.OPENAI

        logger.info(f"Creating LLM client for provider: {provider.value}")

        client_cls = LLMClient._CLIENTS.get(provider)
        if client_cls is None:
            raise LLMClientError(
                f"Unsupported provider: {provider}",
                provider=str(provider)
            )
        return client_cls(api_key=api_key, model=model)

# tasks/ai_engine/client.py
"""
Model Client
============

The only place that talks to the generative-AI provider.

``ModelClient`` is the capability the orchestrator depends on: a single
``complete(system_instruction, prompt, params)`` call returning a
``Completion`` or raising a ``ModelClientError``. ``OpenAIModelClient`` is
the production implementation on top of the OpenAI Chat Completions API;
tests substitute their own implementation.

Error Classes:
--------------
- ProviderAuthError:  the provider rejected the credential
- ProviderQuotaError: quota or rate limit exhausted
- ModelClientError:   any other provider or network failure (timeouts,
                      connection errors, 5xx, bad requests)

The client makes exactly one attempt per call; the SDK's own retry loop is
disabled.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    OpenAI,
    OpenAIError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


QUOTA_ERROR_CODES = {"insufficient_quota", "rate_limit_exceeded"}
AUTH_ERROR_CODES = {"invalid_api_key"}


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerationParams:
    """Per-intent sampling settings."""

    max_tokens: int
    temperature: float


@dataclass(frozen=True)
class UsageMetrics:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
            "totalTokens": self.total_tokens,
        }


@dataclass(frozen=True)
class Completion:
    text: str
    usage: UsageMetrics


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ModelClientError(Exception):
    """Raised when a completion could not be obtained from the provider."""

    def __init__(self, message: str, provider_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider_message = provider_message or message


class ProviderAuthError(ModelClientError):
    pass


class ProviderQuotaError(ModelClientError):
    pass


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class ModelClient(ABC):
    @abstractmethod
    def complete(
        self,
        system_instruction: str,
        prompt: str,
        params: GenerationParams,
    ) -> Completion:
        """Return the provider's completion for one system+user message pair."""


# ---------------------------------------------------------------------------
# OpenAI implementation
# ---------------------------------------------------------------------------


class OpenAIModelClient(ModelClient):
    """
    ModelClient backed by the OpenAI Chat Completions API.

    The SDK client is created lazily on the first call so that building
    this object never opens a connection or validates the key.

    Attributes:
        model (str): Chat model identifier.
        timeout (float): Per-call timeout in seconds.
    """

    DEFAULT_MODEL: str = "gpt-4o-mini"
    DEFAULT_TIMEOUT: float = 30.0

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        **client_kwargs: Any,
    ) -> None:
        self.api_key = api_key
        self.model: str = model or self.DEFAULT_MODEL
        self.timeout: float = timeout or self.DEFAULT_TIMEOUT
        self._client_kwargs: Dict[str, Any] = client_kwargs
        self._client: Optional[OpenAI] = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
                **self._client_kwargs,
            )
        return self._client

    def complete(
        self,
        system_instruction: str,
        prompt: str,
        params: GenerationParams,
    ) -> Completion:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": prompt},
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=params.max_tokens,
                temperature=params.temperature,
                timeout=self.timeout,
            )

        except AuthenticationError as e:
            logger.error(f"OpenAI authentication failed: {e}")
            raise ProviderAuthError("Provider rejected the API key", str(e)) from e

        except RateLimitError as e:
            logger.warning(f"OpenAI quota or rate limit exceeded: {e}")
            raise ProviderQuotaError("Provider quota exceeded", str(e)) from e

        except APITimeoutError as e:
            logger.warning(f"OpenAI API timeout: {e}")
            raise ModelClientError("Provider request timed out", str(e)) from e

        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            raise ModelClientError("Could not connect to provider", str(e)) from e

        except APIStatusError as e:
            code = getattr(e, "code", None)
            if code in QUOTA_ERROR_CODES:
                logger.warning(f"OpenAI quota error ({e.status_code}): {e}")
                raise ProviderQuotaError("Provider quota exceeded", str(e)) from e
            if code in AUTH_ERROR_CODES:
                logger.error(f"OpenAI credential error ({e.status_code}): {e}")
                raise ProviderAuthError("Provider rejected the API key", str(e)) from e
            logger.error(f"OpenAI API status error: {e.status_code} - {e}")
            raise ModelClientError(
                f"Provider error (status {e.status_code})", str(e)
            ) from e

        except OpenAIError as e:
            logger.error(f"OpenAI client error: {e}")
            raise ModelClientError("Provider call failed", str(e)) from e

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""

        logger.debug(f"OpenAIModelClient: raw response: {text[:200]}")

        return Completion(text=text, usage=self._usage_from(response))

    @staticmethod
    def _usage_from(response: Any) -> UsageMetrics:
        usage = getattr(response, "usage", None)
        if usage is None:
            return UsageMetrics()
        return UsageMetrics(
            prompt_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
            completion_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
            total_tokens=int(getattr(usage, "total_tokens", 0) or 0),
        )

"""Generative model collaborator backed by the OpenAI chat completions API."""

import logging
from typing import AsyncIterator, Dict, List, Optional, Protocol

import httpx
import openai
from openai import AsyncOpenAI

from jobchat.config.models import LLMConfig

from .exceptions import GenerativeCallError

logger = logging.getLogger(__name__)

Messages = List[Dict[str, str]]


class TextGenerator(Protocol):
    """What the composer needs from a generative model."""

    async def complete(self, messages: Messages) -> str:
        ...

    def stream(self, messages: Messages) -> AsyncIterator[str]:
        ...


def _classify(exc: openai.OpenAIError) -> str:
    if isinstance(exc, openai.APITimeoutError):
        return "timeout"
    if isinstance(exc, openai.APIConnectionError):
        return "connection"
    if isinstance(exc, openai.AuthenticationError):
        return "authentication"
    if isinstance(exc, openai.RateLimitError):
        return "rate_limited"
    if isinstance(exc, openai.APIStatusError):
        return f"http_{exc.status_code}"
    return type(exc).__name__


class OpenAIGenerator:
    """Chat-completion client with one-shot and incremental modes.

    Every OpenAI SDK failure is re-raised as GenerativeCallError. So are raw
    httpx transport errors, which the SDK lets through while a stream is read.
    """

    def __init__(
        self,
        api_key: str,
        settings: Optional[LLMConfig] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.settings = settings or LLMConfig()
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=self.settings.timeout_seconds,
            max_retries=self.settings.max_retries,
        )

    async def complete(self, messages: Messages) -> str:
        """Resolve the whole reply at once."""
        try:
            completion = await self.client.chat.completions.create(
                model=self.settings.model,
                temperature=self.settings.temperature,
                messages=messages,
            )
        except openai.OpenAIError as e:
            raise GenerativeCallError(f"Chat completion failed: {e}", _classify(e)) from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def stream(self, messages: Messages) -> AsyncIterator[str]:
        """Yield reply text pieces in arrival order.

        Closing this generator early (e.g. the caller disconnected) closes the
        upstream HTTP stream as well.
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.model,
                temperature=self.settings.temperature,
                messages=messages,
                stream=True,
            )
        except openai.OpenAIError as e:
            raise GenerativeCallError(f"Chat completion stream failed to start: {e}", _classify(e)) from e

        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                piece = chunk.choices[0].delta.content
                if piece:
                    yield piece
        except openai.OpenAIError as e:
            raise GenerativeCallError(f"Chat completion stream broke off: {e}", _classify(e)) from e
        except httpx.HTTPError as e:
            raise GenerativeCallError(f"Chat completion stream broke off: {e}", "connection") from e
        finally:
            await response.close()

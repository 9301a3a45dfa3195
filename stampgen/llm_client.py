"""
Client for the language model consulted when a phrase can't be parsed locally.

Talks to any OpenAI-compatible chat completions API (Fanar by default).
"""

import logging

import openai
from openai import AsyncOpenAI

from stampgen.config import Settings
from stampgen.errors import UpstreamError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Sends a single prompt to the model and returns the reply text."""

    def __init__(self, api_key, base_url, model, timeout=30.0):
        self.model = model
        # One bounded request per resolution, no automatic retries
        self.client = AsyncOpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=64,
                temperature=0,
            )
        except openai.APITimeoutError as e:
            logger.error(f"Language model request timed out: {e}")
            raise UpstreamError("The language model did not respond in time") from e
        except openai.APIError as e:
            logger.error(f"Language model request failed: {e}")
            raise UpstreamError(f"Error calling the language model: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.error(f"Unexpected response format from the language model: {response!r}")
            raise UpstreamError("Unexpected response format from the language model") from e
        if not isinstance(content, str) or not content.strip():
            logger.error(f"Language model returned no text: {response!r}")
            raise UpstreamError("Unexpected response format from the language model")
        return content


def client_from_settings(settings: Settings):
    """Returns a CompletionClient, or None when no API key is configured."""
    if not settings.api_key:
        return None
    return CompletionClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        model=settings.model,
        timeout=settings.timeout,
    )

"""
Model transports: the single network call behind the generation client.
"""
import logging
from collections.abc import Callable
from typing import Protocol

import anthropic

from unitforge.generation.profiles import GenerationProfile
from unitforge.support.exceptions import QuotaError, TransientRequestError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that specializes in writing test code. "
    "Generate high quality unit tests with proper mocking and test coverage."
)


class Transport(Protocol):
    def send(self, prompt: str, profile: GenerationProfile) -> str:
        """Return the model's text for ``prompt``."""
        ...


TransportFactory = Callable[[str, str, float], Transport]


def _retry_after(error: anthropic.APIStatusError) -> float | None:
    value = error.response.headers.get("retry-after") if error.response else None
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class AnthropicTransport:
    """Calls the Anthropic Messages API once per send(); retries live in the client."""

    def __init__(self, api_key: str, model: str, timeout: float):
        self.model = model
        self._client = anthropic.Anthropic(
            api_key=api_key, timeout=timeout, max_retries=0
        )

    def send(self, prompt: str, profile: GenerationProfile) -> str:
        try:
            message = self._client.messages.create(
                model=self.model,
                max_tokens=profile.max_output_tokens,
                temperature=profile.temperature,
                top_k=profile.top_k,
                top_p=profile.top_p,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.RateLimitError as e:
            raise QuotaError(f"Anthropic API error: {e}", retry_after=_retry_after(e)) from e
        except anthropic.APIError as e:
            raise TransientRequestError(f"Anthropic API error: {e}") from e

        return "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )

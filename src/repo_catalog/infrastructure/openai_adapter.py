"""OpenAI adapter — implements the LlmGateway port."""

from __future__ import annotations

import logging

from openai import APIConnectionError, AsyncOpenAI, AuthenticationError, RateLimitError

from repo_catalog.domain.exceptions import LlmError

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    """Concrete ``LlmGateway`` backed by an OpenAI-compatible chat-completions API.

    Pointing ``base_url`` at Gemini's OpenAI-compatible endpoint lets the same
    adapter drive Google models.  SDK-level retries are disabled: retrying is
    the caller's :class:`RetryPolicy` concern.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self._model = model

    async def complete(self, prompt: str) -> str:
        """Send a single user prompt and return the completion text."""
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
            )

            choice = response.choices[0]
            content = choice.message.content

            if not content:
                raise LlmError("LLM returned an empty response.")

            return content

        except AuthenticationError as exc:
            raise LlmError(
                "Invalid API key. "
                "Set a valid key in the OPENAI_API_KEY environment variable."
            ) from exc

        except RateLimitError as exc:
            detail = str(exc)
            logger.warning("RateLimitError from %s: %s", self._model, detail)
            raise LlmError(f"Rate limit / quota error: {detail}") from exc

        except APIConnectionError as exc:
            raise LlmError(f"Could not reach the LLM endpoint: {exc}") from exc

        except LlmError:
            raise

        except Exception as exc:
            raise LlmError(f"LLM call failed: {exc}") from exc

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()

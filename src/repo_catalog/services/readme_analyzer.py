"""README analyzer — turns README text into a summary and a tech stack.

One prompt, one JSON object with two keys.  Transport failures and
unparseable answers are retried through the injected :class:`RetryPolicy`;
a parseable answer that merely lacks a key is accepted with a placeholder.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from repo_catalog.domain.entities import (
    SUMMARY_NOT_GENERATED,
    TECH_STACK_NOT_IDENTIFIED,
    RepoAnalysis,
)
from repo_catalog.domain.exceptions import (
    LlmError,
    MalformedResponseError,
    RetryExhaustedError,
)
from repo_catalog.domain.ports.llm_gateway import LlmGateway
from repo_catalog.services.readme_preprocessor import prepare_readme
from repo_catalog.services.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

# ── Prompt template ─────────────────────────────────────────────────────────

PROMPT_TEMPLATE = """\
Analyze the following README text. Provide your response as a JSON object \
with two keys: "summary" and "tech_stack".
1.  "summary": A concise, one or two-sentence summary of the project's purpose.
2.  "tech_stack": A comma-separated string listing the main technologies, \
languages, or frameworks mentioned (e.g., "Node.js, React, AWS S3, Docker").

README Text:
---
{readme}
---
"""

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def build_prompt(readme_text: str) -> str:
    """Embed *readme_text* in the fixed instruction prompt."""
    return PROMPT_TEMPLATE.format(readme=readme_text)


def parse_response(raw: str) -> RepoAnalysis:
    """Parse the LLM answer into a :class:`RepoAnalysis`.

    Markdown code fences are stripped first.  Raises
    :class:`MalformedResponseError` when the text is not a JSON object.
    """
    text = _FENCE_RE.sub("", raw).strip()

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"LLM returned invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"LLM returned JSON {type(data).__name__}, expected an object."
        )

    return RepoAnalysis(
        summary=_text_field(data.get("summary")) or SUMMARY_NOT_GENERATED,
        tech_stack=_text_field(data.get("tech_stack")) or TECH_STACK_NOT_IDENTIFIED,
    )


def _text_field(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value if item)
    return str(value).strip()


class ReadmeAnalyzer:
    """Summarise README text with an LLM, retrying transient failures.

    Parameters
    ----------
    llm_gateway:
        Adapter that can send prompts to an LLM.
    retry_policy:
        Attempt budget and backoff schedule for each README.
    max_readme_tokens:
        Truncate README text beyond this many tokens; ``None`` disables it.
    """

    def __init__(
        self,
        llm_gateway: LlmGateway,
        retry_policy: RetryPolicy | None = None,
        max_readme_tokens: int | None = None,
    ) -> None:
        self._llm = llm_gateway
        self._retry = retry_policy or RetryPolicy(retry_on=(LlmError,))
        self._max_tokens = max_readme_tokens

    async def analyze(self, readme_text: str | None, *, name: str = "README") -> RepoAnalysis:
        """Return the analysis for *readme_text*; never raises for LLM trouble."""
        if not readme_text or not readme_text.strip():
            return RepoAnalysis.empty_readme()

        prepared = prepare_readme(readme_text, self._max_tokens)
        if prepared.truncated:
            logger.info("README of %s truncated to %d tokens", name, self._max_tokens)
        prompt = build_prompt(prepared.text)

        async def _attempt() -> RepoAnalysis:
            raw = await self._llm.complete(prompt)
            return parse_response(raw)

        try:
            return await self._retry.run(_attempt, description=f"AI analysis of {name}")
        except RetryExhaustedError:
            logger.error("Giving up on AI analysis of %s", name)
            return RepoAnalysis.failed()

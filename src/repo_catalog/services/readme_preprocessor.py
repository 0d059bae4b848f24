"""README preprocessing — redact secrets and cap length before prompting.

Private READMEs often carry sample credentials; they are replaced with
``[REDACTED]`` before anything leaves the process.  Very long READMEs are cut
to a token budget measured with ``tiktoken`` so the prompt fits the model.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import tiktoken

logger = logging.getLogger(__name__)

_ENCODING_NAME = "cl100k_base"
_REDACTION = "[REDACTED]"
_TRUNCATION_MARKER = "\n[… README truncated]"

_SECRET_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"AKIA[0-9A-Z]{16}"),
    re.compile(r"gh[pousr]_[A-Za-z0-9_]{36,}"),
    re.compile(r"sk-[A-Za-z0-9_\-]{20,}"),
    re.compile(r"AIza[0-9A-Za-z_\-]{35}"),
    re.compile(
        r"(?:api[_\-]?key|secret[_\-]?key|access[_\-]?token|password)"
        r"""\s*[:=]\s*['"]?[^\s'"]{8,}['"]?""",
        re.IGNORECASE,
    ),
    re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),
    re.compile(r"(?:postgres(?:ql)?|mysql|mongodb)(?:\+\w+)?://\S+:\S+@\S+", re.IGNORECASE),
]

_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder  # noqa: PLW0603
    if _encoder is None:
        _encoder = tiktoken.get_encoding(_ENCODING_NAME)
    return _encoder


@dataclass(frozen=True, slots=True)
class PreparedReadme:
    text: str
    redactions: int
    truncated: bool


def redact_secrets(text: str) -> tuple[str, int]:
    """Replace credential-looking substrings; return the text and hit count."""
    count = 0
    for pattern in _SECRET_PATTERNS:
        text, hits = pattern.subn(_REDACTION, text)
        count += hits
    return text, count


def truncate_to_tokens(text: str, max_tokens: int) -> tuple[str, bool]:
    """Cut *text* to *max_tokens*, preferring a line boundary."""
    tokens = _get_encoder().encode(text)
    if len(tokens) <= max_tokens:
        return text, False

    cut = _get_encoder().decode(tokens[:max_tokens])
    last_nl = cut.rfind("\n")
    if last_nl > len(cut) // 2:
        cut = cut[: last_nl + 1]
    return cut + _TRUNCATION_MARKER, True


def prepare_readme(text: str, max_tokens: int | None = None) -> PreparedReadme:
    """Redact, then truncate when *max_tokens* is given."""
    clean, redactions = redact_secrets(text)
    truncated = False
    if max_tokens is not None:
        clean, truncated = truncate_to_tokens(clean, max_tokens)
    if redactions:
        logger.warning("Redacted %d potential secret(s) from README", redactions)
    return PreparedReadme(text=clean, redactions=redactions, truncated=truncated)

"""Thread title summarization: derive a short display name from a first chat message."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 60
FALLBACK_TITLE = "Thread"
ELLIPSIS = "…"

_LINE_BREAK = re.compile(r"\r?\n")
_HEADING = re.compile(r"^#+\s*")
_URL = re.compile(r"[a-z][a-z0-9+.\-]*://\S+", re.IGNORECASE)
_PROMPT_PREFIX = re.compile(
    r"^\s*(?:please\s+)?"
    r"(?:write|explain|describe|create|implement|how\s+(?:do|to)|what\s+is|can\s+you"
    r"|help\s+me|summarize|draft|generate|build|show\s+me|give\s+me)\b[:,\-]?\s*",
    re.IGNORECASE,
)
_PLEASE_ONLY = re.compile(r"^\s*please\b[:,\-]?\s*", re.IGNORECASE)
_SENTENCE_END = re.compile(r"[.!?]")
_WHITESPACE = re.compile(r"\s+")
_LEADING_DECORATION = re.compile(r"^[\-–•.\s]+")
_TRAILING_PUNCTUATION = re.compile(r"[\s:;,\-]+$")


def truncate(text: str, length: int = MAX_TITLE_LENGTH) -> str:
    """Cut text to at most ``length`` characters, ellipsis included."""
    if len(text) <= length:
        return text
    return text[: length - len(ELLIPSIS)].rstrip() + ELLIPSIS


def _strip_prompt_prefix(text: str) -> str:
    stripped, count = _PROMPT_PREFIX.subn("", text, count=1)
    if count:
        return stripped
    return _PLEASE_ONLY.sub("", text, count=1)


def _summarize(text: str) -> str:
    text = _LINE_BREAK.split(text.strip())[0]
    text = _HEADING.sub("", text)
    text = text.replace("`", "")
    text = _URL.sub("", text)
    text = _strip_prompt_prefix(text)

    # Only cut at a sentence end past the first few characters ("e.g.", "Dr.")
    match = _SENTENCE_END.search(text)
    if match and match.start() > 8:
        text = text[: match.start() + 1]

    text = _WHITESPACE.sub(" ", text).strip()
    text = _LEADING_DECORATION.sub("", text)
    text = _TRAILING_PUNCTUATION.sub("", text)
    if text:
        text = text[0].upper() + text[1:]
    if not text:
        return FALLBACK_TITLE
    return truncate(text)


def summarize_title(raw: str | None) -> str:
    """Return a title of at most 60 characters for ``raw``. Never raises."""
    if not raw:
        return FALLBACK_TITLE
    try:
        return _summarize(str(raw))
    except Exception:
        logger.warning("Title summarization failed, falling back to raw text", exc_info=True)
        return truncate(str(raw) or FALLBACK_TITLE)

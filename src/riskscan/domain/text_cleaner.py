from __future__ import annotations

import re

NO_TEXT_SENTINEL = "(no text extracted)"

_CLOCK_TIME_RE = re.compile(
    r"\b(?:[01]?\d|2[0-3]):[0-5]\d(?::[0-5]\d)?(?:\s?[AaPp]\.?[Mm]\.?)?(?!\w)"
)

# Only ever shown by the messaging UI.
_STRONG_TOKENS = (
    r"imessage",
    r"text\s+message",
    r"sms",
    r"mms",
    r"rcs",
    r"whatsapp",
    r"messenger",
    r"telegram",
    r"instagram",
    r"snapchat",
    r"delivered",
    r"edited",
    r"typing",
    r"online",
    r"last\s+seen",
    r"just\s+now",
    r"today",
    r"yesterday",
    r"(?:mon|tues|wednes|thurs|fri|satur|sun)day",
)
# Also plausible one-word messages; chrome only beside a time or a strong token.
_WEAK_TOKENS = (
    r"signal",
    r"read",
    r"seen",
    r"sent",
    r"now",
    r"mon|tue|wed|thu|fri|sat|sun",
    r"at",
)
_CHROME_RUN_RE = re.compile(
    r"^\s*(?:(?:(?:"
    + "|".join(_STRONG_TOKENS + _WEAK_TOKENS)
    + r")\b|[·•|,.:\-])\s*)+$",
    re.IGNORECASE,
)
_STRONG_TOKEN_RE = re.compile(r"\b(?:" + "|".join(_STRONG_TOKENS) + r")\b", re.IGNORECASE)
_EXCESS_BREAKS_RE = re.compile(r"\n{3,}")


def clean_text(text: str | None) -> str:
    """Strip messaging UI chrome from OCR output; never returns an empty string."""

    if not text:
        return NO_TEXT_SENTINEL
    lines = []
    for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        without_time = _CLOCK_TIME_RE.sub("", line)
        if _is_chrome(without_time, had_time=without_time != line):
            # Keep a blank line so message grouping survives.
            lines.append("")
            continue
        lines.append(without_time.rstrip())
    cleaned = _EXCESS_BREAKS_RE.sub("\n\n", "\n".join(lines)).strip()
    return cleaned or NO_TEXT_SENTINEL


def _is_chrome(line: str, had_time: bool) -> bool:
    if not _CHROME_RUN_RE.match(line):
        return False
    return had_time or bool(_STRONG_TOKEN_RE.search(line))


def join_texts(texts: list[str]) -> str:
    return "\n\n".join(text for text in texts if text)

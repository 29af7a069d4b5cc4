"""Pick e-mail addresses and phone numbers out of extracted text."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}")

# Optional +country code, then digit groups separated by space, dot, dash or
# parentheses.  At least 7 digits in total are required (checked below).
_PHONE_RE = re.compile(r"(?<![\w+])\+?\(?\d[\d\s().\-/]{5,}\d(?!\w)")

_MIN_PHONE_DIGITS = 7
_MAX_PHONE_DIGITS = 15


def _unique(items: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def find_emails(text: str) -> List[str]:
    """Return the e-mail addresses in *text*, deduplicated, in order."""
    return _unique(m.group(0) for m in _EMAIL_RE.finditer(text))


def find_phone_numbers(text: str) -> List[str]:
    """Return the phone-number-like runs in *text*, deduplicated, in order."""
    matches = []
    for m in _PHONE_RE.finditer(text):
        candidate = m.group(0).strip()
        digits = sum(ch.isdigit() for ch in candidate)
        if _MIN_PHONE_DIGITS <= digits <= _MAX_PHONE_DIGITS:
            matches.append(candidate)
    return _unique(matches)


def categorize(
    segments: Iterable[object],
    *,
    emails: bool = False,
    phones: bool = False,
) -> Dict[str, List[str]]:
    """Group the content of *segments* by category.

    Always returns a ``"text"`` bucket with the segments themselves; adds
    ``"email"`` and/or ``"tel"`` buckets when requested.  Matching runs over
    the joined text so an address split by an inline tag is still found.
    """
    texts = [str(segment) for segment in segments]
    joined = "".join(texts)

    result: Dict[str, List[str]] = {}
    if emails:
        result["email"] = find_emails(joined)
    if phones:
        result["tel"] = find_phone_numbers(joined)
    result["text"] = texts
    return result

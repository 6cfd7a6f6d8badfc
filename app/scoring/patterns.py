"""Regex heuristics used by the format, section and experience scorers.

Each predicate is independent so its calibration can be tested on its own.
"""

from __future__ import annotations

import re

from app.normalize.utils import is_bullet_like, normalize_line

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

PHONE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # North American formats
    re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}"),
    re.compile(r"\+?1?[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}"),
    # International
    re.compile(r"\+\d{1,3}[-.\s]?\d{6,14}"),
    re.compile(r"\+\d{1,3}(?:[\s.-]\d{2,4}){2,4}"),
)

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"\b{_MONTHS}\.?\s+\d{{4}}\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}[/\-]\d{4}\b"),
    re.compile(r"\b(?:19[89]\d|20[0-4]\d)\s*[-–—]\s*(?:19[89]\d|20[0-4]\d|present|current|now)\b", re.IGNORECASE),
    re.compile(r"[-–—]\s*(?:present|current|now)\b", re.IGNORECASE),
)

SECTION_HEADER_PATTERNS: dict[str, re.Pattern[str]] = {
    "summary": re.compile(r"^\s*(?:professional\s+|career\s+)?(?:summary|profile)\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
    "objective": re.compile(r"^\s*(?:career\s+)?objective\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
    "skills": re.compile(r"^\s*(?:technical\s+|core\s+|key\s+)?(?:skills|competencies)\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
    "experience": re.compile(
        r"^\s*(?:(?:work|professional|relevant)\s+experience|experience|employment(?:\s+history)?|work\s+history)\s*:?\s*$",
        re.IGNORECASE | re.MULTILINE,
    ),
    "education": re.compile(r"^\s*education\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
    "certifications": re.compile(r"^\s*(?:licenses\s+(?:and|&)\s+)?certifications?\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
    "projects": re.compile(r"^\s*(?:personal\s+|academic\s+)?projects?(?:\s+experience)?\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
    "awards": re.compile(r"^\s*awards?(?:\s+(?:and|&)\s+achievements?)?\s*:?\s*$", re.IGNORECASE | re.MULTILINE),
}

MIN_BULLET_LINE_CHARS = 3


def has_email(text: str) -> bool:
    return bool(text) and EMAIL_PATTERN.search(text) is not None


def has_phone(text: str) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in PHONE_PATTERNS)


def count_date_matches(text: str) -> int:
    if not text:
        return 0
    return sum(len(pattern.findall(text)) for pattern in DATE_PATTERNS)


def has_date_patterns(text: str, minimum: int = 2) -> bool:
    return count_date_matches(text) >= minimum


def count_section_headers(text: str) -> int:
    """Number of distinct standard sections announced by a heading on its own line."""
    if not text:
        return 0
    return sum(1 for pattern in SECTION_HEADER_PATTERNS.values() if pattern.search(text))


def has_section_headers(text: str, minimum: int = 2) -> bool:
    return count_section_headers(text) >= minimum


def count_bullet_lines(text: str) -> int:
    if not text:
        return 0
    count = 0
    for line in text.splitlines():
        if is_bullet_like(line) and len(normalize_line(line)) > MIN_BULLET_LINE_CHARS:
            count += 1
    return count


def longest_bullet_run(text: str) -> int:
    """Most bullet lines in a row; blank lines do not break a run, prose lines do."""
    if not text:
        return 0
    longest = current = 0
    for line in text.splitlines():
        if not line.strip():
            continue
        if is_bullet_like(line) and len(normalize_line(line)) > MIN_BULLET_LINE_CHARS:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def has_bullet_structure(text: str, minimum: int = 4, min_run: int = 2) -> bool:
    """Enough bullet lines overall, with at least one run of adjacent bullets."""
    return count_bullet_lines(text) >= minimum and longest_bullet_run(text) >= min_run


METRIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    # Percentages
    re.compile(r"\d+\.?\d*\s*%"),
    re.compile(r"\d+\.?\d*\s*percent", re.IGNORECASE),
    # Currency
    re.compile(r"\$[\d,]+(?:\.\d{2})?(?:\s*[KMBkmb])?"),
    re.compile(r"\d[\d,]*(?:\.\d{2})?\s*(?:dollars?|USD)", re.IGNORECASE),
    # Multipliers
    re.compile(r"\d+\.?\d*[xX]\s+(?:increase|improvement|growth|faster|more)", re.IGNORECASE),
    # Counts with a unit
    re.compile(r"\d+\+?\s*(?:users?|customers?|clients?|employees?|team\s*members?)", re.IGNORECASE),
    re.compile(r"\d+\+?\s*(?:projects?|applications?|systems?|features?)", re.IGNORECASE),
    re.compile(r"\d+\+?\s*(?:hours?|days?|weeks?|months?|years?)", re.IGNORECASE),
    # Rankings
    re.compile(r"(?:\btop|#)\s*\d+", re.IGNORECASE),
    re.compile(r"\d+(?:st|nd|rd|th)\s+(?:place|rank|position)", re.IGNORECASE),
    re.compile(r"(?:increased|decreased|reduced|improved|grew|saved)\s+(?:by\s+)?\d+", re.IGNORECASE),
)

# Coarse signals for text that has no recognisable bullets.
METRIC_SIGNALS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d+%"),
    re.compile(r"\$[\d,]+"),
    re.compile(r"\d+\s*(?:users?|customers?|clients?)", re.IGNORECASE),
    re.compile(r"\d+x\s", re.IGNORECASE),
)


def has_metric(text: str) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in METRIC_PATTERNS)


def count_metric_signals(text: str) -> int:
    """How many kinds of quantified result appear anywhere in ``text``."""
    if not text:
        return 0
    return sum(1 for pattern in METRIC_SIGNALS if pattern.search(text))

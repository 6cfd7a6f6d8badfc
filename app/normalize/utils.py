from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►▸-–—*·>"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9\+#]*")

_SECTION_HEADINGS: dict[str, tuple[str, ...]] = {
    "summary": (
        "summary",
        "professional summary",
        "career summary",
        "profile",
        "professional profile",
        "objective",
        "career objective",
    ),
    "skills": (
        "skills",
        "technical skills",
        "core skills",
        "key skills",
        "core competencies",
        "competencies",
        "technologies",
    ),
    "experience": (
        "experience",
        "work experience",
        "professional experience",
        "relevant experience",
        "employment",
        "employment history",
        "work history",
    ),
    "education": (
        "education",
        "academic background",
        "education and training",
    ),
    "projects": (
        "projects",
        "project",
        "project experience",
        "personal projects",
        "academic projects",
        "technical projects",
        "selected projects",
    ),
    "certifications": (
        "certifications",
        "certification",
        "licenses and certifications",
        "certificates",
    ),
}
_HEADING_LOOKUP: dict[str, str] = {
    heading: section for section, headings in _SECTION_HEADINGS.items() for heading in headings
}


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def heading_text(line: str) -> str:
    """Lowercased heading candidate with trailing colon and decoration removed."""
    stripped = normalize_line(line).lower()
    stripped = stripped.strip("=_#*:|- ")
    return stripped.replace("&", "and")


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def section_for_heading(line: str) -> str | None:
    if len(line) > 60:
        return None
    return _HEADING_LOOKUP.get(heading_text(line))


def tokenize(text: str) -> list[str]:
    return _TOKEN_PATTERN.findall((text or "").lower())


def term_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive pattern for ``term`` bounded by non-alphanumerics."""
    escaped = re.escape(term.strip())
    return re.compile(rf"(?<![A-Za-z0-9]){escaped}(?![A-Za-z0-9])", re.IGNORECASE)


def find_term(text: str, term: str) -> str | None:
    """Return the occurrence of ``term`` in ``text`` as written there, or None."""
    if not text or not term or not term.strip():
        return None
    match = term_pattern(term).search(text)
    if match is None:
        return None
    return match.group(0)


def line_containing(text: str, start: int) -> str:
    line_start = text.rfind("\n", 0, start) + 1
    line_end = text.find("\n", start)
    if line_end == -1:
        line_end = len(text)
    return text[line_start:line_end]

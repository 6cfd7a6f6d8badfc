from __future__ import annotations

import logging
import re
from typing import Any

from app.normalize.utils import is_bullet_like
from app.schemas.resume import ParsedSections
from app.schemas.scoring import SectionScoreResult
from app.scoring.constants import get_scoring_constants
from app.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)

_SKILLS_HEADING = re.compile(r"^\s*(?:(?:technical|core|key)\s+)?(?:skills?|competencies)\s*:?\s*$", re.IGNORECASE)
_GROUP_LABEL = re.compile(r"^\s*(?:languages?|frameworks?|libraries|tools?|technologies|databases?|platforms?|cloud)\s*:\s*", re.IGNORECASE)
_LABEL_ONLY = re.compile(r"^(?:languages?|frameworks?|libraries|tools?|technologies|databases?|platforms?|cloud)\s*:?$", re.IGNORECASE)

_SKILL_SPLITTERS: tuple[re.Pattern[str], ...] = (
    re.compile(r","),
    re.compile(r"[•●○◦▪|]"),
    re.compile(r"\n"),
    re.compile(r"[,;•●○◦▪|\n]"),
)
_VERB_LINE = re.compile(r"^[A-Z][a-z]+ed?\s")


def count_words(text: str | None) -> int:
    if not text or not text.strip():
        return 0
    return len(text.split())


def _skill_items(text: str, splitter: re.Pattern[str]) -> set[str]:
    items: set[str] = set()
    for raw in splitter.split(text):
        item = _GROUP_LABEL.sub("", raw.strip().lstrip("-*• ")).strip()
        if len(item) < 2 or _LABEL_ONLY.match(item) or _SKILLS_HEADING.match(item):
            continue
        items.add(item.lower())
    return items


def count_skill_items(text: str | None) -> int:
    """Distinct skills under the most generous of several splitting strategies."""
    if not text or not text.strip():
        return 0
    return max(len(_skill_items(text, splitter)) for splitter in _SKILL_SPLITTERS)


def count_experience_bullets(text: str | None, min_chars: int = 15) -> int:
    if not text or not text.strip():
        return 0

    seen: set[str] = set()
    for line in text.splitlines():
        if is_bullet_like(line) and len(line.strip()) > min_chars:
            seen.add(line.strip().lower())

    # Resumes pasted without markers still list one accomplishment per line.
    if len(seen) < 4:
        for line in text.splitlines():
            stripped = line.strip()
            if len(stripped) > 30 and _VERB_LINE.match(stripped):
                seen.add(stripped.lower())
    return len(seen)


def _density(count: int, target: int) -> int:
    if count <= 0 or target <= 0:
        return 0
    return round_half_up(min(100.0, count / target * 100))


def calculate_section_score(parsed: ParsedSections | dict[str, Any] | None) -> SectionScoreResult:
    """Score summary, skills and experience density against calibrated thresholds.

    The overall score is the plain mean of the three; an absent section counts as 0.
    """
    sections = ParsedSections.coerce(parsed)
    constants = get_scoring_constants().sections

    summary_words = count_words(sections.summary)
    skills_items = count_skill_items(sections.skills)
    experience_bullets = count_experience_bullets(sections.experience, constants.min_bullet_chars)

    summary_score = _density(summary_words, constants.summary_min_words)
    skills_score = _density(skills_items, constants.skills_min_items)
    experience_score = _density(experience_bullets, constants.experience_min_bullets)
    score = round_half_up((summary_score + skills_score + experience_score) / 3)

    logger.debug(
        "section_score summary=%s skills=%s experience=%s score=%s",
        summary_score,
        skills_score,
        experience_score,
        score,
    )
    return SectionScoreResult(
        score=score,
        summary_score=summary_score,
        skills_score=skills_score,
        experience_score=experience_score,
        summary_word_count=summary_words,
        skills_item_count=skills_items,
        experience_bullet_count=experience_bullets,
    )


def generate_section_action_items(result: SectionScoreResult) -> list[str]:
    constants = get_scoring_constants().sections
    items: list[str] = []

    if result.summary_score < 100:
        if result.summary_word_count == 0:
            items.append(f"Add a professional summary ({constants.summary_min_words}+ words recommended)")
        else:
            needed = constants.summary_min_words - result.summary_word_count
            items.append(f"Expand your summary by {needed} more words")

    if result.skills_score < 100:
        if result.skills_item_count == 0:
            items.append(f"Add a skills section with {constants.skills_min_items}+ relevant skills")
        else:
            needed = constants.skills_min_items - result.skills_item_count
            items.append(f"Add {needed} more skills to your skills section")

    if result.experience_score < 100:
        if result.experience_bullet_count == 0:
            items.append("Add bullet points to your experience section")
        else:
            needed = constants.experience_min_bullets - result.experience_bullet_count
            items.append(f"Add {needed} more bullet points to your experience")
    return items

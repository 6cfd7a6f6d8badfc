"""Score the quality of experience bullets.

Three signals are blended: how many bullets carry a quantified result, how many
open with a strong action verb, and how many job keywords each bullet works in.
Text without recognisable bullets still earns a reduced score from the same
signals read across the whole resume.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterable

from app.normalize.utils import find_term, section_for_heading
from app.schemas.scoring import ExperienceScoreResult
from app.scoring import patterns
from app.scoring.constants import ExperienceConstants, get_scoring_constants
from app.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)

_MARKED_LINE = re.compile(r"^\s*(?:[-–—•*▪▸►○◦◇·‣⁃✦✧◆◈■□●>]|\d+[.)])\s*(.+)$")
_ACCOMPLISHMENT_LINE = re.compile(r"^\s*([A-Z][a-z]+(?:ed|d|t)\s+.{15,})$")
_PAST_TENSE_START = re.compile(r"^[A-Z][a-z]+(?:ed|d|t|ied|ised|ized)\s")
_FIRST_WORD = re.compile(r"^([A-Za-z]+)")

_CAPS_HEADING = re.compile(r"^[A-Z\s]{3,}$")
_DATE_ONLY = re.compile(r"^[\d\s\-/]+$")
_PHONE_START = re.compile(r"^\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
_SOCIAL_START = re.compile(r"^(?:linkedin|github|twitter|portfolio)", re.IGNORECASE)
_FILLER_START = re.compile(r"^(?:the|a|an|my|our|i|we|at|in|on)\s", re.IGNORECASE)


@dataclass(frozen=True)
class _Bullet:
    text: str
    first_word: str
    has_metric: bool
    keyword_hits: int


def _first_word(text: str) -> str:
    match = _FIRST_WORD.match(text.strip())
    return match.group(1).lower() if match else ""


def _pattern_bullets(text: str) -> list[str]:
    bullets: list[str] = []
    lines = text.splitlines()
    for line in lines:
        match = _MARKED_LINE.match(line)
        if match:
            candidate = match.group(1).strip()
            if len(candidate) > 10 and candidate not in bullets:
                bullets.append(candidate)
    for line in lines:
        match = _ACCOMPLISHMENT_LINE.match(line)
        if match:
            candidate = match.group(1).strip()
            if len(candidate) > 15 and candidate not in bullets:
                bullets.append(candidate)
    return bullets


def _is_non_bullet(line: str) -> bool:
    return bool(
        _CAPS_HEADING.match(line)
        or _DATE_ONLY.match(line)
        or patterns.EMAIL_PATTERN.match(line)
        or _PHONE_START.match(line)
        or _SOCIAL_START.match(line)
        or section_for_heading(line)
    )


def _line_bullets(text: str, constants: ExperienceConstants) -> list[str]:
    """One accomplishment per line, for resumes pasted without bullet markers."""
    verbs = constants.strong_verbs | constants.weak_verbs
    bullets: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if len(line) < 15 or _is_non_bullet(line):
            continue
        starts_with_verb = _first_word(line) in verbs or bool(_PAST_TENSE_START.match(line))
        accomplishment = starts_with_verb and len(line.split()) >= 4
        descriptive = len(line) >= 25 and not _FILLER_START.match(line)
        if (accomplishment or descriptive) and line not in bullets:
            bullets.append(line)
    return bullets


def extract_experience_bullets(resume_text: str | None) -> list[str]:
    """Bullet texts from marker and accomplishment lines, falling back to plain lines."""
    text = resume_text or ""
    constants = get_scoring_constants().experience
    marked = _pattern_bullets(text)
    if len(marked) >= constants.min_pattern_bullets:
        return marked

    lines = _line_bullets(text, constants)
    if len(lines) > len(marked):
        return lines
    return marked + [line for line in lines if line not in marked]


def _unique_keywords(keywords: Iterable[str] | None) -> list[str]:
    unique: list[str] = []
    seen: set[str] = set()
    for keyword in keywords or []:
        key = (keyword or "").strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique.append(keyword.strip())
    return unique


def _make_bullet(text: str, keywords: list[str]) -> _Bullet:
    return _Bullet(
        text=text,
        first_word=_first_word(text),
        has_metric=patterns.has_metric(text),
        keyword_hits=sum(1 for keyword in keywords if find_term(text, keyword)),
    )


def _tiered(rate: float, half: float, full: float) -> float:
    """0 to 50 up to ``half``, 50 to 100 up to ``full``, then 100."""
    if rate >= full:
        return 100.0
    if rate >= half:
        return 50.0 + (rate - half) / (full - half) * 50.0
    return rate / half * 50.0 if half > 0 else 0.0


def _weighted(constants: ExperienceConstants, quantification: float, verbs: float, density: float) -> int:
    weights = constants.weights
    return round_half_up(
        quantification * weights["quantification"]
        + verbs * weights["action_verbs"]
        + density * weights["keyword_density"]
    )


def _baseline_score(text: str, keywords: list[str], constants: ExperienceConstants) -> ExperienceScoreResult:
    if len(text.strip()) < constants.min_text_chars:
        return ExperienceScoreResult(
            score=0,
            quantification_score=0,
            action_verb_score=0,
            keyword_density_score=0,
            bullet_count=0,
            bullets_with_metrics=0,
            strong_verb_count=0,
            weak_verb_count=0,
        )

    baseline = constants.baseline
    strong_verbs = min(
        int(baseline["max_verbs"]),
        sum(1 for verb in sorted(constants.strong_verbs) if find_term(text, verb)),
    )
    quantification = min(baseline["component_cap"], patterns.count_metric_signals(text) * baseline["metric_points"])
    verbs = min(baseline["component_cap"], strong_verbs * baseline["verb_points"])
    if keywords:
        found = sum(1 for keyword in keywords if find_term(text, keyword))
        density = min(baseline["keyword_cap"], found / len(keywords) * baseline["keyword_scale"])
    else:
        density = baseline["no_keywords"]

    return ExperienceScoreResult(
        score=_weighted(constants, quantification, verbs, density),
        quantification_score=round_half_up(quantification),
        action_verb_score=round_half_up(verbs),
        keyword_density_score=round_half_up(density),
        bullet_count=0,
        bullets_with_metrics=0,
        strong_verb_count=strong_verbs,
        weak_verb_count=0,
    )


def calculate_experience_score(
    resume_text: str | None,
    keywords: Iterable[str] | None = None,
) -> ExperienceScoreResult:
    text = resume_text or ""
    constants = get_scoring_constants().experience
    wanted = _unique_keywords(keywords)
    bullets = [_make_bullet(item, wanted) for item in extract_experience_bullets(text)]
    if not bullets:
        return _baseline_score(text, wanted, constants)

    count = len(bullets)
    with_metrics = sum(1 for bullet in bullets if bullet.has_metric)
    strong = sum(1 for bullet in bullets if bullet.first_word in constants.strong_verbs)
    weak = sum(1 for bullet in bullets if bullet.first_word in constants.weak_verbs)

    quantification = round_half_up(
        _tiered(with_metrics / count, constants.metric_rate_half, constants.metric_rate_full)
    )
    verb_raw = _tiered(strong / count, constants.strong_verb_rate_half, constants.strong_verb_rate_full)
    weak_penalty = min(weak / count * constants.weak_verb_penalty_rate, constants.weak_verb_penalty_max)
    action_verbs = round_half_up(max(0.0, verb_raw - weak_penalty))
    density_full = constants.keywords_per_bullet_full
    keyword_density = round_half_up(
        _tiered(sum(bullet.keyword_hits for bullet in bullets) / count, density_full / 2, density_full)
    )

    score = _weighted(constants, quantification, action_verbs, keyword_density)
    logger.debug(
        "experience_score bullets=%s metrics=%s strong=%s weak=%s score=%s",
        count,
        with_metrics,
        strong,
        weak,
        score,
    )
    return ExperienceScoreResult(
        score=score,
        quantification_score=quantification,
        action_verb_score=action_verbs,
        keyword_density_score=keyword_density,
        bullet_count=count,
        bullets_with_metrics=with_metrics,
        strong_verb_count=strong,
        weak_verb_count=weak,
    )


def generate_experience_action_items(result: ExperienceScoreResult) -> list[str]:
    constants = get_scoring_constants().experience
    items: list[str] = []

    if result.quantification_score < 60:
        needed = max(1, math.ceil(result.bullet_count * constants.metric_rate_full) - result.bullets_with_metrics)
        noun = "bullet point" if needed == 1 else "bullet points"
        items.append(f"Add metrics to {needed} more {noun} (e.g., percentages, dollar amounts, team sizes)")

    if result.action_verb_score < 60 and result.weak_verb_count > 0:
        items.append(
            f"Replace {result.weak_verb_count} weak verbs (helped, assisted) "
            "with stronger alternatives (led, drove, built)"
        )

    if result.keyword_density_score < 50:
        items.append("Incorporate more job description keywords into your experience bullets")

    if result.bullet_count < constants.target_bullets:
        items.append("Add more detailed accomplishments to your experience section")
    return items

from __future__ import annotations

import logging

from app.schemas.scoring import FormatScoreResult
from app.scoring import patterns
from app.scoring.constants import get_scoring_constants
from app.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)


def _contact_key(email: bool, phone: bool) -> str:
    if email and phone:
        return "both"
    if email:
        return "email_only"
    if phone:
        return "phone_only"
    return "neither"


def calculate_format_score(resume_text: str | None) -> FormatScoreResult:
    """Score ATS parseability: contact details plus dates, headings and bullets."""
    text = resume_text or ""
    constants = get_scoring_constants().format

    email = patterns.has_email(text)
    phone = patterns.has_phone(text)
    contact_score = constants.contact_scores[_contact_key(email, phone)]

    dates = patterns.has_date_patterns(text, constants.min_date_matches)
    headers = patterns.has_section_headers(text, constants.min_section_headers)
    bullets = patterns.has_bullet_structure(text, constants.min_bullet_lines, constants.min_bullet_run)

    weights = constants.structure_weights
    earned = (
        (weights["dates"] if dates else 0)
        + (weights["headers"] if headers else 0)
        + (weights["bullets"] if bullets else 0)
    )
    total_weight = weights["dates"] + weights["headers"] + weights["bullets"]
    structure_score = round_half_up(earned / total_weight * 100) if total_weight else 0

    score = round_half_up((contact_score + structure_score) / 2)
    logger.debug(
        "format_score contact=%s structure=%s score=%s",
        contact_score,
        structure_score,
        score,
    )
    return FormatScoreResult(
        score=score,
        has_email=email,
        has_phone=phone,
        has_date_patterns=dates,
        has_section_headers=headers,
        has_bullet_structure=bullets,
        contact_score=contact_score,
        structure_score=structure_score,
    )


def generate_format_action_items(result: FormatScoreResult) -> list[str]:
    items: list[str] = []
    if not result.has_email:
        items.append("Add a professional email address to your contact information")
    if not result.has_phone:
        items.append("Add a phone number to your contact information")
    if not result.has_date_patterns:
        items.append('Add dates to your work experience (e.g., "Jan 2020 - Present")')
    if not result.has_section_headers:
        items.append("Add clear section headers (Summary, Skills, Experience, Education)")
    if not result.has_bullet_structure:
        items.append("Use bullet points to organize your experience and achievements")
    return items

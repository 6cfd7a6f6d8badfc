from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from app.normalize.utils import section_for_heading
from app.schemas.resume import CANDIDATE_TYPES
from app.schemas.scoring import SectionOrderValidation, SectionOrderViolation
from app.scoring.constants import get_scoring_constants

# Header/contact block is always first and never part of the order.
RECOMMENDED_ORDER: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "coop": ("skills", "education", "projects", "experience", "certifications"),
        "fulltime": ("summary", "skills", "experience", "projects", "education", "certifications"),
        "career_changer": ("summary", "skills", "education", "projects", "experience", "certifications"),
    }
)


def recommended_order_for(candidate_type: str) -> tuple[str, ...]:
    if candidate_type not in CANDIDATE_TYPES:
        raise ValueError(f"Unknown candidate type: {candidate_type}")
    configured = get_scoring_constants().structure.recommended_order.get(candidate_type)
    return tuple(configured) if configured else RECOMMENDED_ORDER[candidate_type]


def detect_section_order(raw_text: str | None) -> list[str]:
    """Sections in the order their headings first appear in the raw resume text."""
    order: list[str] = []
    for line in (raw_text or "").splitlines():
        section = section_for_heading(line.strip())
        if section and section not in order:
            order.append(section)
    return order


def validate_section_order(present_sections: Iterable[str], candidate_type: str) -> SectionOrderValidation:
    recommended = recommended_order_for(candidate_type)
    present = list(dict.fromkeys(present_sections))
    if len(present) < 2:
        return SectionOrderValidation(is_correct_order=True, recommended_order=list(recommended))

    expected_positions = {
        section: index
        for index, section in enumerate(section for section in recommended if section in present)
    }
    # Custom sections the recommendation does not rank are ignored.
    known = [section for section in present if section in expected_positions]

    violations: list[SectionOrderViolation] = []
    for actual, section in enumerate(known):
        expected = expected_positions[section]
        if actual != expected:
            violations.append(
                SectionOrderViolation(
                    section=section,
                    expected_position=expected,
                    actual_position=actual,
                    description=(
                        f'"{section}" appears at position {actual + 1} but should be at '
                        f"position {expected + 1} for {candidate_type} candidates"
                    ),
                )
            )

    return SectionOrderValidation(
        is_correct_order=not violations,
        violations=violations,
        recommended_order=list(recommended),
    )

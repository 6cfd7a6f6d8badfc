from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from app.schemas.analysis import KeywordAnalysisResult
from app.schemas.resume import ParsedSections
from app.schemas.scoring import ComponentWeights, RoleDetectionResult, ScoreBreakdown
from app.scoring.constants import get_scoring_constants
from app.scoring.experience_score import calculate_experience_score, generate_experience_action_items
from app.scoring.format_score import calculate_format_score, generate_format_action_items
from app.scoring.keyword_score import calculate_keyword_score, generate_keyword_action_items
from app.scoring.role_detection import detect_role
from app.scoring.rounding import clamp_score
from app.scoring.section_score import calculate_section_score, generate_section_action_items

logger = logging.getLogger(__name__)

_COMPONENTS = ("keywords", "experience", "sections", "format")


def get_score_tier(score: int) -> str:
    tiers = get_scoring_constants().composite.tiers
    if score >= tiers["excellent"]:
        return "excellent"
    if score >= tiers["strong"]:
        return "strong"
    if score >= tiers["moderate"]:
        return "moderate"
    return "weak"


def component_weights(
    candidate_type: str | None = None,
    role: RoleDetectionResult | None = None,
) -> ComponentWeights:
    """Composite weights, normalized to sum to 1.

    A detected role replaces the candidate-type weights; its seniority then shifts
    weight between components.
    """
    constants = get_scoring_constants()
    composite = constants.composite
    raw = dict(composite.weights)
    if candidate_type and candidate_type in composite.candidate_weights:
        raw = dict(composite.candidate_weights[candidate_type])
    if role is not None:
        if role.role_type in constants.roles.weights:
            raw = dict(constants.roles.weights[role.role_type])
        for component, delta in constants.roles.seniority_adjustments.get(role.seniority_level, {}).items():
            if component in raw:
                raw[component] += delta

    values = {component: max(raw.get(component, 0.0), 0.0) for component in _COMPONENTS}
    total = sum(values.values())
    if total <= 0:
        raise RuntimeError("Composite weights must sum to a positive value")
    return ComponentWeights(**{component: value / total for component, value in values.items()})


def _keyword_strings(analysis: KeywordAnalysisResult | None) -> list[str]:
    if analysis is None:
        return []
    return [item.keyword for item in analysis.matched] + [item.keyword for item in analysis.missing]


def calculate_ats_score(
    analysis: KeywordAnalysisResult | None,
    resume_text: str | None,
    parsed_sections: ParsedSections | dict[str, Any] | None = None,
    *,
    candidate_type: str | None = None,
    job_description: str | None = None,
) -> ScoreBreakdown:
    """Combine keyword, experience, section and format scores into one breakdown.

    ``analyzed_at`` is taken from ``analysis`` so the same inputs always produce the
    same breakdown. Role weighting applies only when a job description is given.
    """
    constants = get_scoring_constants()
    keywords = calculate_keyword_score(analysis)
    experience = calculate_experience_score(resume_text, _keyword_strings(analysis))
    sections = calculate_section_score(parsed_sections)
    fmt = calculate_format_score(resume_text)
    role = detect_role(job_description) if job_description and job_description.strip() else None
    weights = component_weights(candidate_type, role)

    score = clamp_score(
        keywords.score * weights.keywords
        + experience.score * weights.experience
        + sections.score * weights.sections
        + fmt.score * weights.format
    )

    action_items = (
        generate_keyword_action_items(analysis)
        + generate_experience_action_items(experience)
        + generate_section_action_items(sections)
        + generate_format_action_items(fmt)
    )[: constants.composite.max_action_items]

    tier = get_score_tier(score)
    logger.debug(
        "ats_score score=%s tier=%s keywords=%s experience=%s sections=%s format=%s candidate_type=%s role=%s",
        score,
        tier,
        keywords.score,
        experience.score,
        sections.score,
        fmt.score,
        candidate_type or "-",
        role.role_type if role else "-",
    )
    return ScoreBreakdown(
        score=score,
        tier=tier,
        keyword_score=keywords.score,
        experience_score=experience.score,
        section_score=sections.score,
        format_score=fmt.score,
        contact_score=fmt.contact_score,
        structure_score=fmt.structure_score,
        missing_high_importance=keywords.missing_high_importance,
        penalty_applied=keywords.penalty_applied,
        keywords=keywords,
        experience=experience,
        sections=sections,
        format=fmt,
        weights=weights,
        role=role,
        action_items=action_items,
        analyzed_at=analysis.analyzed_at if analysis is not None else datetime.now(timezone.utc),
        algorithm_version=constants.algorithm_version,
    )

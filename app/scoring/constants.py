"""Calibration tables shared by every scorer.

Values come from ``config/scoring.yaml``; the defaults below mirror the shipped
file so a trimmed config still scores the same way. Tables are read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping

from app.core.config.scoring import get_scoring_value


def _frozen_floats(raw: Any, default: dict[str, float]) -> Mapping[str, float]:
    values = dict(default)
    if isinstance(raw, dict):
        for key, value in raw.items():
            try:
                values[str(key)] = float(value)
            except (TypeError, ValueError):
                continue
    return MappingProxyType(values)


def _frozen_ints(raw: Any, default: dict[str, int]) -> Mapping[str, int]:
    values = dict(default)
    if isinstance(raw, dict):
        for key, value in raw.items():
            try:
                values[str(key)] = int(value)
            except (TypeError, ValueError):
                continue
    return MappingProxyType(values)


def _string_tuple(raw: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return default
    return tuple(str(item) for item in raw if str(item).strip())


def _string_table(raw: Any) -> Mapping[str, tuple[str, ...]]:
    if not isinstance(raw, dict):
        return MappingProxyType({})
    return MappingProxyType(
        {str(key): tuple(str(item) for item in (value or [])) for key, value in raw.items()}
    )


def _word_set(raw: Any) -> frozenset[str]:
    return frozenset(word.lower() for word in _string_tuple(raw, ()))


def _weight_tables(raw: Any, default: dict[str, float]) -> Mapping[str, Mapping[str, float]]:
    if not isinstance(raw, dict):
        return MappingProxyType({})
    return MappingProxyType(
        {str(key): _frozen_floats(value, default) for key, value in raw.items() if isinstance(value, dict)}
    )


@dataclass(frozen=True)
class KeywordConstants:
    match_weights: Mapping[str, float]
    importance_weights: Mapping[str, float]
    missing_high_penalty: float
    min_penalty_multiplier: float
    context_max_chars: int
    placement_weights: Mapping[str, float]
    buried_placement_below: float


@dataclass(frozen=True)
class SectionConstants:
    summary_min_words: int
    skills_min_items: int
    experience_min_bullets: int
    min_bullet_chars: int


@dataclass(frozen=True)
class FormatConstants:
    contact_scores: Mapping[str, int]
    structure_weights: Mapping[str, int]
    min_date_matches: int
    min_section_headers: int
    min_bullet_lines: int
    min_bullet_run: int


@dataclass(frozen=True)
class ExperienceConstants:
    weights: Mapping[str, float]
    metric_rate_full: float
    metric_rate_half: float
    strong_verb_rate_full: float
    strong_verb_rate_half: float
    weak_verb_penalty_rate: float
    weak_verb_penalty_max: float
    keywords_per_bullet_full: float
    min_pattern_bullets: int
    target_bullets: int
    min_text_chars: int
    baseline: Mapping[str, float]
    strong_verbs: frozenset[str]
    weak_verbs: frozenset[str]


@dataclass(frozen=True)
class CompositeConstants:
    weights: Mapping[str, float]
    candidate_weights: Mapping[str, Mapping[str, float]]
    tiers: Mapping[str, int]
    max_action_items: int


@dataclass(frozen=True)
class RoleConstants:
    keywords: Mapping[str, tuple[str, ...]]
    seniority: Mapping[str, tuple[str, ...]]
    weights: Mapping[str, Mapping[str, float]]
    seniority_adjustments: Mapping[str, Mapping[str, float]]


@dataclass(frozen=True)
class GapPolicy:
    impact_base: Mapping[str, int]
    preferred_impact_multiplier: float
    addable_categories: tuple[str, ...]
    unfixable_categories: tuple[str, ...]
    qualification_markers: tuple[str, ...]
    category_targets: Mapping[str, tuple[str, ...]]
    terminology_mappings: Mapping[str, tuple[str, ...]]
    technology_families: Mapping[str, tuple[str, ...]]


@dataclass(frozen=True)
class StructureConstants:
    coop_skills_top_positions: int
    project_heading_preferred: str
    project_heading_aliases: tuple[str, ...]
    unsafe_headers: Mapping[str, str]
    recommended_order: Mapping[str, tuple[str, ...]]


@dataclass(frozen=True)
class ScoringConstants:
    algorithm_version: str
    keywords: KeywordConstants
    sections: SectionConstants
    format: FormatConstants
    experience: ExperienceConstants
    composite: CompositeConstants
    roles: RoleConstants
    gaps: GapPolicy
    structure: StructureConstants


_DEFAULT_WEIGHTS = {"keywords": 0.50, "experience": 0.20, "sections": 0.15, "format": 0.15}
_DEFAULT_PLACEMENT_WEIGHTS = {
    "skills_section": 1.0,
    "summary": 0.90,
    "experience_bullet": 0.85,
    "projects": 0.85,
    "education": 0.80,
    "experience_paragraph": 0.70,
    "other": 0.65,
}


def _build_keywords() -> KeywordConstants:
    return KeywordConstants(
        match_weights=_frozen_floats(
            get_scoring_value("keywords.match_weights"),
            {"exact": 1.0, "fuzzy": 0.85, "semantic": 0.65},
        ),
        importance_weights=_frozen_floats(
            get_scoring_value("keywords.importance_weights"),
            {"high": 1.0, "medium": 0.6, "low": 0.3},
        ),
        missing_high_penalty=float(get_scoring_value("keywords.missing_high_penalty", 0.15)),
        min_penalty_multiplier=float(get_scoring_value("keywords.min_penalty_multiplier", 0.40)),
        context_max_chars=int(get_scoring_value("keywords.context_max_chars", 100)),
        placement_weights=_frozen_floats(
            get_scoring_value("keywords.placement_weights"), _DEFAULT_PLACEMENT_WEIGHTS
        ),
        buried_placement_below=float(get_scoring_value("keywords.buried_placement_below", 0.75)),
    )


def _build_sections() -> SectionConstants:
    return SectionConstants(
        summary_min_words=int(get_scoring_value("sections.summary_min_words", 30)),
        skills_min_items=int(get_scoring_value("sections.skills_min_items", 6)),
        experience_min_bullets=int(get_scoring_value("sections.experience_min_bullets", 8)),
        min_bullet_chars=int(get_scoring_value("sections.min_bullet_chars", 15)),
    )


def _build_format() -> FormatConstants:
    return FormatConstants(
        contact_scores=_frozen_ints(
            get_scoring_value("format.contact_scores"),
            {"both": 100, "email_only": 60, "phone_only": 40, "neither": 0},
        ),
        structure_weights=_frozen_ints(
            get_scoring_value("format.structure_weights"),
            {"dates": 30, "headers": 35, "bullets": 35},
        ),
        min_date_matches=int(get_scoring_value("format.min_date_matches", 2)),
        min_section_headers=int(get_scoring_value("format.min_section_headers", 2)),
        min_bullet_lines=int(get_scoring_value("format.min_bullet_lines", 4)),
        min_bullet_run=int(get_scoring_value("format.min_bullet_run", 2)),
    )


def _build_experience() -> ExperienceConstants:
    return ExperienceConstants(
        weights=_frozen_floats(
            get_scoring_value("experience.weights"),
            {"quantification": 0.35, "action_verbs": 0.30, "keyword_density": 0.35},
        ),
        metric_rate_full=float(get_scoring_value("experience.metric_rate_full", 0.5)),
        metric_rate_half=float(get_scoring_value("experience.metric_rate_half", 0.25)),
        strong_verb_rate_full=float(get_scoring_value("experience.strong_verb_rate_full", 0.7)),
        strong_verb_rate_half=float(get_scoring_value("experience.strong_verb_rate_half", 0.4)),
        weak_verb_penalty_rate=float(get_scoring_value("experience.weak_verb_penalty_rate", 40)),
        weak_verb_penalty_max=float(get_scoring_value("experience.weak_verb_penalty_max", 20)),
        keywords_per_bullet_full=float(get_scoring_value("experience.keywords_per_bullet_full", 2)),
        min_pattern_bullets=int(get_scoring_value("experience.min_pattern_bullets", 4)),
        target_bullets=int(get_scoring_value("experience.target_bullets", 8)),
        min_text_chars=int(get_scoring_value("experience.min_text_chars", 50)),
        baseline=_frozen_floats(
            get_scoring_value("experience.baseline"),
            {
                "metric_points": 15,
                "verb_points": 10,
                "max_verbs": 5,
                "component_cap": 40,
                "keyword_cap": 50,
                "keyword_scale": 60,
                "no_keywords": 30,
            },
        ),
        strong_verbs=_word_set(get_scoring_value("experience.strong_verbs")),
        weak_verbs=_word_set(get_scoring_value("experience.weak_verbs")),
    )


def _build_composite() -> CompositeConstants:
    candidate_weights = _weight_tables(get_scoring_value("composite.candidate_weights"), _DEFAULT_WEIGHTS)
    return CompositeConstants(
        weights=_frozen_floats(get_scoring_value("composite.weights"), _DEFAULT_WEIGHTS),
        candidate_weights=candidate_weights,
        tiers=_frozen_ints(
            get_scoring_value("composite.tiers"),
            {"excellent": 85, "strong": 70, "moderate": 55},
        ),
        max_action_items=int(get_scoring_value("composite.max_action_items", 5)),
    )


def _build_roles() -> RoleConstants:
    return RoleConstants(
        keywords=_string_table(get_scoring_value("roles.keywords")),
        seniority=_string_table(get_scoring_value("roles.seniority")),
        weights=_weight_tables(get_scoring_value("roles.weights"), _DEFAULT_WEIGHTS),
        seniority_adjustments=_weight_tables(get_scoring_value("roles.seniority_adjustments"), {}),
    )


def _build_gaps() -> GapPolicy:
    return GapPolicy(
        impact_base=_frozen_ints(
            get_scoring_value("gaps.impact_base"),
            {"high": 12, "medium": 8, "low": 4},
        ),
        preferred_impact_multiplier=float(get_scoring_value("gaps.preferred_impact_multiplier", 0.5)),
        addable_categories=_string_tuple(
            get_scoring_value("gaps.addable_categories"), ("skills", "technologies")
        ),
        unfixable_categories=_string_tuple(
            get_scoring_value("gaps.unfixable_categories"), ("qualifications", "certifications")
        ),
        qualification_markers=tuple(
            marker.lower()
            for marker in _string_tuple(get_scoring_value("gaps.qualification_markers"), ())
        ),
        category_targets=_string_table(get_scoring_value("gaps.category_targets")),
        terminology_mappings=_string_table(get_scoring_value("gaps.terminology_mappings")),
        technology_families=_string_table(get_scoring_value("gaps.technology_families")),
    )


def _build_structure() -> StructureConstants:
    raw_headers = get_scoring_value("structure.unsafe_headers", {}) or {}
    return StructureConstants(
        coop_skills_top_positions=int(get_scoring_value("structure.coop_skills_top_positions", 1)),
        project_heading_preferred=str(
            get_scoring_value("structure.project_heading_preferred", "project experience")
        ).lower(),
        project_heading_aliases=tuple(
            alias.lower()
            for alias in _string_tuple(
                get_scoring_value("structure.project_heading_aliases"),
                ("projects", "project experience"),
            )
        ),
        unsafe_headers=MappingProxyType(
            {str(key).lower(): str(value) for key, value in raw_headers.items()}
        ),
        recommended_order=_string_table(get_scoring_value("structure.recommended_order")),
    )


@lru_cache(maxsize=1)
def get_scoring_constants() -> ScoringConstants:
    return ScoringConstants(
        algorithm_version=str(get_scoring_value("algorithm_version", "ats-v2.1-det")),
        keywords=_build_keywords(),
        sections=_build_sections(),
        format=_build_format(),
        experience=_build_experience(),
        composite=_build_composite(),
        roles=_build_roles(),
        gaps=_build_gaps(),
        structure=_build_structure(),
    )

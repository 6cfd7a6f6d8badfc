"""Classify missing keywords by how honestly they can be addressed.

A gap is a *terminology* fix when the resume already shows the skill under other
words, a *potential* addition when it is the kind of skill or tool a candidate
could list without inventing history, and *unfixable* when closing it would mean
claiming a degree, certification or tenure the resume does not support.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from app.normalize.utils import find_term, section_for_heading
from app.schemas.analysis import ExtractedKeyword, KeywordAnalysisResult
from app.schemas.resume import ParsedSections
from app.schemas.scoring import GapProcessingResult, GapSummary, ProcessedGap, SectionGapBuckets
from app.scoring.constants import GapPolicy, get_scoring_constants
from app.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)

# Section texts searched for evidence, mapped to the section a rewrite would touch.
_EVIDENCE_SECTIONS: tuple[tuple[str, str], ...] = (
    ("summary", "summary"),
    ("skills", "skills"),
    ("experience", "experience"),
    ("projects", "projects"),
    ("education", "education"),
    ("certifications", "education"),
)
_EDUCATION_SECTIONS = ("education", "certifications")
_IMPORTANCE_ORDER = {"high": 0, "medium": 1, "low": 2}
_DEFAULT_TARGETS = ("skills", "experience")


def _education_block(resume_text: str) -> str:
    """Lines under education or certification headings in the raw resume text."""
    lines: list[str] = []
    current: str | None = None
    for line in resume_text.splitlines():
        section = section_for_heading(line.strip())
        if section:
            current = section
            continue
        if current in _EDUCATION_SECTIONS:
            lines.append(line)
    return "\n".join(lines)


class _EvidenceIndex:
    """Word-bounded term lookups over every resume section plus the raw text.

    Degree and certification evidence is only accepted from education text, so a
    state code in an address line never reads as a degree.
    """

    def __init__(self, resume_text: str, sections: ParsedSections) -> None:
        self._sections = [
            (target, sections.text_for(name))
            for name, target in _EVIDENCE_SECTIONS
            if sections.has(name)
        ]
        self._raw = resume_text or ""
        self._education = [
            ("education", sections.text_for(name)) for name in _EDUCATION_SECTIONS if sections.has(name)
        ]
        self._raw_education = "" if self._education else _education_block(self._raw)

    def find(self, terms: Iterable[str], *, education_only: bool = False) -> tuple[str, list[str]] | None:
        """First term present, as written in the resume, and the sections holding it."""
        sections = self._education if education_only else self._sections
        raw = self._raw_education if education_only else self._raw
        for term in terms:
            evidence: str | None = None
            targets: list[str] = []
            for target, text in sections:
                found = find_term(text, term)
                if found is None:
                    continue
                evidence = evidence or found
                if target not in targets:
                    targets.append(target)
            if evidence is None:
                evidence = find_term(raw, term)
                if evidence is not None and education_only:
                    targets = ["education"]
            if evidence is not None:
                return evidence, targets
        return None


def _lookup(table: Mapping[str, tuple[str, ...]], keyword: str) -> tuple[str, ...]:
    lowered = keyword.strip().lower()
    for key, values in table.items():
        if key.lower() == lowered:
            return values
    return ()


def _reverse_lookup(table: Mapping[str, tuple[str, ...]], keyword: str) -> list[str]:
    lowered = keyword.strip().lower()
    return [key for key, values in table.items() if any(value.lower() == lowered for value in values)]


def _category_targets(policy: GapPolicy, category: str) -> list[str]:
    targets = policy.category_targets.get(category) or policy.category_targets.get("other") or _DEFAULT_TARGETS
    return list(targets)


def _impact(policy: GapPolicy, importance: str, requirement: str) -> int:
    base = policy.impact_base.get(importance, policy.impact_base.get("medium", 0))
    multiplier = 1.0 if requirement == "required" else policy.preferred_impact_multiplier
    return round_half_up(base * multiplier)


def _is_qualification(policy: GapPolicy, keyword: ExtractedKeyword) -> bool:
    lowered = keyword.keyword.lower()
    if keyword.category in policy.unfixable_categories:
        return True
    return any(marker in lowered for marker in policy.qualification_markers)


def _classify(
    keyword: ExtractedKeyword,
    evidence_index: _EvidenceIndex,
    policy: GapPolicy,
) -> ProcessedGap:
    name = keyword.keyword
    requirement = "required" if keyword.importance == "high" else "preferred"
    impact = _impact(policy, keyword.importance, requirement)
    default_targets = _category_targets(policy, keyword.category)
    qualification = _is_qualification(policy, keyword)
    common: dict[str, Any] = {
        "keyword": name,
        "category": keyword.category,
        "priority": keyword.importance,
        "requirement": requirement,
    }

    hit = evidence_index.find(_lookup(policy.terminology_mappings, name), education_only=qualification)
    if hit:
        evidence, targets = hit
        return ProcessedGap(
            **common,
            potential_impact=impact,
            addressability="terminology",
            reason=f'Resume uses "{evidence}" which is equivalent',
            evidence=evidence,
            target_sections=targets or default_targets,
            instruction=f'Change "{evidence}" to "{name}" for exact JD match',
        )

    hit = evidence_index.find(_reverse_lookup(policy.terminology_mappings, name), education_only=qualification)
    if hit:
        evidence, targets = hit
        return ProcessedGap(
            **common,
            potential_impact=impact,
            addressability="terminology",
            reason=f'Resume uses "{evidence}", can add "{name}" as explicit mention',
            evidence=evidence,
            target_sections=targets or default_targets,
            instruction=f'Add "{name}" alongside existing "{evidence}"',
        )

    hit = evidence_index.find([name], education_only=qualification)
    if hit:
        evidence, targets = hit
        return ProcessedGap(
            **common,
            potential_impact=impact,
            addressability="terminology",
            reason=f'Keyword "{name}" exists in resume but may not be prominent enough',
            evidence=evidence,
            target_sections=targets or default_targets,
            instruction=f'Make "{name}" more prominent or add to skills section',
        )

    hit = evidence_index.find(_lookup(policy.technology_families, name))
    if hit:
        related, _ = hit
        return ProcessedGap(
            **common,
            potential_impact=impact,
            addressability="potential",
            reason=f'Resume has "{related}" which is related to {name}',
            evidence=related,
            target_sections=default_targets,
            instruction=f'Only add "{name}" if the candidate genuinely has this experience',
        )

    if qualification:
        return ProcessedGap(
            **common,
            potential_impact=0,
            addressability="unfixable",
            reason="This is a qualification or certification that cannot be fabricated",
            evidence=None,
            target_sections=default_targets,
            instruction=f'Cannot add "{name}"; this requires the actual qualification',
        )

    if keyword.category in policy.addable_categories:
        return ProcessedGap(
            **common,
            potential_impact=impact,
            addressability="potential",
            reason="No direct evidence in resume, but could be added if the candidate has experience",
            evidence=None,
            target_sections=default_targets,
            instruction=f'Only add "{name}" if the candidate genuinely has this skill',
        )

    return ProcessedGap(
        **common,
        potential_impact=0,
        addressability="unfixable",
        reason="No evidence in resume and not a skill that can be easily added",
        evidence=None,
        target_sections=default_targets,
        instruction=f'Cannot reliably add "{name}" without evidence',
    )


def process_gap_addressability(
    analysis: KeywordAnalysisResult | None,
    resume_text: str | None,
    parsed_sections: ParsedSections | dict[str, Any] | None = None,
) -> GapProcessingResult:
    if analysis is None or not analysis.missing:
        return GapProcessingResult()

    policy = get_scoring_constants().gaps
    evidence_index = _EvidenceIndex(resume_text or "", ParsedSections.coerce(parsed_sections))

    gaps = [_classify(keyword, evidence_index, policy) for keyword in analysis.missing]
    gaps.sort(key=lambda gap: _IMPORTANCE_ORDER.get(gap.priority, 1))

    summary = GapSummary(
        total_gaps=len(gaps),
        terminology_fixes=sum(1 for gap in gaps if gap.addressability == "terminology"),
        potential_additions=sum(1 for gap in gaps if gap.addressability == "potential"),
        unfixable_gaps=sum(1 for gap in gaps if gap.addressability == "unfixable"),
        total_potential_impact=sum(gap.potential_impact for gap in gaps),
    )
    logger.debug(
        "gap_addressability total=%s terminology=%s potential=%s unfixable=%s",
        summary.total_gaps,
        summary.terminology_fixes,
        summary.potential_additions,
        summary.unfixable_gaps,
    )
    return GapProcessingResult(processed_gaps=gaps, summary=summary)


def filter_gaps_for_section(gaps: Iterable[ProcessedGap], section: str) -> SectionGapBuckets:
    """Split gaps into the buckets a section rewrite works from.

    ``cannot_fix`` ignores the section so every rewrite sees the full list of gaps
    it must not paper over.
    """
    buckets = SectionGapBuckets()
    for gap in gaps:
        if gap.addressability == "unfixable":
            buckets.cannot_fix.append(gap)
            continue
        if section not in gap.target_sections:
            continue
        if gap.requirement == "preferred":
            buckets.opportunities.append(gap)
        elif gap.addressability == "terminology":
            buckets.terminology_fixes.append(gap)
        else:
            buckets.potential_additions.append(gap)
    return buckets

"""Deterministic structural checks on section order, presence and headings.

Each candidate type has its own rule set; the non-standard heading check applies
to every type. Rules are independent and each fired rule yields one suggestion.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from app.normalize.utils import heading_text, normalize_line
from app.schemas.resume import ParsedSections
from app.schemas.scoring import StructuralSuggestion
from app.scoring.constants import StructureConstants, get_scoring_constants
from app.scoring.section_ordering import detect_section_order

logger = logging.getLogger(__name__)

_MAX_HEADING_CHARS = 60


class _RuleInput:
    def __init__(
        self,
        parsed: ParsedSections,
        section_order: list[str],
        raw_text: str | None,
        config: StructureConstants,
    ) -> None:
        self.parsed = parsed
        self.section_order = section_order
        self.raw_text = raw_text
        self.config = config

    def position(self, section: str) -> int:
        try:
            return self.section_order.index(section)
        except ValueError:
            return -1

    def heading_lines(self) -> list[str]:
        headings: list[str] = []
        for line in (self.raw_text or "").splitlines():
            cleaned = normalize_line(line)
            if cleaned and len(cleaned) <= _MAX_HEADING_CHARS:
                headings.append(heading_text(cleaned))
        return headings


def _coop_exp_before_edu(rule_input: _RuleInput) -> StructuralSuggestion | None:
    experience = rule_input.position("experience")
    education = rule_input.position("education")
    if experience == -1 or education == -1 or experience > education:
        return None
    return StructuralSuggestion(
        id="rule-coop-exp-before-edu",
        category="section_order",
        priority="high",
        message="For co-op/internship resumes, Education should come before Experience",
        current_state="Experience section appears before Education section",
        recommended_action=(
            "Move Education section above Experience. Co-op candidates benefit from "
            "showcasing their academic credentials before work history."
        ),
    )


def _coop_no_skills_at_top(rule_input: _RuleInput) -> StructuralSuggestion | None:
    missing = not rule_input.parsed.has("skills")
    top = rule_input.config.coop_skills_top_positions
    order = rule_input.section_order
    not_on_top = bool(order) and "skills" not in order[:top]
    if not (missing or not_on_top):
        return None
    return StructuralSuggestion(
        id="rule-coop-no-skills-at-top",
        category="section_presence",
        priority="critical",
        message="Co-op resumes must lead with Skills section",
        current_state="Skills section is missing" if missing else "Skills section is not positioned first",
        recommended_action=(
            "Add or move Skills section to the top of your resume (right after header). "
            "This maximizes keyword density for ATS systems and immediately demonstrates "
            "your technical capabilities."
        ),
    )


def _coop_generic_summary(rule_input: _RuleInput) -> StructuralSuggestion | None:
    if not rule_input.parsed.has("summary"):
        return None
    return StructuralSuggestion(
        id="rule-coop-generic-summary",
        category="section_presence",
        priority="high",
        message="Co-op resumes typically should not include a Professional Summary",
        current_state="Professional Summary section is present",
        recommended_action=(
            "Consider removing the summary to save space; co-op/internship resumes benefit "
            "from leading with Skills instead. Use the extra space for Projects or relevant coursework."
        ),
    )


def _coop_projects_heading(rule_input: _RuleInput) -> StructuralSuggestion | None:
    if not rule_input.parsed.has("projects"):
        return None

    config = rule_input.config
    heading = "projects"
    if rule_input.raw_text:
        for candidate in rule_input.heading_lines():
            if candidate in config.project_heading_aliases:
                heading = candidate
                break
    if heading == config.project_heading_preferred:
        return None

    return StructuralSuggestion(
        id="rule-coop-projects-heading",
        category="section_heading",
        priority="moderate",
        message='Use "Project Experience" heading instead of "Projects"',
        current_state=f'Section is titled "{heading.title()}"',
        recommended_action=(
            'Rename the section heading to "Project Experience" for better ATS recognition '
            "and professional presentation."
        ),
    )


def _fulltime_edu_before_exp(rule_input: _RuleInput) -> StructuralSuggestion | None:
    experience = rule_input.position("experience")
    education = rule_input.position("education")
    if experience == -1 or education == -1 or education > experience:
        return None
    return StructuralSuggestion(
        id="rule-fulltime-edu-before-exp",
        category="section_order",
        priority="high",
        message="For full-time positions, Experience should come before Education",
        current_state="Education section appears before Experience section",
        recommended_action=(
            "Move Experience section above Education. Full-time candidates should emphasize "
            "professional experience over academic credentials."
        ),
    )


def _career_changer_no_summary(rule_input: _RuleInput) -> StructuralSuggestion | None:
    if rule_input.parsed.has("summary"):
        return None
    return StructuralSuggestion(
        id="rule-career-changer-no-summary",
        category="section_presence",
        priority="critical",
        message="Career changers must include a Professional Summary",
        current_state="Professional Summary section is missing",
        recommended_action=(
            "Add a Professional Summary at the top of your resume to explain your career "
            "transition and highlight transferable skills."
        ),
    )


def _career_changer_edu_below_exp(rule_input: _RuleInput) -> StructuralSuggestion | None:
    experience = rule_input.position("experience")
    education = rule_input.position("education")
    if experience == -1 or education == -1 or education < experience:
        return None
    return StructuralSuggestion(
        id="rule-career-changer-edu-below-exp",
        category="section_order",
        priority="high",
        message="For career changers, Education should come before Experience",
        current_state="Education section appears after Experience section",
        recommended_action=(
            "Move Education section above Experience. Your degree is the pivot credential "
            "for your career change and should be prominently positioned."
        ),
    )


def _non_standard_headers(rule_input: _RuleInput) -> StructuralSuggestion | None:
    if not rule_input.raw_text:
        return None

    unsafe = rule_input.config.unsafe_headers
    detected: list[str] = []
    for heading in rule_input.heading_lines():
        standard = unsafe.get(heading)
        if standard:
            label = f'"{heading}" -> "{standard}"'
            if label not in detected:
                detected.append(label)
    if not detected:
        return None

    return StructuralSuggestion(
        id="rule-non-standard-headers",
        category="section_heading",
        priority="moderate",
        message="Non-standard section headings detected",
        current_state=f"Detected: {', '.join(detected)}",
        recommended_action=(
            "Replace creative or informal section headings with standard ATS-friendly headers "
            "so applicant tracking systems categorize each section correctly."
        ),
    )


Rule = Callable[[_RuleInput], "StructuralSuggestion | None"]

_RULE_SETS: dict[str, tuple[Rule, ...]] = {
    "coop": (
        _coop_exp_before_edu,
        _coop_no_skills_at_top,
        _coop_generic_summary,
        _coop_projects_heading,
    ),
    "career_changer": (
        _career_changer_no_summary,
        _career_changer_edu_below_exp,
    ),
    "fulltime": (_fulltime_edu_before_exp,),
}
_UNIVERSAL_RULES: tuple[Rule, ...] = (_non_standard_headers,)


def generate_structural_suggestions(
    candidate_type: str,
    parsed_resume: ParsedSections | dict[str, Any] | None,
    section_order: Sequence[str] | None = None,
    raw_resume_text: str | None = None,
) -> list[StructuralSuggestion]:
    """Run the candidate type's rule set followed by the universal rules.

    When ``section_order`` is omitted it is derived from headings in the raw text.
    Raises ``ValueError`` for a candidate type without a rule set.
    """
    rule_set = _RULE_SETS.get(candidate_type)
    if rule_set is None:
        raise ValueError(f"Unknown candidate type: {candidate_type}")

    order = list(section_order) if section_order is not None else detect_section_order(raw_resume_text)
    rule_input = _RuleInput(
        parsed=ParsedSections.coerce(parsed_resume),
        section_order=[str(section).strip().lower() for section in order],
        raw_text=raw_resume_text,
        config=get_scoring_constants().structure,
    )

    suggestions: list[StructuralSuggestion] = []
    for rule in rule_set + _UNIVERSAL_RULES:
        suggestion = rule(rule_input)
        if suggestion is not None:
            suggestions.append(suggestion)

    logger.debug(
        "structural_suggestions candidate_type=%s fired=%s",
        candidate_type,
        ",".join(item.id for item in suggestions) or "-",
    )
    return suggestions

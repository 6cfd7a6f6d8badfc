from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.analysis import Importance, KeywordCategory
from app.schemas.resume import SectionType

ScoreTier = Literal["excellent", "strong", "moderate", "weak"]
Addressability = Literal["terminology", "potential", "unfixable"]
Requirement = Literal["required", "preferred"]
SuggestionCategory = Literal["section_order", "section_presence", "section_heading"]
SuggestionPriority = Literal["critical", "high", "moderate"]
SeniorityLevel = Literal["entry", "mid", "senior", "lead", "executive"]


class KeywordScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    matched_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    weighted_match_score: int = Field(ge=0, le=100)
    missing_high_importance: int = Field(ge=0)
    penalty_applied: int = Field(ge=0, le=100)
    # Where matched keywords sit, weighted by importance; reported, not scored.
    placement_score: int = Field(default=0, ge=0, le=100)


class SectionScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    summary_score: int = Field(ge=0, le=100)
    skills_score: int = Field(ge=0, le=100)
    experience_score: int = Field(ge=0, le=100)
    summary_word_count: int = Field(ge=0)
    skills_item_count: int = Field(ge=0)
    experience_bullet_count: int = Field(ge=0)


class FormatScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    has_email: bool
    has_phone: bool
    has_date_patterns: bool
    has_section_headers: bool
    has_bullet_structure: bool
    contact_score: int = Field(ge=0, le=100)
    structure_score: int = Field(ge=0, le=100)


class ExperienceScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    quantification_score: int = Field(ge=0, le=100)
    action_verb_score: int = Field(ge=0, le=100)
    keyword_density_score: int = Field(ge=0, le=100)
    bullet_count: int = Field(ge=0)
    bullets_with_metrics: int = Field(ge=0)
    strong_verb_count: int = Field(ge=0)
    weak_verb_count: int = Field(ge=0)


class RoleDetectionResult(BaseModel):
    role_type: str = "general"
    seniority_level: SeniorityLevel = "mid"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    role_title: str | None = None


class ProcessedGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str
    category: KeywordCategory
    priority: Importance
    requirement: Requirement
    potential_impact: int = Field(ge=0)
    addressability: Addressability
    reason: str
    evidence: str | None = None
    target_sections: list[SectionType] = Field(default_factory=list)
    instruction: str

    @model_validator(mode="after")
    def _validate_addressability(self) -> "ProcessedGap":
        if self.addressability == "terminology" and self.evidence is None:
            raise ValueError("terminology gaps must carry evidence")
        if self.addressability == "unfixable" and self.potential_impact != 0:
            raise ValueError("unfixable gaps must have zero potential impact")
        return self


class GapSummary(BaseModel):
    total_gaps: int = 0
    terminology_fixes: int = 0
    potential_additions: int = 0
    unfixable_gaps: int = 0
    total_potential_impact: int = 0


class GapProcessingResult(BaseModel):
    processed_gaps: list[ProcessedGap] = Field(default_factory=list)
    summary: GapSummary = Field(default_factory=GapSummary)


class SectionGapBuckets(BaseModel):
    terminology_fixes: list[ProcessedGap] = Field(default_factory=list)
    potential_additions: list[ProcessedGap] = Field(default_factory=list)
    opportunities: list[ProcessedGap] = Field(default_factory=list)
    cannot_fix: list[ProcessedGap] = Field(default_factory=list)


class StructuralSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    category: SuggestionCategory
    priority: SuggestionPriority
    message: str
    current_state: str | None = None
    recommended_action: str


class SectionOrderViolation(BaseModel):
    section: str
    expected_position: int
    actual_position: int
    description: str


class SectionOrderValidation(BaseModel):
    is_correct_order: bool
    violations: list[SectionOrderViolation] = Field(default_factory=list)
    recommended_order: list[str] = Field(default_factory=list)


class ComponentWeights(BaseModel):
    keywords: float = Field(ge=0.0, le=1.0)
    experience: float = Field(ge=0.0, le=1.0)
    sections: float = Field(ge=0.0, le=1.0)
    format: float = Field(ge=0.0, le=1.0)


class ScoreBreakdown(BaseModel):
    score: int = Field(ge=0, le=100)
    tier: ScoreTier
    keyword_score: int = Field(ge=0, le=100)
    experience_score: int = Field(ge=0, le=100)
    section_score: int = Field(ge=0, le=100)
    format_score: int = Field(ge=0, le=100)
    contact_score: int = Field(ge=0, le=100)
    structure_score: int = Field(ge=0, le=100)
    missing_high_importance: int = Field(ge=0)
    penalty_applied: int = Field(ge=0, le=100)
    keywords: KeywordScoreResult
    experience: ExperienceScoreResult
    sections: SectionScoreResult
    format: FormatScoreResult
    weights: ComponentWeights
    role: RoleDetectionResult | None = None
    action_items: list[str] = Field(default_factory=list)
    analyzed_at: datetime
    algorithm_version: str

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

KeywordCategory = Literal[
    "skills",
    "technologies",
    "soft_skills",
    "qualifications",
    "certifications",
    "experience",
    "other",
]
Importance = Literal["high", "medium", "low"]
MatchType = Literal["exact", "fuzzy", "semantic"]
Placement = Literal[
    "skills_section",
    "summary",
    "experience_bullet",
    "experience_paragraph",
    "education",
    "projects",
    "other",
]

KEYWORD_CATEGORIES: tuple[str, ...] = (
    "skills",
    "technologies",
    "soft_skills",
    "qualifications",
    "certifications",
    "experience",
    "other",
)
IMPORTANCE_LEVELS: tuple[str, ...] = ("high", "medium", "low")

_CATEGORY_ALIASES = {
    "skill": "skills",
    "hard_skills": "skills",
    "technology": "technologies",
    "tech": "technologies",
    "tools": "technologies",
    "tool": "technologies",
    "soft_skill": "soft_skills",
    "softskills": "soft_skills",
    "qualification": "qualifications",
    "education": "qualifications",
    "certification": "certifications",
    "certs": "certifications",
}


def coerce_category(value: Any) -> str:
    if not isinstance(value, str):
        return "other"
    normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
    normalized = _CATEGORY_ALIASES.get(normalized, normalized)
    if normalized in KEYWORD_CATEGORIES:
        return normalized
    return "other"


def coerce_importance(value: Any) -> str:
    if not isinstance(value, str):
        return "medium"
    normalized = value.strip().lower()
    if normalized in IMPORTANCE_LEVELS:
        return normalized
    return "medium"


class ExtractedKeyword(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str
    category: KeywordCategory = "other"
    importance: Importance = "medium"

    @field_validator("keyword", mode="before")
    @classmethod
    def _coerce_keyword(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str:
        return coerce_category(value)

    @field_validator("importance", mode="before")
    @classmethod
    def _coerce_importance(cls, value: Any) -> str:
        return coerce_importance(value)


class MatchedKeyword(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str
    category: KeywordCategory = "other"
    found: Literal[True] = True
    match_type: MatchType
    importance: Importance = "medium"
    placement: Placement | None = None
    context: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str:
        return coerce_category(value)

    @field_validator("importance", mode="before")
    @classmethod
    def _coerce_importance(cls, value: Any) -> str:
        return coerce_importance(value)


class KeywordAnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched: list[MatchedKeyword] = Field(default_factory=list)
    missing: list[ExtractedKeyword] = Field(default_factory=list)
    match_rate: int = Field(default=0, ge=0, le=100)
    analyzed_at: datetime

    @model_validator(mode="after")
    def _validate_partition(self) -> "KeywordAnalysisResult":
        matched_keys = {item.keyword.lower() for item in self.matched}
        overlap = [item.keyword for item in self.missing if item.keyword.lower() in matched_keys]
        if overlap:
            raise ValueError(f"keywords cannot be both matched and missing: {', '.join(overlap)}")
        return self

    @property
    def total_count(self) -> int:
        return len(self.matched) + len(self.missing)

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.analysis import KeywordAnalysisResult
from app.schemas.resume import CandidateType, ParsedSections, SectionType
from app.schemas.scoring import (
    GapProcessingResult,
    ScoreBreakdown,
    SectionGapBuckets,
    SectionOrderValidation,
    StructuralSuggestion,
)


class ScanRequest(BaseModel):
    resume_text: str = ""
    parsed_sections: ParsedSections | None = None
    # Optional; when present the composite weights follow the detected role.
    job_description: str | None = None
    # Extractor output is untrusted; entries are coerced individually.
    keywords: list[Any] = Field(default_factory=list)
    candidate_type: CandidateType = "fulltime"
    section_order: list[str] | None = None
    analyzed_at: datetime | None = None


class ScanResponse(BaseModel):
    analysis: KeywordAnalysisResult
    score: ScoreBreakdown
    gaps: GapProcessingResult
    structural_suggestions: list[StructuralSuggestion]
    section_order: SectionOrderValidation


class GapRequest(BaseModel):
    resume_text: str = ""
    parsed_sections: ParsedSections | None = None
    analysis: KeywordAnalysisResult | None = None
    keywords: list[Any] = Field(default_factory=list)
    section: SectionType | None = None
    analyzed_at: datetime | None = None


class GapResponse(BaseModel):
    analysis: KeywordAnalysisResult
    gaps: GapProcessingResult
    buckets: SectionGapBuckets | None = None


class StructureRequest(BaseModel):
    candidate_type: CandidateType
    parsed_sections: ParsedSections | None = None
    section_order: list[str] | None = None
    resume_text: str | None = None


class StructureResponse(BaseModel):
    suggestions: list[StructuralSuggestion]
    section_order: SectionOrderValidation

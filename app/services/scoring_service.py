from __future__ import annotations

import logging
import time

from app.core.config import settings
from app.schemas.resume import ParsedSections
from app.schemas.scan import (
    GapRequest,
    GapResponse,
    ScanRequest,
    ScanResponse,
    StructureRequest,
    StructureResponse,
)
from app.scoring.ats_score import calculate_ats_score
from app.scoring.gap_addressability import filter_gaps_for_section, process_gap_addressability
from app.scoring.keyword_match import coerce_keywords, match_keywords
from app.scoring.section_ordering import detect_section_order, validate_section_order
from app.scoring.structural_suggestions import generate_structural_suggestions

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
RESUME_TEXT_MISSING = "RESUME_TEXT_MISSING"


class ScoringServiceError(RuntimeError):
    def __init__(self, message: str, *, code: str = VALIDATION_ERROR, status_code: int = 422):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


def _resume_text(resume_text: str | None, parsed: ParsedSections) -> str:
    text = resume_text or ""
    if len(text) > settings.max_resume_chars:
        raise ScoringServiceError(
            f"resume_text exceeds {settings.max_resume_chars} characters",
            code=VALIDATION_ERROR,
            status_code=413,
        )
    if text.strip():
        return text
    fallback = parsed.combined_text()
    if not fallback.strip():
        raise ScoringServiceError(
            "Resume text is missing; extract the resume before scoring",
            code=RESUME_TEXT_MISSING,
        )
    return fallback


def _check_job_description(job_description: str | None) -> None:
    if job_description and len(job_description) > settings.max_resume_chars:
        raise ScoringServiceError(
            f"job_description exceeds {settings.max_resume_chars} characters",
            code=VALIDATION_ERROR,
            status_code=413,
        )


def _check_keywords(keywords: list) -> None:
    if len(keywords) > settings.max_keywords:
        raise ScoringServiceError(
            f"At most {settings.max_keywords} keywords can be scored per request",
            code=VALIDATION_ERROR,
        )


def _section_order(requested: list[str] | None, resume_text: str) -> list[str]:
    if requested is not None:
        return [section.strip().lower() for section in requested if section and section.strip()]
    return detect_section_order(resume_text)


def run_scan(payload: ScanRequest) -> ScanResponse:
    started = time.perf_counter()
    parsed = payload.parsed_sections or ParsedSections()
    resume_text = _resume_text(payload.resume_text, parsed)
    _check_keywords(payload.keywords)
    _check_job_description(payload.job_description)

    analysis = match_keywords(
        resume_text,
        coerce_keywords(payload.keywords),
        sections=parsed,
        analyzed_at=payload.analyzed_at,
    )
    score = calculate_ats_score(
        analysis,
        resume_text,
        parsed,
        candidate_type=payload.candidate_type,
        job_description=payload.job_description,
    )
    gaps = process_gap_addressability(analysis, resume_text, parsed)

    order = _section_order(payload.section_order, resume_text)
    suggestions = generate_structural_suggestions(
        payload.candidate_type,
        parsed,
        order,
        raw_resume_text=resume_text,
    )
    order_validation = validate_section_order(order, payload.candidate_type)

    logger.info(
        "scan_completed score=%s tier=%s role=%s matched=%s missing=%s suggestions=%s elapsed_ms=%s",
        score.score,
        score.tier,
        score.role.role_type if score.role else "-",
        len(analysis.matched),
        len(analysis.missing),
        len(suggestions),
        int((time.perf_counter() - started) * 1000),
    )
    return ScanResponse(
        analysis=analysis,
        score=score,
        gaps=gaps,
        structural_suggestions=suggestions,
        section_order=order_validation,
    )


def run_gap_analysis(payload: GapRequest) -> GapResponse:
    parsed = payload.parsed_sections or ParsedSections()
    resume_text = _resume_text(payload.resume_text, parsed)

    analysis = payload.analysis
    if analysis is None:
        _check_keywords(payload.keywords)
        analysis = match_keywords(
            resume_text,
            coerce_keywords(payload.keywords),
            sections=parsed,
            analyzed_at=payload.analyzed_at,
        )

    gaps = process_gap_addressability(analysis, resume_text, parsed)
    buckets = filter_gaps_for_section(gaps.processed_gaps, payload.section) if payload.section else None
    logger.info(
        "gap_analysis_completed total=%s terminology=%s unfixable=%s section=%s",
        gaps.summary.total_gaps,
        gaps.summary.terminology_fixes,
        gaps.summary.unfixable_gaps,
        payload.section or "-",
    )
    return GapResponse(analysis=analysis, gaps=gaps, buckets=buckets)


def run_structural_check(payload: StructureRequest) -> StructureResponse:
    parsed = payload.parsed_sections or ParsedSections()
    resume_text = payload.resume_text or ""
    order = _section_order(payload.section_order, resume_text)
    try:
        suggestions = generate_structural_suggestions(
            payload.candidate_type,
            parsed,
            order,
            raw_resume_text=resume_text or None,
        )
        order_validation = validate_section_order(order, payload.candidate_type)
    except ValueError as exc:
        raise ScoringServiceError(str(exc), code=VALIDATION_ERROR) from exc

    logger.info(
        "structural_check_completed candidate_type=%s suggestions=%s",
        payload.candidate_type,
        len(suggestions),
    )
    return StructureResponse(suggestions=suggestions, section_order=order_validation)

"""Infer the role family and seniority a job description is hiring for.

The result only shifts how the composite score weighs its components; it never
changes a component score.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from app.normalize.utils import find_term
from app.schemas.scoring import RoleDetectionResult
from app.scoring.constants import get_scoring_constants

logger = logging.getLogger(__name__)

_TITLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:job\s+title|position|role)\s*:\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"^([A-Z][A-Za-z ]+(?:Engineer|Developer|Manager|Designer|Analyst|Specialist))", re.MULTILINE),
)


def _best_match(text: str, table: Mapping[str, tuple[str, ...]], default: str) -> tuple[str, float]:
    """Entry whose terms cover the largest share of its list; earlier entries win ties."""
    best, best_share = default, 0.0
    for name, terms in table.items():
        if not terms:
            continue
        share = sum(1 for term in terms if find_term(text, term)) / len(terms)
        if share > best_share:
            best, best_share = name, share
    return best, best_share


def extract_role_title(job_description: str | None) -> str | None:
    text = job_description or ""
    for pattern in _TITLE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def detect_role(job_description: str | None) -> RoleDetectionResult:
    text = job_description or ""
    if not text.strip():
        return RoleDetectionResult()

    roles = get_scoring_constants().roles
    role_type, role_share = _best_match(text, roles.keywords, "general")
    seniority, seniority_share = _best_match(text, roles.seniority, "mid")
    result = RoleDetectionResult(
        role_type=role_type,
        seniority_level=seniority,
        confidence=(role_share + seniority_share) / 2,
        role_title=extract_role_title(text),
    )
    logger.debug(
        "role_detection role=%s seniority=%s confidence=%.2f",
        result.role_type,
        result.seniority_level,
        result.confidence,
    )
    return result

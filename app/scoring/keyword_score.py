from __future__ import annotations

import logging

from app.schemas.analysis import KeywordAnalysisResult
from app.schemas.scoring import KeywordScoreResult
from app.scoring.constants import get_scoring_constants
from app.scoring.rounding import clamp_score

logger = logging.getLogger(__name__)


def _placement_weight(placement: str) -> float:
    weights = get_scoring_constants().keywords.placement_weights
    return weights.get(placement, weights.get("other", 0.0))


def calculate_placement_score(analysis: KeywordAnalysisResult | None) -> int:
    """How prominently matched keywords are placed, 100 when all sit in the skills section.

    Keywords without a recorded placement are left out.
    """
    if analysis is None:
        return 0
    importance_weights = get_scoring_constants().keywords.importance_weights
    earned = 0.0
    possible = 0.0
    for item in analysis.matched:
        if item.placement is None:
            continue
        weight = importance_weights.get(item.importance, importance_weights["medium"])
        earned += weight * _placement_weight(item.placement)
        possible += weight
    return clamp_score(earned / possible * 100) if possible > 0 else 0


def calculate_keyword_score(analysis: KeywordAnalysisResult | None) -> KeywordScoreResult:
    """Weighted keyword coverage with a capped penalty for missing high-importance terms.

    Each keyword is worth its importance weight; a matched keyword earns that weight
    scaled by how it matched. Every missing high-importance keyword takes a further
    share off the base score, but never more than the configured floor allows.
    """
    if analysis is None or analysis.total_count == 0:
        return KeywordScoreResult(
            score=0,
            matched_count=0,
            total_count=0,
            weighted_match_score=0,
            missing_high_importance=0,
            penalty_applied=0,
        )

    constants = get_scoring_constants().keywords
    importance_weights = constants.importance_weights
    match_weights = constants.match_weights

    earned = 0.0
    possible = 0.0
    for item in analysis.matched:
        weight = importance_weights.get(item.importance, importance_weights["medium"])
        earned += weight * match_weights.get(item.match_type, 0.0)
        possible += weight
    for item in analysis.missing:
        possible += importance_weights.get(item.importance, importance_weights["medium"])

    base = (earned / possible * 100) if possible > 0 else 0.0
    missing_high = sum(1 for item in analysis.missing if item.importance == "high")
    multiplier = max(1.0 - constants.missing_high_penalty * missing_high, constants.min_penalty_multiplier)
    score = clamp_score(base * multiplier)

    logger.debug(
        "keyword_score base=%.2f missing_high=%s multiplier=%.2f score=%s",
        base,
        missing_high,
        multiplier,
        score,
    )
    return KeywordScoreResult(
        score=score,
        matched_count=len(analysis.matched),
        total_count=analysis.total_count,
        weighted_match_score=clamp_score(base),
        missing_high_importance=missing_high,
        penalty_applied=clamp_score((1.0 - multiplier) * 100),
        placement_score=calculate_placement_score(analysis),
    )


def generate_keyword_action_items(analysis: KeywordAnalysisResult | None) -> list[str]:
    if analysis is None:
        return []

    items: list[str] = []
    missing_high = [item.keyword for item in analysis.missing if item.importance == "high"]
    if missing_high:
        items.append(f"Add critical keywords: {', '.join(missing_high[:3])}")

    missing_medium = [item.keyword for item in analysis.missing if item.importance == "medium"]
    if missing_medium:
        items.append(f"Consider adding: {', '.join(missing_medium[:3])}")

    semantic = [item.keyword for item in analysis.matched if item.match_type == "semantic"]
    if semantic:
        items.append(f"Use exact terminology for: {', '.join(semantic[:2])}")

    threshold = get_scoring_constants().keywords.buried_placement_below
    buried = [
        item.keyword
        for item in analysis.matched
        if item.placement is not None and _placement_weight(item.placement) < threshold
    ]
    if buried:
        items.append(f"Feature in your skills or summary section: {', '.join(buried[:3])}")
    return items

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable

from app.normalize.utils import (
    is_bullet_like,
    line_containing,
    normalize_line,
    section_for_heading,
    term_pattern,
    tokenize,
)
from app.schemas.analysis import ExtractedKeyword, KeywordAnalysisResult, MatchedKeyword
from app.schemas.resume import ParsedSections
from app.scoring.constants import get_scoring_constants
from app.scoring.rounding import round_half_up
from app.taxonomy import get_default_taxonomy_provider
from app.taxonomy.provider import TaxonomyProvider

logger = logging.getLogger(__name__)

# Raw resume words keep inner punctuation so "React.js" and "CI/CD" survive as one token.
_RAW_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9\+#\./\-]*")
_COMPACT_STRIP = re.compile(r"[^a-z0-9\+#]")
_JS_SUFFIX = re.compile(r"(?<=[a-z0-9])\.?js$")

_SEARCH_ORDER: tuple[str, ...] = ("skills", "summary", "experience", "projects", "education", "certifications")
_MAX_NGRAM = 4


def _is_js_form(term: str) -> bool:
    return bool(_JS_SUFFIX.search(term.strip().lower()))


def _compact(term: str) -> str:
    """Spelling-insensitive key: lowercase, no punctuation, no .js suffix, singular."""
    lowered = term.strip().lower()
    lowered = _JS_SUFFIX.sub("", lowered)
    compact = _COMPACT_STRIP.sub("", lowered)
    if len(compact) > 3 and compact.endswith("es") and compact[-3] in "sxz":
        compact = compact[:-2]
    elif len(compact) > 3 and compact.endswith("s") and not compact.endswith("ss"):
        compact = compact[:-1]
    return compact


def coerce_keywords(keywords: Iterable[Any] | None) -> list[ExtractedKeyword]:
    """Validate untrusted extractor output, dropping blanks and case-insensitive duplicates."""
    coerced: list[ExtractedKeyword] = []
    seen: set[str] = set()
    for item in keywords or []:
        if isinstance(item, ExtractedKeyword):
            keyword = item
        elif isinstance(item, dict):
            keyword = ExtractedKeyword(
                keyword=item.get("keyword"),
                category=item.get("category"),
                importance=item.get("importance"),
            )
        elif isinstance(item, str):
            keyword = ExtractedKeyword(keyword=item)
        else:
            continue
        key = keyword.keyword.lower()
        if not key or key in seen:
            continue
        seen.add(key)
        coerced.append(keyword)
    return coerced


def _search_corpus(resume_text: str, sections: ParsedSections) -> list[tuple[str | None, str]]:
    corpus: list[tuple[str | None, str]] = []
    for name in _SEARCH_ORDER:
        text = sections.text_for(name)
        if text.strip():
            corpus.append((name, text))
    if resume_text.strip():
        corpus.append((None, resume_text))
    return corpus


def _section_at(text: str, position: int) -> str | None:
    current: str | None = None
    for line in text[:position].splitlines():
        section = section_for_heading(normalize_line(line))
        if section:
            current = section
    return current


def _placement(section: str | None, line: str) -> str:
    if section == "skills":
        return "skills_section"
    if section == "summary":
        return "summary"
    if section == "experience":
        return "experience_bullet" if is_bullet_like(line) else "experience_paragraph"
    if section == "projects":
        return "projects"
    if section in {"education", "certifications"}:
        return "education"
    return "other"


def _context(line: str, max_chars: int) -> str:
    cleaned = normalize_line(line)
    if len(cleaned) <= max_chars:
        return cleaned
    return cleaned[: max_chars - 3].rstrip() + "..."


def _locate(section: str | None, text: str, start: int, max_chars: int) -> tuple[str, str]:
    line = line_containing(text, start)
    if section is None:
        section = _section_at(text, start)
    return _placement(section, line), _context(line, max_chars)


def _find_exact(keyword: str, corpus: list[tuple[str | None, str]]) -> tuple[str | None, str, int] | None:
    pattern = term_pattern(keyword)
    for section, text in corpus:
        match = pattern.search(text)
        if match:
            return section, text, match.start()
    return None


def _find_fuzzy(
    keyword: str,
    corpus: list[tuple[str | None, str]],
    taxonomy: TaxonomyProvider,
) -> tuple[str | None, str, int] | None:
    target = _compact(keyword)
    # "Next.js" must not match the plain word "next"; the resume side needs a JS form too.
    needs_js_form = _is_js_form(keyword)
    if target:
        for section, text in corpus:
            tokens = list(_RAW_TOKEN_PATTERN.finditer(text))
            for index in range(len(tokens)):
                for size in range(1, _MAX_NGRAM + 1):
                    if index + size > len(tokens):
                        break
                    window = tokens[index : index + size]
                    phrase = text[window[0].start() : window[-1].end()].rstrip(".-/")
                    if _compact(phrase) != target:
                        continue
                    if not needs_js_form or _is_js_form(phrase):
                        return section, text, window[0].start()

    for alias in taxonomy.aliases_for(keyword):
        hit = _find_exact(alias, corpus)
        if hit:
            return hit
    return None


def _concept_ids(text: str, taxonomy: TaxonomyProvider) -> set[str]:
    words = tokenize(text)
    concept_ids: set[str] = set()
    for n in (1, 2, 3):
        for idx in range(0, len(words) - n + 1):
            _, concept_id = taxonomy.normalize_skill(" ".join(words[idx : idx + n]))
            if concept_id:
                concept_ids.add(concept_id)
    return concept_ids


def _find_semantic(
    keyword: str,
    corpus: list[tuple[str | None, str]],
    taxonomy: TaxonomyProvider,
) -> tuple[str | None, str, int] | None:
    _, direct = taxonomy.normalize_skill(keyword)
    wanted = _concept_ids(keyword, taxonomy)
    if direct:
        wanted.add(direct)
    if not wanted:
        return None

    for section, text in corpus:
        offset = 0
        for line in text.splitlines(keepends=True):
            if wanted & _concept_ids(line, taxonomy):
                return section, text, offset
            offset += len(line)
    return None


def match_keywords(
    resume_text: str | None,
    keywords: Iterable[Any] | None,
    *,
    sections: ParsedSections | dict | None = None,
    taxonomy_provider: TaxonomyProvider | None = None,
    analyzed_at: datetime | None = None,
) -> KeywordAnalysisResult:
    """Classify each extracted keyword as matched (exact, fuzzy, semantic) or missing.

    Tiers are tried in order and the first hit wins, so a keyword present verbatim
    is never reported as a weaker match. Section texts are searched before the raw
    resume text so placement can be attributed to a section when one is known.
    """
    constants = get_scoring_constants().keywords
    taxonomy = taxonomy_provider or get_default_taxonomy_provider()
    parsed = ParsedSections.coerce(sections)
    corpus = _search_corpus(resume_text or "", parsed)

    matched: list[MatchedKeyword] = []
    missing: list[ExtractedKeyword] = []
    for keyword in coerce_keywords(keywords):
        match_type = "exact"
        hit = _find_exact(keyword.keyword, corpus)
        if hit is None:
            match_type = "fuzzy"
            hit = _find_fuzzy(keyword.keyword, corpus, taxonomy)
        if hit is None:
            match_type = "semantic"
            hit = _find_semantic(keyword.keyword, corpus, taxonomy)
        if hit is None:
            missing.append(keyword)
            continue

        section, text, start = hit
        placement, context = _locate(section, text, start, constants.context_max_chars)
        matched.append(
            MatchedKeyword(
                keyword=keyword.keyword,
                category=keyword.category,
                match_type=match_type,
                importance=keyword.importance,
                placement=placement,
                context=context or None,
            )
        )

    total = len(matched) + len(missing)
    match_rate = round_half_up(len(matched) / total * 100) if total else 0
    logger.debug(
        "keyword_match matched=%s missing=%s match_rate=%s",
        len(matched),
        len(missing),
        match_rate,
    )
    return KeywordAnalysisResult(
        matched=matched,
        missing=missing,
        match_rate=match_rate,
        analyzed_at=analyzed_at or datetime.now(timezone.utc),
    )

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

SectionType = Literal["summary", "skills", "experience", "education", "projects", "format"]
CandidateType = Literal["coop", "career_changer", "fulltime"]

SECTION_TYPES: tuple[str, ...] = ("summary", "skills", "experience", "education", "projects", "format")
CANDIDATE_TYPES: tuple[str, ...] = ("coop", "career_changer", "fulltime")


def _flatten_section(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        parts = [_flatten_section(item) for item in value]
        joined = "\n".join(part for part in parts if part)
        return joined or None
    if isinstance(value, dict):
        parts = [_flatten_section(item) for item in value.values()]
        joined = "\n".join(part for part in parts if part)
        return joined or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


class ParsedSections(BaseModel):
    """Structured breakdown of a resume as produced by the external text extractor.

    Every section is optional. List or mapping payloads (for example one entry per
    job under ``experience``) are flattened to newline-joined text so scorers only
    ever see ``str | None``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    contact: str | None = None
    summary: str | None = None
    skills: str | None = None
    experience: str | None = None
    education: str | None = None
    projects: str | None = None
    certifications: str | None = None
    other: str | None = None

    @field_validator(
        "contact",
        "summary",
        "skills",
        "experience",
        "education",
        "projects",
        "certifications",
        "other",
        mode="before",
    )
    @classmethod
    def _flatten(cls, value: Any) -> str | None:
        return _flatten_section(value)

    @classmethod
    def coerce(cls, value: Any) -> "ParsedSections":
        if isinstance(value, ParsedSections):
            return value
        if isinstance(value, dict):
            return cls.model_validate(value)
        return cls()

    def text_for(self, section: str) -> str:
        value = getattr(self, section, None)
        return value if isinstance(value, str) else ""

    def has(self, section: str) -> bool:
        return bool(self.text_for(section).strip())

    def combined_text(self) -> str:
        chunks = [
            self.summary,
            self.skills,
            self.experience,
            self.education,
            self.projects,
            self.certifications,
        ]
        return "\n".join(chunk for chunk in chunks if chunk)

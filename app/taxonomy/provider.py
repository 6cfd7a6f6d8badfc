from __future__ import annotations

from typing import Protocol


class TaxonomyProvider(Protocol):
    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        """Return normalized text and optional canonical concept ID."""

    def aliases_for(self, term: str) -> tuple[str, ...]:
        """Return abbreviation or spelling variants that name the same term."""

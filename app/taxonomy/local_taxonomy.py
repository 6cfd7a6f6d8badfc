from __future__ import annotations

import json
from pathlib import Path

from .provider import TaxonomyProvider


class LocalTaxonomy(TaxonomyProvider):
    def __init__(
        self,
        synonyms_path: str | Path | None = None,
        aliases_path: str | Path | None = None,
    ) -> None:
        synonyms = Path(synonyms_path) if synonyms_path else Path(__file__).with_name("synonyms.json")
        aliases = Path(aliases_path) if aliases_path else Path(__file__).with_name("aliases.json")
        self._synonyms = self._load_synonyms(synonyms)
        self._aliases = self._load_aliases(aliases)

    @staticmethod
    def _load_synonyms(path: Path) -> dict[str, str]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        return {str(key).strip().lower(): str(value) for key, value in raw.items()}

    @staticmethod
    def _load_aliases(path: Path) -> dict[str, tuple[str, ...]]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)

        # Alias groups are symmetric: every member resolves to the others.
        groups: dict[str, set[str]] = {}
        for key, values in raw.items():
            members = {str(key).strip().lower()}
            members.update(str(value).strip().lower() for value in values)
            members.discard("")
            for member in members:
                groups.setdefault(member, set()).update(members - {member})
        return {term: tuple(sorted(variants)) for term, variants in groups.items()}

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        normalized = raw.strip().lower()
        canonical_skill_id = self._synonyms.get(normalized)
        return normalized, canonical_skill_id

    def aliases_for(self, term: str) -> tuple[str, ...]:
        return self._aliases.get(term.strip().lower(), ())

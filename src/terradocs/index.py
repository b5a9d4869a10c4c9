"""Resource search over the provider catalogs.

Pure business logic: receives IndexEntry rows, returns ranked identifiers.
No knowledge of AppState, MCP, or I/O.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from rapidfuzz import fuzz, process

from terradocs.models.docs import ResourceKind
from terradocs.models.registry import IndexEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from terradocs.models.docs import ResourceIdentifier
    from terradocs.protocols import ProviderModule

_KIND_ORDER = {ResourceKind.RESOURCE: 0, ResourceKind.DATA_SOURCE: 1}


def normalise_query(raw: str) -> str:
    """Normalise a raw query string for matching.

    Steps:
      1. Lowercase and trim
      2. Collapse internal whitespace and hyphens to ``_``:
         "S3 Bucket" → "s3_bucket", "storage-account" → "storage_account"
    """
    query = raw.lower().strip()
    return re.sub(r"[\s\-]+", "_", query)


def tokenize(text: str) -> frozenset[str]:
    return frozenset(t for t in re.split(r"[^a-z0-9]+", text.lower()) if t)


def entries_for(provider: ProviderModule) -> list[IndexEntry]:
    """Index rows for one provider, enriched with its catalog metadata."""
    catalog = {(c.kind, c.name): c for c in provider.catalog()}
    entries: list[IndexEntry] = []
    for identifier in provider.list_resources():
        meta = catalog.get((identifier.kind, identifier.name))
        category = meta.category if meta else ""
        entries.append(
            IndexEntry(
                identifier=identifier,
                display_name=identifier.name,
                tokens=tokenize(identifier.name) | tokenize(category),
                category=category,
                description=meta.description if meta else "",
            )
        )
    return entries


def _tie_break(entry: IndexEntry) -> tuple[str, int, str]:
    identifier = entry.identifier
    return identifier.name, _KIND_ORDER[identifier.kind], identifier.provider


class SearchIndex:
    """Ranked lookup over every indexed resource and data source.

    Ranking tiers: exact name (full or short), prefix, substring, then fuzzy
    token overlap. Ties break by name, then kind (resource first), then
    provider. Fuzzy matches sort by score before the tie-break.
    """

    def __init__(self, entries: Iterable[IndexEntry], *, fuzzy_score_cutoff: int = 70) -> None:
        unique = {e.identifier: e for e in entries}
        self._entries = sorted(unique.values(), key=_tie_break)
        self._by_identifier = unique
        self._fuzzy_score_cutoff = fuzzy_score_cutoff

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_identifier

    def entry(self, identifier: ResourceIdentifier) -> IndexEntry | None:
        return self._by_identifier.get(identifier)

    def search(
        self,
        query: str,
        *,
        kind: ResourceKind | str | None = None,
        provider: str | None = None,
        limit: int | None = None,
    ) -> list[ResourceIdentifier]:
        """Return matching identifiers, best first. No match is an empty list."""
        wanted_kind = ResourceKind.parse(kind) if kind is not None else None
        candidates = [
            e
            for e in self._entries
            if (wanted_kind is None or e.identifier.kind == wanted_kind)
            and (provider is None or e.identifier.provider == provider)
        ]

        normalised = normalise_query(query)
        if not normalised:
            ranked = candidates
        else:
            exact: list[IndexEntry] = []
            prefix: list[IndexEntry] = []
            substring: list[IndexEntry] = []
            rest: list[IndexEntry] = []
            for entry in candidates:
                name = entry.identifier.name
                short = entry.identifier.short_name
                if normalised in (name, short):
                    exact.append(entry)
                elif name.startswith(normalised) or short.startswith(normalised):
                    prefix.append(entry)
                elif normalised in name:
                    substring.append(entry)
                else:
                    rest.append(entry)
            ranked = exact + prefix + substring + self._fuzzy(normalised, rest)

        if limit is not None:
            ranked = ranked[:limit]
        return [e.identifier for e in ranked]

    def _fuzzy(self, query: str, pool: list[IndexEntry]) -> list[IndexEntry]:
        """Token-overlap match of the query against name and category tokens."""
        if not pool:
            return []
        results = process.extract(
            " ".join(tokenize(query.replace("_", " "))),
            [" ".join(sorted(e.tokens)) for e in pool],
            scorer=fuzz.token_set_ratio,
            limit=None,
            score_cutoff=self._fuzzy_score_cutoff,
        )
        scored = [(score, pool[idx]) for _choice, score, idx in results]
        scored.sort(key=lambda item: (-item[0], _tie_break(item[1])))
        return [entry for _score, entry in scored]


def build_index(entries: Iterable[IndexEntry], *, fuzzy_score_cutoff: int = 70) -> SearchIndex:
    return SearchIndex(entries, fuzzy_score_cutoff=fuzzy_score_cutoff)

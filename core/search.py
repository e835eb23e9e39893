"""Substance search helpers for the CAS picker typeahead."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class SubstanceItem:
    """A selectable substance.

    Attributes:
        cas_number: CAS registry number.
        chemical_name: Optional display name.
    """

    cas_number: str
    chemical_name: str | None = None

    @property
    def label(self) -> str:
        """Return the display label (name when known, CAS otherwise)."""

        return self.chemical_name or self.cas_number

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        payload: dict[str, object] = {"cas_number": self.cas_number}
        if self.chemical_name:
            payload["chemical_name"] = self.chemical_name
        return payload


def parse_cas_list(payload: Any) -> list[SubstanceItem]:
    """Decode the upstream CAS list payload.

    ``cas_with_names`` is either a list of ``{cas_number, chemical_name}``
    objects or a mapping of CAS number to name.

    Args:
        payload: Decoded `/api/cas-list` response.

    Returns:
        Substances in upstream order; malformed entries are skipped.
    """

    if not isinstance(payload, Mapping):
        return []
    raw = payload.get("cas_with_names")
    items: list[SubstanceItem] = []
    if isinstance(raw, Mapping):
        for cas, name in raw.items():
            items.append(SubstanceItem(cas_number=str(cas), chemical_name=_clean_name(name)))
    elif isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, Mapping) or not entry.get("cas_number"):
                continue
            items.append(
                SubstanceItem(
                    cas_number=str(entry["cas_number"]),
                    chemical_name=_clean_name(entry.get("chemical_name")),
                )
            )
    return items


def match_score(*, query: str, item: SubstanceItem) -> int | None:
    """Return a match score for ordering results, or None when `item` does not match.

    Prefix matches rank above substring matches; CAS matches rank above name
    matches at equal position.
    """

    q = _normalize(query)
    if not q:
        return None
    best: int | None = None
    for candidate, bonus in ((item.cas_number, 100), (item.chemical_name or "", 0)):
        start = _normalize(candidate).find(q)
        if start < 0:
            continue
        score = (9_000 if start == 0 else 7_000 - start) + bonus
        best = score if best is None else max(best, score)
    return best


def filter_substances(
    items: Iterable[SubstanceItem],
    *,
    query: str,
    exclude: Iterable[str] = (),
    limit: int = 10,
) -> list[SubstanceItem]:
    """Return substances matching `query` by CAS number or name.

    Args:
        items: Candidate substances.
        query: Raw user query (case-insensitive substring).
        exclude: CAS numbers already selected.
        limit: Maximum number of results.

    Returns:
        Ordered matches, best first; ties keep upstream order.
    """

    excluded = set(exclude)
    scored: list[tuple[int, int, SubstanceItem]] = []
    for position, item in enumerate(items):
        if item.cas_number in excluded:
            continue
        score = match_score(query=query, item=item)
        if score is None:
            continue
        scored.append((-score, position, item))
    scored.sort(key=lambda row: (row[0], row[1]))
    return [item for _, _, item in scored[:limit]]


def _normalize(text: str) -> str:
    """Normalize a string for case-insensitive matching."""

    return " ".join(text.strip().lower().split())


def _clean_name(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

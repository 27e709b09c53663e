"""Prefix filtering and rendering of completion candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class CompletionSuggestion:
    """A single completion entry shown by the shell."""

    value: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"value": self.value, "label": self.label}


def filter_candidates(candidates: Iterable[str], prefix: str | None, *, case_sensitive: bool = False) -> list[str]:
    """Return the candidates starting with *prefix*, sorted ascending.

    An empty prefix matches everything.  Duplicates are kept.  With
    case-insensitive matching the sort ignores case too, falling back
    to the raw value so the order is deterministic.
    """
    prefix = prefix or ""
    if case_sensitive:
        return sorted(c for c in candidates if c.startswith(prefix))

    folded = prefix.casefold()
    matches = [c for c in candidates if c.casefold().startswith(folded)]
    return sorted(matches, key=lambda c: (c.casefold(), c))


def to_suggestions(names: Iterable[str]) -> list[CompletionSuggestion]:
    """Render names as (value, label) suggestions."""
    return [CompletionSuggestion(value=name, label=name) for name in names]

"""Structured photo filter produced by the query parser."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class FilterPredicate:
    """
    Immutable set of optional photo filters.

    ``date_from`` is inclusive and ``date_to`` exclusive. A photo matches
    ``tags`` when it carries any one of them. ``person_reference`` is the
    raw word captured from the query and still has to be resolved to face
    groups by the caller. A predicate with no fields set matches everything.
    """

    date_from: datetime | None = None
    date_to: datetime | None = None
    location_substring: str | None = None
    tags: tuple[str, ...] = ()
    person_reference: str | None = None
    description_substring: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.to_dict()

    @property
    def has_date_range(self) -> bool:
        return self.date_from is not None or self.date_to is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the fields that are set, using their wire names."""
        result: dict[str, Any] = {}
        if self.date_from is not None:
            result["dateFrom"] = self.date_from.isoformat()
        if self.date_to is not None:
            result["dateTo"] = self.date_to.isoformat()
        if self.location_substring:
            result["locationSubstring"] = self.location_substring
        if self.tags:
            result["tags"] = list(self.tags)
        if self.person_reference:
            result["personReference"] = self.person_reference
        if self.description_substring:
            result["descriptionSubstring"] = self.description_substring
        return result

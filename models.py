"""Shared typed models for the grant sync."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class Grant:
    """One funding grant: funder name plus optional award reference."""

    name: str
    reference: str | None = None


@dataclass(frozen=True, slots=True)
class RepositoryItem:
    """An eScholarship item as returned by the item-listing query."""

    item_id: str
    title: str
    added: str
    pub_id: str | None
    grant_names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemPage:
    """One page of the item listing; ``more`` is None on the last page."""

    total: int
    more: str | None
    items: list[RepositoryItem] = field(default_factory=list)


class OutcomeKind(StrEnum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


@dataclass(frozen=True, slots=True)
class ScanOutcome:
    """Result of comparing the feed's grants with the item's grants."""

    kind: OutcomeKind
    old: str = ""
    new: str = ""

    @property
    def funding(self) -> str:
        """Human-readable summary for the result log's funding column."""
        if self.kind is OutcomeKind.ADDED:
            return self.new
        if self.kind is OutcomeKind.REMOVED:
            return self.old
        if self.kind is OutcomeKind.CHANGED:
            return f"from {self.old} to {self.new}"
        return ""


@dataclass(slots=True)
class ScanTotals:
    """Per-run counters reported when the sync finishes."""

    scanned: int = 0
    reported: int = 0
    updated: int = 0

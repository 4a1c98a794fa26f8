"""Protocol interfaces for the scanner's collaborators."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from grants import FeedRecord
from models import Grant, ItemPage, RepositoryItem, ScanOutcome


class ItemListerInterface(Protocol):
    """Paged listing of a unit's Elements-sourced items."""

    def list_items(self, unit: str, more: str | None = None) -> ItemPage: ...


class FeedInterface(Protocol):
    """Per-publication grants lookup."""

    def fetch_grants(self, pub_id: str) -> FeedRecord | None: ...


class UpdaterInterface(Protocol):
    """Persists a new funding list for an item."""

    def replace_funding(self, item_id: str, grants: Sequence[Grant]) -> None: ...


class ResultLogInterface(Protocol):
    """Append-only audit log of funding differences."""

    def write(self, unit: str, item: RepositoryItem, outcome: ScanOutcome) -> None: ...

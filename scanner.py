"""Scan Elements-sourced eScholarship items and sync their funding.

Items are processed strictly one at a time, unit by unit in configured
order, oldest first within a unit. Any failure aborts the whole run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from classifier import classify
from config import RunMode
from errors import ConfigurationError, GrantSyncError, ItemScanError, MissingIdentifierError
from filters import feed_publication_title, is_title_drifted
from grants import ItemRecord, grant_summary
from interfaces import FeedInterface, ItemListerInterface, ResultLogInterface, UpdaterInterface
from models import OutcomeKind, RepositoryItem, ScanOutcome, ScanTotals

LOGGER = logging.getLogger(__name__)


class GrantScanner:
    """Fetch, compare and (optionally) apply Elements funding per item."""

    def __init__(
        self,
        *,
        lister: ItemListerInterface,
        feed: FeedInterface,
        updater: UpdaterInterface,
        results: ResultLogInterface,
        mode: RunMode | None,
        title_drift_guard: bool = False,
    ) -> None:
        if mode is None:
            raise ConfigurationError("either --test or --go must be specified")
        self.lister = lister
        self.feed = feed
        self.updater = updater
        self.results = results
        self.mode = mode
        self.title_drift_guard = title_drift_guard
        self.totals = ScanTotals()

    def scan_all(self, units: Sequence[str]) -> ScanTotals:
        """Drain every unit in order and return the run totals."""
        for unit in units:
            self.scan_unit(unit)
        LOGGER.info(
            "All done. scanned=%s reported=%s updated=%s",
            self.totals.scanned,
            self.totals.reported,
            self.totals.updated,
        )
        return self.totals

    def scan_unit(self, unit: str) -> int:
        """Page through one unit until the listing returns no cursor."""
        more: str | None = None
        total: int | None = None
        done = 0
        while True:
            page = self.lister.list_items(unit, more)
            if total is None:
                total = page.total
                LOGGER.info("Scanning %s pubs for %s.", total, unit)

            for item in page.items:
                self.scan_item(unit, item)
                done += 1

            LOGGER.info("Scanned %s of %s pubs for %s.", done, total, unit)
            more = page.more
            if not more:
                return done

    def scan_item(self, unit: str, item: RepositoryItem) -> ScanOutcome | None:
        """Scan one item; returns None when there was nothing to compare.

        Raises ItemScanError wrapping whatever went wrong, tagged with the
        item's identifiers.
        """
        try:
            outcome = self._scan_item(unit, item)
        except ItemScanError:
            raise
        except Exception as exc:
            raise ItemScanError(unit, item.item_id, item.pub_id, exc) from exc
        self.totals.scanned += 1
        return outcome

    def _scan_item(self, unit: str, item: RepositoryItem) -> ScanOutcome | None:
        if not item.pub_id:
            raise MissingIdentifierError(
                f"can't find OA_PUB_ID in item_id={item.item_id} whose source is 'oa_harvester'"
            )

        record = self.feed.fetch_grants(item.pub_id)
        if record is None:
            return None

        if self.title_drift_guard:
            feed_title = feed_publication_title(record.title)
            if is_title_drifted(feed_title, item.title):
                LOGGER.warning(
                    "%s (pub %s): skipping much-changed title: %r vs %r",
                    item.item_id,
                    item.pub_id,
                    item.title,
                    feed_title,
                )
                return None

        outcome = classify(grant_summary(record), grant_summary(ItemRecord(item)))
        if outcome.kind is OutcomeKind.UNCHANGED:
            return outcome

        self._log_outcome(item, outcome)
        self.results.write(unit, item, outcome)
        self.totals.reported += 1

        if self.mode is RunMode.DRY_RUN:
            LOGGER.info("  (not changing due to dry-run mode)")
        elif self.mode is RunMode.APPLY:
            self.updater.replace_funding(item.item_id, record.grants)
            self.totals.updated += 1
            LOGGER.info("  Updated.")
        else:
            raise GrantSyncError(f"unknown run mode {self.mode!r}")
        return outcome

    @staticmethod
    def _log_outcome(item: RepositoryItem, outcome: ScanOutcome) -> None:
        if outcome.kind is OutcomeKind.ADDED:
            LOGGER.info("%s (pub %s): funding added: %r", item.item_id, item.pub_id, outcome.new)
        elif outcome.kind is OutcomeKind.REMOVED:
            LOGGER.info("%s (pub %s): funding removed: %r", item.item_id, item.pub_id, outcome.old)
        else:
            LOGGER.info(
                "%s (pub %s): funding changed from %r to %r.",
                item.item_id,
                item.pub_id,
                outcome.old,
                outcome.new,
            )

"""Classify the difference between two canonical grant summaries."""

from __future__ import annotations

from models import OutcomeKind, ScanOutcome


def classify(feed_summary: str, item_summary: str) -> ScanOutcome:
    """Compare the feed's grants with the item's grants.

    An empty item summary is reported as added and an empty feed summary as
    removed; only when both sides have grants is the outcome "changed".
    """
    if feed_summary == item_summary:
        return ScanOutcome(OutcomeKind.UNCHANGED)
    if not item_summary:
        return ScanOutcome(OutcomeKind.ADDED, new=feed_summary)
    if not feed_summary:
        return ScanOutcome(OutcomeKind.REMOVED, old=item_summary)
    return ScanOutcome(OutcomeKind.CHANGED, old=item_summary, new=feed_summary)

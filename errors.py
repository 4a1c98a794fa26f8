"""Error types raised by the grant sync.

Every failure here is fatal for the run: nothing is retried and nothing is
skipped, so an operator can fix the cause and re-run from the top.
"""

from __future__ import annotations


class GrantSyncError(RuntimeError):
    """Base class for all grant sync failures."""


class ConfigurationError(GrantSyncError):
    """Missing endpoint/credential or no run mode selected."""


class EscholarshipApiError(GrantSyncError):
    """The eScholarship GraphQL access API returned an error."""


class FeedDataError(GrantSyncError):
    """The Elements feed returned a grant record that cannot be trusted."""


class MissingIdentifierError(GrantSyncError):
    """An item from the Elements harvester has no OA_PUB_ID."""


class UpdateFailedError(GrantSyncError):
    """The ingest tool refused to replace an item's funding."""

    def __init__(self, item_id: str, returncode: int, stderr: str) -> None:
        self.item_id = item_id
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"subiGuts returned code {returncode} for item_id={item_id}. Stderr:\n{stderr}"
        )


class ItemScanError(GrantSyncError):
    """Failure while scanning one item, tagged with that item's identifiers."""

    def __init__(self, unit: str, item_id: str, pub_id: str | None, cause: Exception) -> None:
        self.unit = unit
        self.item_id = item_id
        self.pub_id = pub_id
        self.cause = cause
        super().__init__(
            f"Error scanning unit={unit} item_id={item_id} pub_id={pub_id}: {cause}"
        )

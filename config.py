"""Environment-driven configuration for the grant sync."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import StrEnum

from errors import ConfigurationError

DEFAULT_UNITS = ("lbnl", "rgpo")
DEFAULT_RESULTS_PATH = "results.csv"
DEFAULT_SUBI_GUTS_CMD = "subiGuts.rb"
DEFAULT_CHANGE_REASON = "Funding updated on oapolicy.universityofcalifornia.edu"
DEFAULT_CONTACT = "help@escholarship.org"

_REQUIRED_VARS = (
    "ESCHOL_FRONTEND_URL",
    "ELEMENTS_API_URL",
    "ELEMENTS_API_USERNAME",
    "ELEMENTS_API_PASSWORD",
)
_TRUTHY = frozenset({"1", "true", "yes", "on"})


class RunMode(StrEnum):
    DRY_RUN = "dry-run"
    APPLY = "apply"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Everything the sync needs to know about its environment."""

    eschol_url: str
    elements_url: str
    elements_username: str
    elements_password: str
    units: tuple[str, ...] = DEFAULT_UNITS
    results_path: str = DEFAULT_RESULTS_PATH
    subi_guts_cmd: str = DEFAULT_SUBI_GUTS_CMD
    change_reason: str = DEFAULT_CHANGE_REASON
    contact: str = DEFAULT_CONTACT
    title_drift_guard: bool = False

    def with_overrides(self, **changes: object) -> SyncConfig:
        """Return a copy with the non-None values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_config(environ: dict[str, str] | None = None) -> SyncConfig:
    """Build a SyncConfig from environment variables.

    Raises ConfigurationError naming every missing required variable.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in _REQUIRED_VARS if not env.get(name)]
    if missing:
        raise ConfigurationError(f"missing env {', '.join(missing)}")

    return SyncConfig(
        eschol_url=env["ESCHOL_FRONTEND_URL"].rstrip("/"),
        elements_url=env["ELEMENTS_API_URL"].rstrip("/"),
        elements_username=env["ELEMENTS_API_USERNAME"],
        elements_password=env["ELEMENTS_API_PASSWORD"],
        units=parse_units(env.get("GRANT_SYNC_UNITS")) or DEFAULT_UNITS,
        results_path=env.get("GRANT_SYNC_RESULTS_PATH") or DEFAULT_RESULTS_PATH,
        subi_guts_cmd=env.get("SUBI_GUTS_CMD") or DEFAULT_SUBI_GUTS_CMD,
        change_reason=env.get("GRANT_SYNC_CHANGE_REASON") or DEFAULT_CHANGE_REASON,
        contact=env.get("GRANT_SYNC_CONTACT") or DEFAULT_CONTACT,
        title_drift_guard=(env.get("ELEMENTS_TITLE_DRIFT_GUARD", "").strip().lower() in _TRUTHY),
    )


def parse_units(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated unit list, keeping the given order."""
    if not raw:
        return ()
    return tuple(unit.strip() for unit in raw.split(",") if unit.strip())

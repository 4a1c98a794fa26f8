"""Replace an item's funding in eScholarship through the subiGuts ingest tool."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from lxml import etree

from config import SyncConfig
from errors import UpdateFailedError
from models import Grant

UCI_NAMESPACE = "http://www.cdlib.org/ucingest"
ARK_PREFIX = "ark:/13030/"

LOGGER = logging.getLogger(__name__)


def build_funding_xml(grants: Sequence[Grant]) -> str:
    """Build the UC-Ingest record carrying the new funding list.

    An empty grant list yields a record with no funding element, which
    clears the item's funding.
    """
    nsmap = {"uci": UCI_NAMESPACE}
    root = etree.Element(etree.QName(UCI_NAMESPACE, "record"), nsmap=nsmap)
    if grants:
        funding = etree.SubElement(root, etree.QName(UCI_NAMESPACE, "funding"))
        for grant in grants:
            attrs = {"name": grant.name}
            if grant.reference is not None:
                attrs["reference"] = grant.reference
            etree.SubElement(funding, etree.QName(UCI_NAMESPACE, "grant"), attrs)
    return etree.tostring(root, encoding="unicode")


def short_ark(item_id: str) -> str:
    return item_id.removeprefix(ARK_PREFIX)


class SubiGutsUpdater:
    """Pipe a UC-Ingest funding record into ``subiGuts --replaceFunding``."""

    def __init__(self, config: SyncConfig) -> None:
        self.command = config.subi_guts_cmd
        self.change_reason = config.change_reason
        self.contact = config.contact

    def replace_funding(self, item_id: str, grants: Sequence[Grant]) -> None:
        """Replace the item's funding; raises UpdateFailedError on non-zero exit."""
        cmd = [
            self.command,
            "--replaceFunding",
            short_ark(item_id),
            self.change_reason,
            self.contact,
            "-",
        ]
        LOGGER.debug("Running %s with %s grants", " ".join(cmd), len(grants))
        result = subprocess.run(
            cmd,
            input=build_funding_xml(grants),
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise UpdateFailedError(item_id, result.returncode, result.stderr)

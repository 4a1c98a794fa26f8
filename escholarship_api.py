"""eScholarship GraphQL access API: listing the items harvested from Elements."""

from __future__ import annotations

import logging
from typing import Any

import requests

from config import SyncConfig
from errors import EscholarshipApiError
from models import ItemPage, RepositoryItem

REQUEST_TIMEOUT_SECONDS = 120
PUB_ID_SCHEME = "OA_PUB_ID"

LOGGER = logging.getLogger(__name__)

ITEMS_QUERY = """
query($unit: ID!, $more: String) {
  unit(id: $unit) {
    items(tags: ["source:oa_harvester"], include: [PUBLISHED, EMBARGOED], order: ADDED_ASC, more: $more) {
      total
      more
      nodes {
        id
        title
        added
        grants
        localIDs {
          scheme
          id
        }
      }
    }
  }
}
"""


class EscholarshipClient:
    """Page through a unit's Elements-sourced items, oldest first."""

    def __init__(self, config: SyncConfig, session: requests.Session | None = None) -> None:
        self.graphql_url = f"{config.eschol_url}/graphql"
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def list_items(self, unit: str, more: str | None = None) -> ItemPage:
        """Fetch one page of items for ``unit`` continuing from cursor ``more``."""
        try:
            data = self.query(ITEMS_QUERY, {"unit": unit, "more": more})
        except EscholarshipApiError as exc:
            raise EscholarshipApiError(f"listing unit={unit} more={more}: {exc}") from exc
        unit_block = data.get("unit")
        if not isinstance(unit_block, dict):
            raise EscholarshipApiError(f"unit {unit!r} not found")

        items_block = unit_block.get("items") or {}
        nodes = items_block.get("nodes") or []
        return ItemPage(
            total=int(items_block.get("total") or 0),
            more=items_block.get("more") or None,
            items=[parse_item(node) for node in nodes],
        )

    def query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Send a GraphQL query and return its ``data`` block."""
        try:
            response = self.session.post(
                self.graphql_url,
                json={"query": query, "variables": variables},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as exc:
            raise EscholarshipApiError(f"Internal error (graphql): request failed: {exc}") from exc
        if response.status_code != 200:
            raise EscholarshipApiError(
                f"Internal error (graphql): HTTP code {response.status_code} - {response.reason}.\n{response.text}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise EscholarshipApiError(f"Internal error (graphql): response is not JSON: {exc}") from exc
        errors = body.get("errors")
        if errors:
            raise EscholarshipApiError(f"Internal error (graphql): {errors[0].get('message')}")
        return body.get("data") or {}


def parse_item(node: dict[str, Any]) -> RepositoryItem:
    """Normalize one GraphQL item node.

    ``pub_id`` is left as None when the node has no OA_PUB_ID; the scanner
    treats that as fatal for the item.
    """
    pub_id = next(
        (
            pair.get("id")
            for pair in node.get("localIDs") or []
            if pair.get("scheme") == PUB_ID_SCHEME
        ),
        None,
    )
    return RepositoryItem(
        item_id=node["id"],
        title=node.get("title") or "",
        added=node.get("added") or "",
        pub_id=pub_id,
        grant_names=tuple(node.get("grants") or ()),
    )

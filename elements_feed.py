"""Symplectic Elements grants lookup for one publication."""

from __future__ import annotations

import logging

import requests

from config import SyncConfig
from grants import FeedRecord, parse_feed_document

REQUEST_TIMEOUT_SECONDS = 60

LOGGER = logging.getLogger(__name__)


class ElementsFeedClient:
    """Fetch the grants Elements currently links to a publication."""

    def __init__(self, config: SyncConfig, session: requests.Session | None = None) -> None:
        self.base_url = config.elements_url
        self.session = session or requests.Session()
        self.session.auth = (config.elements_username, config.elements_password)

    def fetch_grants(self, pub_id: str) -> FeedRecord | None:
        """Return the parsed grants document, or None if Elements has nothing.

        Any non-200 status means "no data" (e.g. a walked-back submission)
        rather than an error.
        """
        url = f"{self.base_url}/publications/{pub_id}/grants"
        response = self.session.get(url, params={"detail": "full"}, timeout=REQUEST_TIMEOUT_SECONDS)
        if response.status_code != 200:
            LOGGER.debug("Elements fetch: pub_id=%s status=%s, no data", pub_id, response.status_code)
            return None
        return parse_feed_document(response.content)

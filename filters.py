"""Title-drift guard for Elements feed records (no network calls)."""

from __future__ import annotations

import re

# Elements prefixes the grants document title with a description of the
# relationship; only the publication title after it is comparable.
_FEED_TITLE_PREFIX_RE = re.compile(r".*related to the publication: ", re.DOTALL)
_ENTITY_RE = re.compile(r"&\w+;")
_TAG_RE = re.compile(r"</?\w+[^>]*>")
_WORD_RE = re.compile(r"\w+")


def extract_words(title: str | None) -> set[str]:
    """Normalize a title into a set of lower-case word tokens.

    Escaped markup (``&lt;i&gt;``) is unescaped first so the tag stripper
    removes it along with literal tags; any other entity is dropped.
    """
    text = (title or "").replace("&lt;", "<").replace("&gt;", ">")
    text = _ENTITY_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    return set(_WORD_RE.findall(text.lower()))


def feed_publication_title(feed_title: str | None) -> str:
    """Strip the Elements relationship prefix from a feed document title."""
    return _FEED_TITLE_PREFIX_RE.sub("", feed_title or "", count=1)


def is_title_drifted(feed_title: str | None, item_title: str | None) -> bool:
    """Return True if the feed record likely describes a different publication.

    Drift is declared when the shared word count is at most a quarter of the
    combined word counts, i.e. less than about half the words match.
    """
    feed_words = extract_words(feed_title)
    item_words = extract_words(item_title)
    overlap = len(feed_words & item_words)
    return overlap <= (len(feed_words) + len(item_words)) // 4

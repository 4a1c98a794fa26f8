"""Grant extraction from the Elements feed and eScholarship items.

Both sources reduce to the same canonical grant summary so the classifier
never sees either source's format.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from lxml import etree

from errors import FeedDataError
from models import Grant, RepositoryItem

GRANT_SEPARATOR = "||"

_GRANT_XPATH = ".//object[@category='grant']/records/record[@format='native']/native"


class GrantSource(Protocol):
    """Anything that can list the funder names it records."""

    def grant_names(self) -> list[str]: ...


def canonicalize(names: Iterable[str]) -> str:
    """Sorted, de-duplicated, ``||``-joined grant names; ``""`` when empty."""
    return GRANT_SEPARATOR.join(sorted(set(names)))


def grant_summary(source: GrantSource) -> str:
    return canonicalize(source.grant_names())


@dataclass(frozen=True, slots=True)
class FeedRecord:
    """Grants and document title parsed from an Elements grants response."""

    title: str
    grants: list[Grant] = field(default_factory=list)

    def grant_names(self) -> list[str]:
        return [grant.name for grant in self.grants]


@dataclass(frozen=True, slots=True)
class ItemRecord:
    """Grants currently stored on an eScholarship item (names only)."""

    item: RepositoryItem

    def grant_names(self) -> list[str]:
        return list(self.item.grant_names)


def parse_feed_document(content: bytes | str) -> FeedRecord:
    """Parse an Elements ``/publications/{id}/grants?detail=full`` document.

    Raises FeedDataError when a grant record has no funder name.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    root = etree.fromstring(content)
    _strip_namespaces(root)

    title_node = root.find(".//title")
    title = "".join(title_node.itertext()) if title_node is not None else ""

    grants: list[Grant] = []
    for native in root.iterfind(_GRANT_XPATH):
        name = _field_text(native, "funder-name")
        if not name:
            raise FeedDataError("Elements grant record has no funder-name")
        grants.append(Grant(name=name, reference=_field_text(native, "funder-reference")))

    return FeedRecord(title=title, grants=grants)


def _field_text(native: etree._Element, field_name: str) -> str | None:
    """Stripped text of a native field; None when the field is absent or blank."""
    node = native.find(f"field[@name='{field_name}']")
    if node is None:
        return None
    text_node = node.find("text")
    value = (text_node.text or "") if text_node is not None else "".join(node.itertext())
    return value.strip() or None


def _strip_namespaces(root: etree._Element) -> None:
    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = etree.QName(element).localname
    etree.cleanup_namespaces(root)

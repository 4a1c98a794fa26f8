"""Tab-delimited result log of every funding difference found."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TextIO

from models import RepositoryItem, ScanOutcome

LOGGER = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "unit",
    "item",
    "dateAdded",
    "pub",
    "action",   # added | removed | changed
    "funding",  # summary, or "from <old> to <new>" when changed
]


class ResultLog:
    """Append-only result log; each row is flushed as soon as it is written.

    Use as a context manager so the file is closed even if the run aborts.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._fh: TextIO | None = None
        self._writer: csv.DictWriter | None = None
        self.rows_written = 0

    def open(self) -> ResultLog:
        self._fh = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(
            self._fh,
            fieldnames=RESULT_COLUMNS,
            delimiter="\t",
            lineterminator="\n",
        )
        self._writer.writeheader()
        self._fh.flush()
        return self

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
            self._writer = None

    def __enter__(self) -> ResultLog:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write(self, unit: str, item: RepositoryItem, outcome: ScanOutcome) -> None:
        if self._writer is None or self._fh is None:
            raise RuntimeError(f"Result log {self.path} is not open")

        self._writer.writerow(
            {
                "unit": unit,
                "item": item.item_id,
                "dateAdded": item.added,
                "pub": item.pub_id or "",
                "action": outcome.kind.value,
                "funding": outcome.funding,
            }
        )
        self._fh.flush()
        self.rows_written += 1
        LOGGER.debug("Wrote result row for item_id=%s to %s", item.item_id, self.path)

from __future__ import annotations

import csv
from pathlib import Path

import pytest

from csv_sink import RESULT_COLUMNS, ResultLog
from models import OutcomeKind, RepositoryItem, ScanOutcome

SAMPLE_ITEM = RepositoryItem(
    item_id="ark:/13030/qt12345678",
    title="A Paper",
    added="2018-03-04",
    pub_id="998877",
    grant_names=("NSF",),
)


def _read_rows(path: Path) -> list[dict[str, str]]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh, delimiter="\t"))


def test_open_writes_header_immediately(tmp_path: Path) -> None:
    path = tmp_path / "results.csv"
    with ResultLog(path):
        assert path.read_text(encoding="utf-8") == "\t".join(RESULT_COLUMNS) + "\n"


def test_write_appends_flushed_row(tmp_path: Path) -> None:
    path = tmp_path / "results.csv"
    outcome = ScanOutcome(OutcomeKind.CHANGED, old="NSF", new="DOE||NSF")

    with ResultLog(path) as log:
        log.write("lbnl", SAMPLE_ITEM, outcome)
        # Readable before the log is closed.
        rows = _read_rows(path)
        assert log.rows_written == 1

    assert rows == [
        {
            "unit": "lbnl",
            "item": "ark:/13030/qt12345678",
            "dateAdded": "2018-03-04",
            "pub": "998877",
            "action": "changed",
            "funding": "from NSF to DOE||NSF",
        }
    ]


def test_rows_survive_abort(tmp_path: Path) -> None:
    path = tmp_path / "results.csv"
    with pytest.raises(RuntimeError), ResultLog(path) as log:
        log.write("rgpo", SAMPLE_ITEM, ScanOutcome(OutcomeKind.ADDED, new="NSF"))
        raise RuntimeError("boom")

    rows = _read_rows(path)
    assert [row["action"] for row in rows] == ["added"]
    assert rows[0]["funding"] == "NSF"


def test_open_truncates_previous_run(tmp_path: Path) -> None:
    path = tmp_path / "results.csv"
    with ResultLog(path) as log:
        log.write("lbnl", SAMPLE_ITEM, ScanOutcome(OutcomeKind.REMOVED, old="NSF"))
    with ResultLog(path):
        pass

    assert _read_rows(path) == []


def test_write_requires_open_log(tmp_path: Path) -> None:
    log = ResultLog(tmp_path / "results.csv")
    with pytest.raises(RuntimeError, match="not open"):
        log.write("lbnl", SAMPLE_ITEM, ScanOutcome(OutcomeKind.ADDED, new="NSF"))

import re

import pytest
from gspread.exceptions import APIError, WorksheetNotFound
from gspread.utils import numericise_all

from counselor_dashboard.repositories import (
    counselors_repo,
    payments_repo,
    sessions_repo,
    students_repo,
    worksheets,
)
from counselor_dashboard.storage.local_store import LocalSlot


class FakeResponse:
    text = "backend error"

    def json(self):
        return {"error": {"code": 500, "message": "backend error", "status": "INTERNAL"}}


def api_error() -> APIError:
    return APIError(FakeResponse())


def _cells(values):
    # the Sheets API hands every cell back as text
    return ["" if v is None else str(v) for v in values]


class FakeWorksheet:
    """
    In-memory stand-in for gspread.Worksheet; rows[0] is the header row.
    get_all_records numericises cells like gspread does unless told to
    ignore every column.
    """

    def __init__(self, title, rows=None):
        self.title = title
        self.rows = [_cells(r) for r in (rows or [])]
        self.fail = False

    def _check(self):
        if self.fail:
            raise api_error()

    def get_all_values(self):
        self._check()
        return [list(r) for r in self.rows]

    def get_all_records(self, numericise_ignore=None):
        self._check()
        if not self.rows:
            return []
        header = self.rows[0]
        records = []
        for r in self.rows[1:]:
            values = [r[i] if i < len(r) else "" for i in range(len(header))]
            if numericise_ignore != ["all"]:
                values = numericise_all(values)
            records.append(dict(zip(header, values)))
        return records

    def update(self, range_name=None, values=None):
        self._check()
        row = int(re.match(r"[A-Z]+(\d+)", range_name).group(1))
        for offset, values_row in enumerate(values):
            index = row - 1 + offset
            while len(self.rows) <= index:
                self.rows.append([])
            self.rows[index] = _cells(values_row)

    def append_row(self, values, value_input_option="RAW"):
        self._check()
        self.rows.append(_cells(values))

    def append_rows(self, values, value_input_option="RAW"):
        for v in values:
            self.append_row(v, value_input_option=value_input_option)

    def col_values(self, col):
        self._check()
        return [r[col - 1] if len(r) >= col else "" for r in self.rows]

    def update_cell(self, row, col, value):
        self._check()
        r = self.rows[row - 1]
        while len(r) < col:
            r.append("")
        r[col - 1] = _cells([value])[0]

    def delete_rows(self, index):
        self._check()
        del self.rows[index - 1]


class FakeSpreadsheet:
    id = "sheet-1"

    def __init__(self):
        self.tabs = {}

    def worksheet(self, title):
        if title not in self.tabs:
            raise WorksheetNotFound(title)
        return self.tabs[title]

    def add_worksheet(self, title, rows, cols):
        self.tabs[title] = FakeWorksheet(title)
        return self.tabs[title]

    def seed(self, title, headers, records):
        """Create a tab from dict records laid out under `headers`."""
        rows = [headers] + [[rec.get(h, "") for h in headers] for rec in records]
        self.tabs[title] = FakeWorksheet(title, rows)
        return self.tabs[title]


@pytest.fixture
def sheet(monkeypatch):
    sh = FakeSpreadsheet()
    cache = {}
    monkeypatch.setattr(worksheets, "_worksheet_cache", lambda: cache)
    for module in (sessions_repo, payments_repo, students_repo, counselors_repo):
        monkeypatch.setattr(module, "get_spreadsheet", lambda: sh)
    return sh


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "store.db"


@pytest.fixture
def slot_factory(db_file):
    def make(name="slot"):
        return LocalSlot(name, db_file=db_file)

    return make

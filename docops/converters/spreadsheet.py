"""Workbook reading and writing with openpyxl."""

import io
from typing import List, Sequence, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

LINE_SHEET_TITLE = "PDF Content"
LINE_SHEET_HEADER = ["Line", "Content"]


class SpreadsheetConverter:
    """Reads sheets as rows of text and builds line-per-row workbooks."""

    def read_sheets(self, data: bytes) -> List[Tuple[str, List[List[str]]]]:
        """Return (sheet_name, rows) for each worksheet, skipping blank rows."""
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            sheets = []
            for worksheet in workbook.worksheets:
                rows = []
                for row in worksheet.iter_rows(values_only=True):
                    values = ["" if value is None else str(value) for value in row]
                    if any(value.strip() for value in values):
                        rows.append(values)
                sheets.append((worksheet.title, rows))
        finally:
            workbook.close()
        return sheets

    def build_line_workbook(self, lines: Sequence[str]) -> bytes:
        """Write one numbered text line per row under a Line/Content header."""
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = LINE_SHEET_TITLE
        worksheet.append(LINE_SHEET_HEADER)
        for number, line in enumerate(lines, start=1):
            worksheet.append([number, ILLEGAL_CHARACTERS_RE.sub("", line)])

        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

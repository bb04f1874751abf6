"""
Sheet Reader Module
===================
Locates labelled cells on a definition worksheet and extracts the definition
matrix below its header row into ordered records (column label -> cell text).
"""

import datetime
import logging
from typing import Dict, List, Optional, Tuple

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter

from .exceptions import DefinitionSheetError

logger = logging.getLogger(__name__)


def cell_text(value) -> str:
    """Render a cell value as the text a user sees in the sheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def load_definition_sheet(file_path: str, sheet_name: Optional[str] = None):
    """
    Open a workbook and return ``(workbook, worksheet)``.

    Cached values are read instead of formulas. Without *sheet_name* the
    active sheet is used. The caller closes the workbook.
    """
    wb = load_workbook(file_path, data_only=True)
    if sheet_name is None:
        ws = wb.active
    elif sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
    else:
        available = wb.sheetnames
        wb.close()
        raise DefinitionSheetError(
            f"Sheet '{sheet_name}' not found in {file_path} (sheets: {available})"
        )
    logger.info(f"Reading sheet '{ws.title}' from {file_path}")
    return wb, ws


def find_cell(ws, label: str) -> Optional[Tuple[int, int]]:
    """Return the ``(row, column)`` of the first cell whose text equals *label*."""
    for row in ws.iter_rows():
        for cell in row:
            if cell.value is not None and cell_text(cell.value) == label:
                return cell.row, cell.column
    return None


def read_labelled_value(ws, label: str) -> Optional[str]:
    """
    Read the value written next to a label cell.

    The value is the first non-empty cell to the right of the label on the
    same row. Returns None when the label is absent and ``""`` when nothing
    follows it.
    """
    position = find_cell(ws, label)
    if position is None:
        return None
    row, col = position
    for c in range(col + 1, (ws.max_column or col) + 1):
        value = ws.cell(row=row, column=c).value
        if value is not None and cell_text(value) != "":
            return cell_text(value)
    return ""


def _header_columns(ws, row: int, col: int) -> List[Tuple[int, str]]:
    """Contiguous non-empty header cells starting at ``(row, col)``."""
    headers = []
    c = col
    max_col = ws.max_column or col
    while c <= max_col:
        text = cell_text(ws.cell(row=row, column=c).value)
        if text == "":
            break
        headers.append((c, text))
        c += 1
    return headers


def read_matrix(ws, row: int, col: int) -> List[Dict[str, str]]:
    """
    Extract the matrix whose header row starts at ``(row, col)``.

    The header spans the contiguous non-empty cells to the right; data rows
    follow directly below until the first row that is blank across the
    whole header span.

    Returns:
        One dict per data row, keyed by header text, in sheet order.
    """
    headers = _header_columns(ws, row, col)
    if not headers:
        return []

    span = f"{get_column_letter(headers[0][0])}:{get_column_letter(headers[-1][0])}"
    records = []
    r = row + 1
    max_row = ws.max_row or row
    while r <= max_row:
        values = {text: cell_text(ws.cell(row=r, column=c).value) for c, text in headers}
        if all(v == "" for v in values.values()):
            break
        records.append(values)
        r += 1

    logger.info(f"  Matrix at {get_column_letter(col)}{row} ({span}): "
                f"{len(headers)} columns, {len(records)} rows")
    return records


def read_matrix_at(ws, anchor_label: str) -> List[Dict[str, str]]:
    """Extract the matrix whose header row contains the *anchor_label* cell."""
    position = find_cell(ws, anchor_label)
    if position is None:
        raise DefinitionSheetError(
            f"Header cell '{anchor_label}' not found on sheet '{ws.title}'"
        )
    row, col = position
    return read_matrix(ws, row, col)

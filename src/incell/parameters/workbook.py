"""Spreadsheet import/export for parameter sets, built on openpyxl."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from pathlib import Path
from typing import IO, Mapping, Union
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils.exceptions import InvalidFileException

from incell.exceptions import SpreadsheetError
from incell.parameters.template import EXPORT_TEMPLATE, HEADER_LABEL, HEADER_ROW
from incell.utils.logging import get_logger

logger = get_logger(__name__)

ParameterValue = Union[str, int, float]
Parameters = dict[str, ParameterValue]
Source = Union[str, Path, IO[bytes]]

SPREADSHEET_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xlsm")
SHEET_TITLE = "Parameters"
FALLBACK_MODEL_NAME = "Parameters"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_COLUMN_WIDTHS = {"A": 14, "B": 22, "C": 16, "D": 18}
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def export_filename(model_name: str | None, now: datetime | None = None) -> str:
    """Build the default export file name, e.g. ``ABC123_20240131_154502.xlsx``."""
    model = _UNSAFE_FILENAME_CHARS.sub("_", (model_name or "").strip())
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{model or FALLBACK_MODEL_NAME}_{stamp}.xlsx"


def _cell_value(value: object) -> ParameterValue:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, (str, int, float)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def read_parameters(source: Source) -> Parameters:
    """Read a parameter mapping from the first sheet of a workbook.

    Column B holds the parameter name and column C its value. Rows with
    a blank name, and header rows whose name is ``Parameter``, are
    skipped. Values are passed through as stored in the sheet.

    Raises:
        SpreadsheetError: If the file is not a readable xlsx workbook.
    """
    try:
        wb = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError) as exc:
        raise SpreadsheetError(f"Cannot read workbook: {exc}") from exc

    parameters: Parameters = {}
    try:
        sheet = wb.worksheets[0]
        for row in sheet.iter_rows(values_only=True):
            if len(row) < 2 or row[1] is None:
                continue
            name = str(row[1]).strip()
            if not name or name == HEADER_LABEL:
                continue
            parameters[name] = _cell_value(row[2] if len(row) > 2 else None)
    finally:
        wb.close()

    logger.info("parameters_read", count=len(parameters))
    return parameters


def build_workbook(parameters: Mapping[str, ParameterValue]) -> Workbook:
    """Lay out a single-sheet workbook following the export template."""
    wb = Workbook()
    sheet = wb.active
    sheet.title = SHEET_TITLE

    sheet.append(list(HEADER_ROW))
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")

    for row in EXPORT_TEMPLATE:
        value = parameters.get(row.name, "")
        sheet.append([row.category, row.name, value, row.value_range])
        if isinstance(value, str) and value.startswith("="):
            # Keep operator text literal instead of letting it become a formula
            sheet.cell(row=sheet.max_row, column=3).data_type = "s"

    for column, width in _COLUMN_WIDTHS.items():
        sheet.column_dimensions[column].width = width
    sheet.freeze_panes = "A2"
    return wb


def write_parameters(target: str | Path | IO[bytes], parameters: Mapping[str, ParameterValue]) -> None:
    """Export parameters to ``target`` (a path or writable binary stream)."""
    wb = build_workbook(parameters)
    wb.save(target)
    logger.info(
        "parameters_written",
        target=str(target) if isinstance(target, (str, Path)) else "<stream>",
        rows=len(EXPORT_TEMPLATE),
    )

"""Parameter sets and their spreadsheet representation."""

from incell.parameters.template import EXPORT_TEMPLATE, HEADER_ROW, TemplateRow
from incell.parameters.workbook import (
    Parameters,
    ParameterValue,
    build_workbook,
    export_filename,
    read_parameters,
    write_parameters,
)

__all__ = [
    "EXPORT_TEMPLATE",
    "HEADER_ROW",
    "ParameterValue",
    "Parameters",
    "TemplateRow",
    "build_workbook",
    "export_filename",
    "read_parameters",
    "write_parameters",
]

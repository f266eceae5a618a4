"""
Reusable Excel cell/row formatting helpers.
"""
from __future__ import annotations

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from eventdash.excel.styles import (
    HEADER_FONT, HEADER_FILL, HEADER_BORDER,
    DATA_FONT, TOTAL_FONT,
    THIN_BORDER, TOTAL_BORDER,
    ZEBRA_FILL, TOTAL_FILL,
    KPI_VALUE_FONT, KPI_LABEL_FONT,
    CENTER, LEFT, RIGHT, WRAP,
    HIGHLIGHT_FILLS,
)

NUMBER_FORMATS = {
    "number": "#,##0",
    "decimal": "0.00",
    "percent": '0.0"%"',
}
NUMERIC_TYPES = ("number", "decimal", "percent")


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    """Apply header styling to an entire row."""
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    col_type: str = "text",
    is_total: bool = False,
    highlight: str | None = None,
) -> None:
    """Write and format a single data cell.

    col_type is one of text, wrap, number, decimal, percent.
    """
    cell = ws.cell(row=row_num, column=col_num)
    cell.value = value
    cell.font = TOTAL_FONT if is_total else DATA_FONT
    cell.border = TOTAL_BORDER if is_total else THIN_BORDER

    if col_type in NUMERIC_TYPES:
        cell.alignment = RIGHT
        cell.number_format = NUMBER_FORMATS[col_type]
    elif col_type == "wrap":
        cell.alignment = WRAP
    else:
        cell.alignment = LEFT

    if highlight and highlight in HIGHLIGHT_FILLS:
        cell.fill = HIGHLIGHT_FILLS[highlight]
    elif is_total:
        cell.fill = TOTAL_FILL
    elif row_num % 2 == 0:
        cell.fill = ZEBRA_FILL


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 60) -> None:
    """Fit column widths to the longest value, ignoring merged title cells."""
    merged = {cr.min_row for cr in ws.merged_cells.ranges}
    for column in ws.columns:
        longest = 0
        for cell in column:
            if cell.value is None or cell.row in merged:
                continue
            longest = max(longest, len(str(cell.value)))
        letter = get_column_letter(column[0].column)
        ws.column_dimensions[letter].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(
    ws: Worksheet,
    row: int,
    col: int,
    value,
    label: str,
    format_type: str = "number",
) -> None:
    """Write a large KPI value with a small label below it."""
    value_cell = ws.cell(row=row, column=col)
    value_cell.value = value
    value_cell.font = KPI_VALUE_FONT
    value_cell.alignment = CENTER
    if format_type in NUMBER_FORMATS:
        value_cell.number_format = NUMBER_FORMATS[format_type]

    label_cell = ws.cell(row=row + 1, column=col)
    label_cell.value = label
    label_cell.font = KPI_LABEL_FONT
    label_cell.alignment = CENTER

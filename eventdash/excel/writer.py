"""
ExcelWriter — high-level helpers for building styled Excel workbooks.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from eventdash.excel.styles import (
    TITLE_FONT, SUBTITLE_FONT, SECTION_FONT,
    INSIGHT_TITLE_FONT, INSIGHT_BODY_FONT,
    LEGEND_TERM_FONT, DATA_FONT,
    LEGEND_FILL, INSIGHT_FILLS, THIN_BORDER, WRAP,
)
from eventdash.excel.formatters import (
    NUMERIC_TYPES,
    format_header_row,
    format_data_cell,
    auto_column_width,
    add_kpi_card,
)


ColSpec = tuple[str, str, str]  # (key, col_type, label)


class ExcelWriter:
    """Fluent builder for styled Excel workbooks."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._first_sheet = True

    def add_sheet(self, title: str) -> Worksheet:
        """Create a new worksheet (re-uses the default sheet for the first call).

        Excel caps sheet titles at 31 characters and forbids []:*?/\\.
        """
        for ch in "[]:*?/\\":
            title = title.replace(ch, "-")
        title = title[:31]
        if self._first_sheet:
            ws = self.wb.active
            ws.title = title
            self._first_sheet = False
        else:
            ws = self.wb.create_sheet(title=title)
        return ws

    # ------------------------------------------------------------------
    # Headings
    # ------------------------------------------------------------------

    def write_title(self, ws: Worksheet, title: str, subtitle: str, merge_cols: int = 8) -> int:
        """Write title + subtitle rows. Returns next available row."""
        ws.cell(row=1, column=1).value = title
        ws.cell(row=1, column=1).font = TITLE_FONT
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=merge_cols)

        ws.cell(row=2, column=1).value = subtitle
        ws.cell(row=2, column=1).font = SUBTITLE_FONT
        ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=merge_cols)

        for col in range(1, merge_cols + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        """Write a section header. Returns next row."""
        ws.cell(row=row, column=1).value = title
        ws.cell(row=row, column=1).font = SECTION_FONT
        return row + 2

    def write_kpi_row(
        self,
        ws: Worksheet,
        row: int,
        kpis: list[tuple],  # [(value, label, format_type), ...]
        start_col: int = 1,
        col_spacing: int = 2,
    ) -> int:
        """Write a row of KPI cards. Returns next row."""
        col = start_col
        for value, label, fmt in kpis:
            add_kpi_card(ws, row, col, value, label, fmt)
            col += col_spacing
        return row + 3

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        data: list[dict] | pd.DataFrame,
        highlight_fn=None,
        freeze: bool = True,
        show_total: bool = False,
        total_label: str = "TOTAL",
    ) -> int:
        """Write headers + data rows (+ optional total row).

        highlight_fn(row_idx, row_data) -> str|None, 'leader' or 'warning'.
        Returns the row number after the last written row.
        """
        for col_num, (_, _, label) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num).value = label
        format_header_row(ws, start_row, len(columns))

        rows = data.to_dict("records") if isinstance(data, pd.DataFrame) else data

        row = start_row + 1
        for idx, row_data in enumerate(rows):
            hl = highlight_fn(idx, row_data) if highlight_fn else None
            for col_num, (key, col_type, _) in enumerate(columns, 1):
                val = row_data.get(key)
                if val is None or (pd.api.types.is_scalar(val) and pd.isna(val)):
                    val = 0 if col_type in NUMERIC_TYPES else ""
                format_data_cell(ws, row, col_num, val, col_type, highlight=hl)
            row += 1

        if show_total and rows:
            frame = pd.DataFrame(rows)
            format_data_cell(ws, row, 1, total_label, "text", is_total=True)
            for col_num, (key, col_type, _) in enumerate(columns[1:], 2):
                if col_type == "number" and key in frame.columns:
                    format_data_cell(ws, row, col_num, int(frame[key].fillna(0).sum()), col_type, is_total=True)
                else:
                    format_data_cell(ws, row, col_num, "", "text", is_total=True)
            row += 1

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return row

    # ------------------------------------------------------------------
    # Text blocks
    # ------------------------------------------------------------------

    def write_insights(self, ws: Worksheet, row: int, insights: list[dict], merge_cols: int = 8) -> int:
        """Write title/detail insight blocks. Returns next row."""
        for item in insights:
            ws.cell(row=row, column=1).value = item["title"]
            ws.cell(row=row, column=1).font = INSIGHT_TITLE_FONT
            if item.get("type") in INSIGHT_FILLS:
                ws.cell(row=row, column=1).fill = INSIGHT_FILLS[item["type"]]
            body = ws.cell(row=row + 1, column=1)
            body.value = item.get("detail", "")
            body.font = INSIGHT_BODY_FONT
            body.alignment = WRAP
            ws.merge_cells(start_row=row + 1, start_column=1, end_row=row + 1, end_column=merge_cols)
            row += 3
        return row

    def write_legend(self, ws: Worksheet, start_row: int, items: list[tuple[str, str]]) -> int:
        """Write a two-column term/definition table. Returns next row."""
        ws.cell(row=start_row, column=1).value = "Metric"
        ws.cell(row=start_row, column=2).value = "How It Is Counted"
        format_header_row(ws, start_row, 2)

        row = start_row + 1
        for term, desc in items:
            c1 = ws.cell(row=row, column=1)
            c1.value = term
            c1.font = LEGEND_TERM_FONT
            c1.fill = LEGEND_FILL
            c1.border = THIN_BORDER

            c2 = ws.cell(row=row, column=2)
            c2.value = desc
            c2.font = DATA_FONT
            c2.fill = LEGEND_FILL
            c2.border = THIN_BORDER
            c2.alignment = WRAP
            row += 1
        return row + 1

    def save(self, path: str | Path) -> Path:
        """Save the workbook to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path

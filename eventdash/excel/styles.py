"""
Excel palette for dashboard reports: colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
INDIGO = "3949AB"
DARK_INDIGO = "1A237E"
LIGHT_INDIGO = "E8EAF6"
ZEBRA = "F5F5F5"
TOTAL_BG = "E3F2FD"
LIGHT_RED = "FFEBEE"
LIGHT_GREEN = "E8F5E9"
LIGHT_AMBER = "FFF8E1"
MUTED = "666666"
GRID = "CCCCCC"
TOTAL_GRID = "999999"


def _font(size: int, color: str = "000000", **kw) -> Font:
    return Font(name="Calibri", size=size, color=color, **kw)


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, top: str = "thin", bottom: str = "thin") -> Border:
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=Side(style=top, color=color), bottom=Side(style=bottom, color=color))


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = _font(24, DARK_INDIGO, bold=True)
SUBTITLE_FONT = _font(12, MUTED, italic=True)
SECTION_FONT = _font(14, DARK_INDIGO, bold=True)
HEADER_FONT = _font(11, "FFFFFF", bold=True)
DATA_FONT = _font(10)
TOTAL_FONT = _font(10, bold=True)
KPI_VALUE_FONT = _font(28, INDIGO, bold=True)
KPI_LABEL_FONT = _font(10, MUTED)
INSIGHT_TITLE_FONT = _font(11, bold=True)
INSIGHT_BODY_FONT = _font(10, italic=True)
LEGEND_TERM_FONT = _font(10, bold=True)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = _solid(DARK_INDIGO)
ZEBRA_FILL = _solid(ZEBRA)
TOTAL_FILL = _solid(TOTAL_BG)
LEGEND_FILL = _solid(LIGHT_INDIGO)

# Row highlights (ExcelWriter.write_table highlight_fn) and insight
# title fills (keyed by insight "type")
HIGHLIGHT_FILLS = {
    "leader": _solid(LIGHT_INDIGO),
    "warning": _solid(LIGHT_RED),
}
INSIGHT_FILLS = {
    "success": _solid(LIGHT_GREEN),
    "warning": _solid(LIGHT_AMBER),
    "info": _solid(LIGHT_INDIGO),
}

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = _box(GRID)
HEADER_BORDER = _box(DARK_INDIGO, bottom="medium")
TOTAL_BORDER = _box(TOTAL_GRID, top="medium", bottom="medium")

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
WRAP = Alignment(horizontal="left", vertical="center", wrap_text=True)

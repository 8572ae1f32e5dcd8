"""Serialize cell grids to XLSX with openpyxl."""

import base64
import re
from io import BytesIO
from pathlib import Path

import openpyxl
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from src.models.slips import CellGrid, SlipWorkbook
from src.slips.errors import NothingToExportError
from src.utils.logger import get_logger

logger = get_logger("dispatch_slips.slips.workbook")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Excel rejects longer sheet names and these characters.
_MAX_SHEET_TITLE = 31
_INVALID_SHEET_CHARS = re.compile(r"[\\/*?:\[\]]")


def slip_filename(report_type: str, route_name: str) -> str:
    """`Loading Slip` + `North 1` -> `LoadingSlip-Route-North 1.xlsx`."""
    compact = re.sub(r"\s", "", report_type)
    return f"{compact}-Route-{route_name}.xlsx"


def _sheet_title(title: str) -> str:
    cleaned = _INVALID_SHEET_CHARS.sub("", title).strip() or "Sheet"
    return cleaned[:_MAX_SHEET_TITLE]


def write_workbook(
    grid: CellGrid,
    sheet_title: str,
    *,
    vertical_header_row: int | None = None,
) -> bytes:
    """Write grid to a single-sheet workbook and return the XLSX bytes.

    vertical_header_row (0-based) marks the delivery slip's customer header:
    those cells are bold and rotated 90 degrees, the first column is widened.
    """
    if not grid:
        raise NothingToExportError("Nothing to write to the workbook.")

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = _sheet_title(sheet_title)

    for row in grid:
        ws.append(list(row))

    ws["A1"].font = Font(bold=True, size=14)

    if vertical_header_row is not None and vertical_header_row < len(grid):
        header = grid[vertical_header_row]
        excel_row = vertical_header_row + 1
        ws.column_dimensions["A"].width = 30
        for col in range(1, len(header) + 1):
            cell = ws.cell(row=excel_row, column=col)
            cell.font = Font(bold=True)
            if col == 1:
                cell.alignment = Alignment(horizontal="center", vertical="center")
                continue
            ws.column_dimensions[get_column_letter(col)].width = 10
            cell.alignment = Alignment(horizontal="center", vertical="center", text_rotation=90)
    else:
        for col in range(1, max(len(r) for r in grid) + 1):
            letter = get_column_letter(col)
            longest = max((len(str(r[col - 1])) for r in grid[1:] if len(r) >= col), default=0)
            ws.column_dimensions[letter].width = min(longest + 2, 50)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def build_slip_workbook(
    grid: CellGrid,
    report_type: str,
    route_name: str,
    *,
    vertical_header_row: int | None = None,
) -> SlipWorkbook:
    """Grid -> named workbook with raw bytes and a base64 copy for previews."""
    content = write_workbook(
        grid,
        f"{report_type} Data" if vertical_header_row is None else report_type,
        vertical_header_row=vertical_header_row,
    )
    filename = slip_filename(report_type, route_name)
    logger.debug("workbook.built", filename=filename, rows=len(grid), size=len(content))
    return SlipWorkbook(
        filename=filename,
        grid=grid,
        content=content,
        base64=base64.b64encode(content).decode("ascii"),
    )


def save_workbook(workbook: SlipWorkbook, directory: Path) -> Path:
    """Write the workbook under directory; returns the file path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / workbook.filename.replace("/", "-")
    path.write_bytes(workbook.content)
    logger.info("workbook.saved", path=str(path))
    return path

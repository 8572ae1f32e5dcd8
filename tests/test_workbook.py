"""Tests for XLSX serialization of slip grids."""

import base64
import sys
from io import BytesIO
from pathlib import Path

import openpyxl
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.slips.errors import NothingToExportError
from src.slips.workbook import build_slip_workbook, save_workbook, slip_filename, write_workbook

LOADING_GRID = [
    ["Loading Slip - Route North 1"],
    [],
    ["Products", "Quantity in base units (eaches)", "Quantity in base units (kgs/lts)", "Crates"],
    ["Nandini Milk 500 ML", 36, "18.00", 1],
    ["Totals", 36, "18.00", 1],
]

DELIVERY_GRID = [
    ["Delivery Slip"],
    ["Route: North 1"],
    [],
    ["Items", "Sri Lakshmi Stores", "Ganesh Dairy", "Total Crates"],
    ["Nandini Milk 500 ML", 48, 12, 2],
    ["Totals", 48, 12, 2],
    ["Customer ID", 1, 2, ""],
]


def _load(content: bytes):
    return openpyxl.load_workbook(BytesIO(content)).active


def test_slip_filename_strips_spaces_from_report_type():
    assert slip_filename("Loading Slip", "North 1") == "LoadingSlip-Route-North 1.xlsx"
    assert slip_filename("Delivery Slip", "7") == "DeliverySlip-Route-7.xlsx"


def test_cells_round_trip():
    ws = _load(write_workbook(LOADING_GRID, "Loading Slip Data"))
    assert ws.title == "Loading Slip Data"
    assert ws["A1"].value == "Loading Slip - Route North 1"
    assert ws["A1"].font.bold
    assert ws["A4"].value == "Nandini Milk 500 ML"
    assert ws["B4"].value == 36
    assert ws["C4"].value == "18.00"
    assert ws["D5"].value == 1


def test_sheet_title_is_sanitized():
    ws = _load(write_workbook(LOADING_GRID, "Loading/Slip: [North]" + "x" * 40))
    assert "/" not in ws.title and ":" not in ws.title
    assert len(ws.title) <= 31


def test_vertical_header_row_is_rotated():
    ws = _load(write_workbook(DELIVERY_GRID, "Delivery Slip", vertical_header_row=3))
    assert ws["A4"].value == "Items"
    assert ws["A4"].font.bold
    assert ws["A4"].alignment.text_rotation in (0, None)
    assert ws["B4"].alignment.text_rotation == 90
    assert ws["D4"].alignment.text_rotation == 90
    assert ws.column_dimensions["A"].width == 30
    assert ws.column_dimensions["B"].width == 10


def test_empty_grid_raises():
    with pytest.raises(NothingToExportError):
        write_workbook([], "Empty")


def test_build_slip_workbook():
    wb = build_slip_workbook(LOADING_GRID, "Loading Slip", "North 1")
    assert wb.filename == "LoadingSlip-Route-North 1.xlsx"
    assert wb.grid == LOADING_GRID
    assert base64.b64decode(wb.base64) == wb.content
    assert _load(wb.content).title == "Loading Slip Data"


def test_build_delivery_workbook_sheet_title():
    wb = build_slip_workbook(DELIVERY_GRID, "Delivery Slip", "North 1", vertical_header_row=3)
    assert _load(wb.content).title == "Delivery Slip"


def test_save_workbook(tmp_path):
    wb = build_slip_workbook(LOADING_GRID, "Loading Slip", "North 1")
    path = save_workbook(wb, tmp_path / "out")
    assert path == tmp_path / "out" / "LoadingSlip-Route-North 1.xlsx"
    assert path.read_bytes() == wb.content

"""Tests for the slip HTTP API (FastAPI TestClient, mock order service)."""

import base64
import sys
from io import BytesIO
from pathlib import Path

import openpyxl
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.config import MOCK_ORDERS_PATH
from src.order_service.errors import OrderServiceError
from src.order_service.mock import MockOrderService
from src.server import create_app


def _client(service=None):
    return TestClient(create_app(service or MockOrderService(path=MOCK_ORDERS_PATH)))


def test_health():
    with _client() as client:
        r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_loading_slips_preview():
    service = MockOrderService(path=MOCK_ORDERS_PATH)
    with _client(service) as client:
        r = client.post("/slips/loading", json={"routes": ["North 1"]})
    assert r.status_code == 200
    body = r.json()
    assert body["kind"] == "loading"
    assert [s["route_name"] for s in body["slips"]] == ["North 1"]
    slip = body["slips"][0]
    assert slip["filename"] == "LoadingSlip-Route-North 1.xlsx"
    assert slip["saved_path"] is None
    assert ["Nandini Milk 500 ML", 36, "18.00", 1] in slip["grid"]
    ws = openpyxl.load_workbook(BytesIO(base64.b64decode(slip["base64"]))).active
    assert ws["A1"].value == "Loading Slip - Route North 1"
    assert body["status"] == {"succeeded": 2, "failed": 0, "failures": []}
    assert sorted(service.status_updates) == [("loading", 101), ("loading", 102)]


def test_delivery_slips():
    with _client() as client:
        r = client.post("/slips/delivery", json={"order_type": "PM + Evening"})
    assert r.status_code == 200
    slip = r.json()["slips"][0]
    assert slip["route_name"] == "South 2"
    assert slip["grid"][3] == ["Items", "Hotel Annapoorna", "Total Crates"]


def test_unknown_kind_is_404():
    with _client() as client:
        r = client.post("/slips/invoice", json={})
    assert r.status_code == 404


def test_nothing_to_export_is_422():
    with _client() as client:
        r = client.post("/slips/loading", json={"order_ids": [999]})
    assert r.status_code == 422
    assert "No orders" in r.json()["detail"]


def test_bad_order_type_is_400():
    with _client() as client:
        r = client.post("/slips/loading", json={"order_type": "Night"})
    assert r.status_code == 400


def test_order_service_down_is_502():
    service = MockOrderService(path=MOCK_ORDERS_PATH)

    async def down(from_date=None, to_date=None):
        raise OrderServiceError("GET /get-all-orders failed: connection refused")

    service.get_orders = down
    with _client(service) as client:
        r = client.post("/slips/loading", json={})
    assert r.status_code == 502
    assert r.json()["detail"] == "Order service unavailable"


def test_parse_unit():
    with _client() as client:
        r = client.post("/units/parse", json={"product_name": "Nandini Milk 500 ML", "quantity": 36})
        plain = client.post("/units/parse", json={"product_name": "Paneer Block"})
        negative = client.post("/units/parse", json={"product_name": "Paneer Block", "quantity": -1})
    assert r.json() == {"value": 500.0, "unit": "ml", "base_unit_quantity": 18.0, "crates": 1}
    assert plain.json() == {"value": 1.0, "unit": "unit"}
    assert negative.status_code == 400

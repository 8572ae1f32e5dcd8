"""Tests for loading / delivery slip grid layout."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.models.slips import BrandTotal, ConsolidatedProduct, CustomerLines, DeliverySlipData
from src.slips.errors import NothingToExportError
from src.slips.render import (
    BRAND_HEADER,
    DELIVERY_HEADER_ROW,
    LOADING_SLIP_HEADER,
    format_vertical_header,
    render_delivery_slip,
    render_loading_slip,
    with_vertical_customer_headers,
)


class TestRenderLoadingSlip(unittest.TestCase):
    def setUp(self):
        self.products = {
            "Nandini Milk 500 ML": ConsolidatedProduct(
                name="Nandini Milk 500 ML",
                total_quantity=36,
                category="Milk",
                total_base_unit_quantity=18.0,
                total_crates=1,
            ),
            "Amul Butter 200 GRMS": ConsolidatedProduct(
                name="Amul Butter 200 GRMS",
                total_quantity=30,
                category="Butter",
                total_base_unit_quantity=6.0,
                total_crates=0,
            ),
        }
        self.brands = [BrandTotal(brand="NANDINI", total_crates=1), BrandTotal(brand="AMUL", total_crates=0)]

    def test_layout(self):
        grid = render_loading_slip(self.products, self.brands, "North 1")
        self.assertEqual(grid[0], ["Loading Slip - Route North 1"])
        self.assertEqual(grid[1], [])
        self.assertEqual(grid[2], LOADING_SLIP_HEADER)
        self.assertEqual(grid[3], ["Nandini Milk 500 ML", 36, "18.00", 1])
        self.assertEqual(grid[4], ["Amul Butter 200 GRMS", 30, "6.00", 0])
        self.assertEqual(grid[5], ["Totals", 66, "24.00", 1])
        self.assertEqual(grid[6], [])
        self.assertEqual(grid[7], BRAND_HEADER)
        self.assertEqual(grid[8:], [["NANDINI", 1], ["AMUL", 0]])

    def test_accepts_product_list(self):
        grid = render_loading_slip(list(self.products.values()), self.brands, "North 1")
        self.assertEqual(grid[3][0], "Nandini Milk 500 ML")

    def test_custom_title(self):
        grid = render_loading_slip(self.products, self.brands, "R", report_title="Evening Loading")
        self.assertEqual(grid[0], ["Evening Loading - Route R"])

    def test_empty_products_raise(self):
        with self.assertRaises(NothingToExportError):
            render_loading_slip({}, [], "North 1")


class TestRenderDeliverySlip(unittest.TestCase):
    def setUp(self):
        self.data = DeliverySlipData(
            route_name="North 1",
            product_names=["Nandini Milk 500 ML", "Nandini Curd 1 KG"],
            customers=[
                CustomerLines(
                    customer_id=1,
                    customer_name="Sri Lakshmi Stores",
                    order_ids=[101, 103],
                    quantities={"Nandini Milk 500 ML": 48, "Nandini Curd 1 KG": 12},
                    base_unit_quantities={"Nandini Milk 500 ML": 24.0, "Nandini Curd 1 KG": 12.0},
                    crates={"Nandini Milk 500 ML": 2, "Nandini Curd 1 KG": 1},
                ),
                CustomerLines(
                    customer_id=2,
                    customer_name="Ganesh Dairy",
                    order_ids=[102],
                    quantities={"Nandini Milk 500 ML": 12},
                    base_unit_quantities={"Nandini Milk 500 ML": 6.0},
                    crates={"Nandini Milk 500 ML": 0},
                ),
            ],
        )

    def test_layout(self):
        grid = render_delivery_slip(self.data)
        self.assertEqual(grid[0], ["Delivery Slip"])
        self.assertEqual(grid[1], ["Route: North 1"])
        self.assertEqual(grid[2], [])
        self.assertEqual(
            grid[DELIVERY_HEADER_ROW],
            ["Items", "Sri Lakshmi Stores", "Ganesh Dairy", "Total Crates"],
        )
        self.assertEqual(grid[4], ["Nandini Milk 500 ML", 48, 12, 2])
        self.assertEqual(grid[5], ["Nandini Curd 1 KG", 12, 0, 1])
        self.assertEqual(grid[6], ["Totals", 60, 12, 3])
        self.assertEqual(grid[7], ["Customer ID", 1, 2, ""])

    def test_route_name_override(self):
        grid = render_delivery_slip(self.data, "South 2")
        self.assertEqual(grid[1], ["Route: South 2"])

    def test_no_customers_raise(self):
        with self.assertRaises(NothingToExportError):
            render_delivery_slip(DeliverySlipData(route_name="North 1"))


class TestFormatVerticalHeader(unittest.TestCase):
    def test_single_word(self):
        self.assertEqual(format_vertical_header("Ravi"), "R\na\nv\ni")

    def test_words_separated_by_spacer_line(self):
        self.assertEqual(format_vertical_header("Sri KS"), "S\nr\ni\n \nK\nS")

    def test_delivery_header_names_are_stacked(self):
        grid = [
            ["Delivery Slip"],
            ["Route: North 1"],
            [],
            ["Items", "Ravi", "Sri KS", "Total Crates"],
            ["Nandini Milk 500 ML", 24, 12, 1],
        ]
        stacked = with_vertical_customer_headers(grid)
        self.assertEqual(stacked[3], ["Items", "R\na\nv\ni", "S\nr\ni\n \nK\nS", "Total Crates"])
        self.assertEqual(stacked[4], grid[4])
        self.assertEqual(grid[3][1], "Ravi")

    def test_short_grid_is_copied_unchanged(self):
        grid = [["Delivery Slip"]]
        self.assertEqual(with_vertical_customer_headers(grid), grid)


if __name__ == "__main__":
    unittest.main()

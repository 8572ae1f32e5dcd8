"""Tests for unit parsing, base-unit conversion and crate calculation."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.models.slips import ParsedUnit
from src.slips.units import (
    CRATE_SIZE,
    CatalogUnitExtractor,
    RegexUnitExtractor,
    parse_unit,
    to_base_units,
    to_crates,
)


@pytest.mark.parametrize(
    "name, value, unit",
    [
        ("Toned Milk 500 ML", 500.0, "ml"),
        ("Toned Milk 500ml", 500.0, "ml"),
        ("Amul Ghee 1 LTR", 1.0, "ltr"),
        ("Butter 200 GRMS", 200.0, "gm"),
        ("Cheese Slices 200 GM", 200.0, "gm"),
        ("Sugar 5g", 5.0, "gm"),
        ("Curd 1.5 kg", 1.5, "kg"),
    ],
)
def test_parse_unit_recognised_tokens(name, value, unit):
    parsed = parse_unit(name)
    assert parsed.value == value
    assert parsed.unit == unit


def test_parse_unit_first_match_wins():
    parsed = parse_unit("Paneer 200g Combo 500ML")
    assert parsed == ParsedUnit(value=200, unit="gm")


@pytest.mark.parametrize("name", ["Paneer Block", "", "Egg Tray 30", "Buttermilk Pouch"])
def test_parse_unit_defaults_to_each(name):
    assert parse_unit(name) == ParsedUnit(value=1, unit="unit")


def test_parse_unit_none_name_does_not_raise():
    assert RegexUnitExtractor().extract(None).unit == "unit"


def test_catalog_extractor_prefers_catalog_then_falls_back():
    extractor = CatalogUnitExtractor({"Paneer Block": ParsedUnit(value=0.5, unit="kg")})
    assert extractor.extract("Paneer Block") == ParsedUnit(value=0.5, unit="kg")
    assert extractor.extract("paneer block") == ParsedUnit(value=0.5, unit="kg")
    assert extractor.extract("Nandini Milk 500 ML") == ParsedUnit(value=500, unit="ml")
    assert extractor.extract("Egg Tray").unit == "unit"


def test_to_base_units_per_unit():
    assert to_base_units(ParsedUnit(value=500, unit="ml"), 2) == 1.0
    assert to_base_units(ParsedUnit(value=200, unit="gm"), 30) == 6.0
    assert to_base_units(ParsedUnit(value=1, unit="ltr"), 6) == 6.0
    assert to_base_units(ParsedUnit(value=1.5, unit="kg"), 4) == 6.0
    assert to_base_units(ParsedUnit(value=1, unit="unit"), 5) == 5.0
    assert to_base_units(ParsedUnit(value=500, unit="ml"), 0) == 0.0


def test_to_base_units_rejects_negative_count():
    with pytest.raises(ValueError):
        to_base_units(ParsedUnit(value=500, unit="ml"), -1)


def test_crate_truncation():
    assert CRATE_SIZE == 12
    assert to_crates(0) == 0
    assert to_crates(11.9) == 0
    assert to_crates(11.9999999) == 0
    assert to_crates(12.0) == 1
    assert to_crates(23.999) == 1
    assert to_crates(24) == 2

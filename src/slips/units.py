"""Unit inference and base-unit / crate arithmetic for packaged products.

Product names carry their pack size as free text ("Nandini Milk 500 ML",
"Amul Butter 200 GRMS"). The extractor pulls out that size, the converter
turns N packs into litres / kilograms (or plain eaches), and the crate
calculator floors that into crates.
"""

import math
import re
from collections.abc import Mapping
from typing import Protocol

from src.models.slips import ParsedUnit

# Base units per crate.
CRATE_SIZE = 12

UNIT_PATTERN = re.compile(r"(\d+\.?\d*)\s*(ML|LTR|KG|GRMS|GM|G)", re.IGNORECASE)

_UNIT_ALIASES = {
    "ml": "ml",
    "ltr": "ltr",
    "kg": "kg",
    "grms": "gm",
    "gm": "gm",
    "g": "gm",
}

# Packs with no size in the name count as single eaches.
DEFAULT_UNIT = ParsedUnit(value=1, unit="unit")


class UnitExtractor(Protocol):
    """Anything that can tell the pack size of a product."""

    def extract(self, product_name: str) -> ParsedUnit:
        """Return the pack measure for product_name. Must not raise."""
        ...


class RegexUnitExtractor:
    """Reads the first `<number><unit>` token out of the product name."""

    def __init__(self, pattern: re.Pattern[str] = UNIT_PATTERN):
        self._pattern = pattern

    def extract(self, product_name: str) -> ParsedUnit:
        match = self._pattern.search(product_name or "")
        if not match:
            return DEFAULT_UNIT
        unit = _UNIT_ALIASES.get(match.group(2).lower())
        if unit is None:
            return DEFAULT_UNIT
        return ParsedUnit(value=float(match.group(1)), unit=unit)


class CatalogUnitExtractor:
    """Looks the product up in master data first; falls back to another extractor.

    Catalog keys are matched exactly, then case-insensitively.
    """

    def __init__(
        self,
        catalog: Mapping[str, ParsedUnit],
        fallback: UnitExtractor | None = None,
    ):
        self._catalog = dict(catalog)
        self._folded = {name.casefold(): unit for name, unit in self._catalog.items()}
        self._fallback = fallback or RegexUnitExtractor()

    def extract(self, product_name: str) -> ParsedUnit:
        name = product_name or ""
        if name in self._catalog:
            return self._catalog[name]
        folded = self._folded.get(name.casefold())
        if folded is not None:
            return folded
        return self._fallback.extract(name)


_default_extractor = RegexUnitExtractor()


def parse_unit(product_name: str) -> ParsedUnit:
    """Parse the pack size from a product name with the default regex extractor."""
    return _default_extractor.extract(product_name)


def to_base_units(parsed: ParsedUnit, ordered_count: int) -> float:
    """Total litres / kilograms (or eaches for `unit`) across ordered_count packs."""
    if ordered_count < 0:
        raise ValueError(f"ordered_count must be >= 0, got {ordered_count}")
    if parsed.unit in ("ml", "gm"):
        return (parsed.value * ordered_count) / 1000
    if parsed.unit in ("ltr", "kg"):
        return parsed.value * ordered_count
    return float(ordered_count)


def to_crates(base_unit_quantity: float) -> int:
    """Whole crates in base_unit_quantity; the remainder below CRATE_SIZE is dropped."""
    return math.floor(base_unit_quantity / CRATE_SIZE)

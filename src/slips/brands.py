"""Brand-wise crate totals."""

from collections.abc import Iterable, Mapping

from src.models.slips import BrandTotal, ConsolidatedProduct


def brand_key(product_name: str) -> str:
    """First whitespace-delimited word, upper-cased. Multi-word brands collapse to their first word."""
    parts = (product_name or "").split()
    return parts[0].upper() if parts else ""


def aggregate_brands(
    products: Mapping[str, ConsolidatedProduct] | Iterable[ConsolidatedProduct],
    sort: bool = False,
) -> list[BrandTotal]:
    """Sum total_crates per brand. First-seen brand order unless sort is set."""
    items = products.values() if isinstance(products, Mapping) else products
    totals: dict[str, int] = {}
    for product in items:
        key = brand_key(product.name)
        totals[key] = totals.get(key, 0) + product.total_crates
    out = [BrandTotal(brand=brand, total_crates=crates) for brand, crates in totals.items()]
    if sort:
        out.sort(key=lambda b: b.brand)
    return out

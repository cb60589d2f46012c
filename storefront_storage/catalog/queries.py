"""
Read-only catalog queries.

These back the storefront views: home page strips, category pages
with subcategory chips, search, favorites and the detail page.
Products whose category or subcategory does not match anything are
not errors; they just do not show up.
"""

from __future__ import annotations

from collections.abc import Iterable

from .defaults import ALL_CATEGORIES
from .types import AppState, Banner, Product

BEST_SELLERS_LIMIT = 50


def search_products(products: Iterable[Product], query: str) -> list[Product]:
    """Case-insensitive substring match on product names.

    A blank query matches everything.
    """
    needle = query.strip().lower()
    if not needle:
        return list(products)
    return [p for p in products if needle in p.name.lower()]


def filter_products(
    products: Iterable[Product],
    category: str | None = None,
    subcategory: str | None = None,
    query: str = "",
) -> list[Product]:
    """Filter products the way a category page does.

    Args:
        products: Products to filter
        category: Category name; None or "Tudo" keeps every category
        subcategory: Subcategory name to narrow to
        query: Free-text search applied last

    Returns:
        Matching products in their original order
    """
    result = list(products)
    if category and category != ALL_CATEGORIES:
        result = [p for p in result if p.category == category]
    if subcategory:
        result = [p for p in result if p.subcategory == subcategory]
    return search_products(result, query)


def subcategories_of(state: AppState, category_name: str) -> list[str]:
    """Subcategory names of the category with this name, or an empty list."""
    for category in state.categories:
        if category.name == category_name:
            return list(category.subcategories)
    return []


def sort_best_sellers_first(products: Iterable[Product]) -> list[Product]:
    """Stable sort putting best sellers ahead of everything else."""
    return sorted(products, key=lambda p: not p.is_best_seller)


def best_sellers(products: Iterable[Product], limit: int = BEST_SELLERS_LIMIT) -> list[Product]:
    return [p for p in products if p.is_best_seller][:limit]


def featured_products(products: Iterable[Product]) -> list[Product]:
    return [p for p in products if p.is_featured]


def products_by_category(state: AppState) -> list[tuple[str, list[Product]]]:
    """Group products under each category, in category order.

    Categories without products are included with an empty list so the
    caller decides whether to render them.
    """
    return [
        (
            category.name,
            sort_best_sellers_first(p for p in state.products if p.category == category.name),
        )
        for category in state.categories
    ]


def favorite_products(state: AppState) -> list[Product]:
    """Products the visitor favorited; IDs of deleted products are skipped."""
    by_id = {p.id: p for p in state.products}
    return [by_id[f] for f in state.favorites if f in by_id]


def is_favorite(state: AppState, product_id: str) -> bool:
    return product_id in state.favorites


def current_banner(state: AppState) -> Banner | None:
    """The banner on display: the most recently added one."""
    return state.banners[-1] if state.banners else None


def find_product(state: AppState, product_id: str) -> Product | None:
    """Look up a product for the detail page; None means not found."""
    return next((p for p in state.products if p.id == product_id), None)


def discount_percent(product: Product) -> int | None:
    """Percentage off the original price, rounded, or None without a discount."""
    if not product.original_price or product.original_price <= product.price:
        return None
    return round((1 - product.price / product.original_price) * 100)

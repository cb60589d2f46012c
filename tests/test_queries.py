"""Tests for read-only catalog queries."""

from __future__ import annotations

from storefront_storage.catalog import queries
from storefront_storage.catalog.types import AppState

from .conftest import make_banner, make_product, make_state


class TestFiltering:
    """Tests for search and category filtering."""

    def test_search_is_case_insensitive(self) -> None:
        products = [make_product("a", name="Fone Bluetooth"), make_product("b", name="TV 50")]

        assert [p.id for p in queries.search_products(products, "fone")] == ["a"]

    def test_blank_search_matches_everything(self) -> None:
        products = [make_product("a"), make_product("b")]

        assert queries.search_products(products, "   ") == products

    def test_all_categories_keeps_every_product(self) -> None:
        state = make_state()

        result = queries.filter_products(state.products, category="Tudo")

        assert result == state.products

    def test_filter_by_category_and_subcategory(self) -> None:
        state = make_state()

        assert [p.id for p in queries.filter_products(state.products, "Casa")] == ["p2"]
        assert [
            p.id for p in queries.filter_products(state.products, "Eletrônicos", "Fones")
        ] == ["p1"]
        assert queries.filter_products(state.products, "Eletrônicos", "TVs") == []

    def test_subcategories_of(self) -> None:
        state = make_state()

        assert queries.subcategories_of(state, "Eletrônicos") == ["Celulares", "Fones"]
        assert queries.subcategories_of(state, "Inexistente") == []


class TestHomePage:
    """Tests for the home page strips."""

    def test_best_sellers_sorted_first_stably(self) -> None:
        products = [
            make_product("a"),
            make_product("b", is_best_seller=True),
            make_product("c"),
            make_product("d", is_best_seller=True),
        ]

        assert [p.id for p in queries.sort_best_sellers_first(products)] == ["b", "d", "a", "c"]

    def test_best_sellers_limit(self) -> None:
        products = [make_product(str(i), is_best_seller=True) for i in range(60)]

        assert len(queries.best_sellers(products)) == queries.BEST_SELLERS_LIMIT
        assert len(queries.best_sellers(products, limit=5)) == 5

    def test_featured_products(self) -> None:
        products = [make_product("a", is_featured=True), make_product("b")]

        assert [p.id for p in queries.featured_products(products)] == ["a"]

    def test_products_by_category_includes_empty_categories(self) -> None:
        state = make_state()
        state.products.append(make_product("p3", category="Casa", is_best_seller=True))

        groups = queries.products_by_category(state)

        assert [name for name, _ in groups] == ["Eletrônicos", "Casa"]
        assert [p.id for p in groups[1][1]] == ["p3", "p2"]

    def test_current_banner_is_last(self) -> None:
        state = make_state()
        state.banners.append(make_banner("b2"))

        assert queries.current_banner(state).id == "b2"
        assert queries.current_banner(AppState()) is None


class TestProductViews:
    """Tests for favorites and the detail page."""

    def test_favorite_products_skip_dangling_ids(self) -> None:
        state = make_state()
        state.favorites.append("deleted")

        assert [p.id for p in queries.favorite_products(state)] == ["p2"]
        assert queries.is_favorite(state, "p2") is True
        assert queries.is_favorite(state, "p1") is False

    def test_find_product(self) -> None:
        state = make_state()

        assert queries.find_product(state, "p1").id == "p1"
        assert queries.find_product(state, "missing") is None

    def test_discount_percent(self) -> None:
        assert queries.discount_percent(make_product(price=75.0, original_price=100.0)) == 25
        assert queries.discount_percent(make_product(price=100.0)) is None
        assert queries.discount_percent(make_product(price=100.0, original_price=90.0)) is None

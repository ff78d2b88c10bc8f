import pytest

from storefront.products import ProductCriteria, filter_products, category_counts, has_active_filters


def ids(products):
    return [p.id for p in products]


def test_category_filter(catalog):
    result = filter_products(catalog, ProductCriteria(category="miniatures"))
    assert set(ids(result)) == {"2", "4"}


def test_category_and_price_range(catalog):
    result = filter_products(catalog, ProductCriteria(category="miniatures", price_range=(0, 20)))
    assert ids(result) == ["2"]


def test_search_is_case_insensitive_over_title_description_material(catalog):
    assert ids(filter_products(catalog, ProductCriteria(search="DRAGON"))) == ["2"]
    assert ids(filter_products(catalog, ProductCriteria(search="adjustable"))) == ["3"]
    assert set(ids(filter_products(catalog, ProductCriteria(search="pla")))) == {"1", "4"}


def test_materials_and_colors(catalog):
    assert set(ids(filter_products(catalog, ProductCriteria(materials=frozenset({"PETG", "Resin"}))))) == {"2", "3"}
    assert set(ids(filter_products(catalog, ProductCriteria(colors=frozenset({"Red", "Gray"}))))) == {"1", "2", "4"}


@pytest.mark.parametrize(
    "sort_by,expected",
    [
        ("newest", ["4", "2", "1", "3"]),
        ("oldest", ["3", "1", "2", "4"]),
        ("price-low", ["3", "2", "1", "4"]),
        ("price-high", ["4", "1", "2", "3"]),
        ("name-az", ["3", "4", "2", "1"]),
        ("name-za", ["1", "2", "4", "3"]),
        ("rating", ["2", "4", "1", "3"]),
        ("popular", ["2", "4", "1", "3"]),
    ],
)
def test_sort_orders(catalog, sort_by, expected):
    assert ids(filter_products(catalog, ProductCriteria(sort_by=sort_by))) == expected


def test_unknown_sort_key(catalog):
    with pytest.raises(ValueError):
        filter_products(catalog, ProductCriteria(sort_by="cheapest"))


def test_input_list_untouched(catalog):
    before = ids(catalog)
    filter_products(catalog, ProductCriteria(sort_by="price-high"))
    assert ids(catalog) == before


def test_category_counts_and_active_filters(catalog):
    assert category_counts(catalog) == {"all": 4, "home-decor": 1, "miniatures": 2, "gadgets": 1}
    assert has_active_filters(ProductCriteria()) is False
    assert has_active_filters(ProductCriteria(sort_by="rating")) is False
    assert has_active_filters(ProductCriteria(price_range=(10, 100))) is True

import pytest
from graphql import parse

from citisignal_mesh import queries
from citisignal_mesh.queries import build_operation


SELECTIONS = [
    ("productSearch", queries.PRODUCT_LIST),
    ("productSearch", queries.PRODUCT_LIST_WITH_FACETS),
    ("productSearch", queries.SEARCH_RANKING),
    ("productSearch", queries.FACETS_ONLY),
    ("productSearch", queries.SEARCH_SUGGESTIONS),
    ("productSearch", queries.PRODUCT_DETAIL),
    ("productSearch", queries.CATALOG_PASSTHROUGH),
    ("products", queries.COMMERCE_VARIANTS),
    ("categoryList", queries.CATEGORY_TREE),
    ("categoryList", queries.CATEGORY_BREADCRUMBS),
    ("categoryList", queries.CATEGORY_DETAILS),
    ("cart", queries.CART_ID),
    ("cart", queries.CART_DETAILS),
    ("updateCartItems", queries.CART_MUTATION_RESULT),
]


class TestBuildOperation:
    def test_named_query_with_typed_variables(self) -> None:
        document = build_operation(
            "query", "Catalog_productSearch", "productSearch", {"phrase": "x", "page_size": 2}, "{ total_count }"
        )

        assert document == (
            "query Catalog_productSearch($phrase: String!, $page_size: Int) "
            "{ productSearch(phrase: $phrase, page_size: $page_size) { total_count } }"
        )

    def test_mutation_without_variables(self) -> None:
        assert build_operation("mutation", "Commerce_createEmptyCart", "createEmptyCart", {}) == (
            "mutation Commerce_createEmptyCart { createEmptyCart }"
        )

    def test_unknown_field(self) -> None:
        with pytest.raises(ValueError):
            build_operation("query", "X", "nope", {})

    def test_unknown_argument(self) -> None:
        with pytest.raises(ValueError):
            build_operation("query", "X", "cart", {"cart_id": "1", "extra": 2})


@pytest.mark.parametrize("field,selection", SELECTIONS)
def test_selection_sets_parse(field: str, selection: str) -> None:
    variables = {"cart_id": "1"} if field == "cart" else {}
    parse(build_operation("query", f"Test_{field}", field, variables, selection))

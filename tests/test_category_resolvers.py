"""Tests for navigation, breadcrumbs and the unified category page."""

from citisignal_mesh.resolvers.category_breadcrumbs import resolve_category_breadcrumbs
from citisignal_mesh.resolvers.category_navigation import resolve_category_navigation
from citisignal_mesh.resolvers.category_page import resolve_category_page
from citisignal_mesh.sources import SourceError

from fixtures import MANUFACTURER_FACET, RAW_CATEGORY_TREE, search_response, simple_view


PHONES_DETAILS = {
    "id": 2,
    "name": "Phones",
    "url_path": "phones",
    "description": "All phones",
    "meta_title": None,
    "meta_description": None,
    "breadcrumbs": [],
}


def category_list(args):
    if args.get("filters"):
        return [PHONES_DETAILS]
    return RAW_CATEGORY_TREE


class TestCategoryNavigation:
    def test_header_and_footer(self, info, commerce) -> None:
        commerce.responses["categoryList"] = RAW_CATEGORY_TREE

        result = resolve_category_navigation(None, info)

        assert [i["name"] for i in result["items"]] == ["Watches", "Phones"]
        assert result["headerNav"] == [
            {"href": "/watches", "label": "Watches", "category": "watches"},
            {"href": "/phones", "label": "Phones", "category": "phones"},
        ]
        assert result["footerNav"] == [{"href": "/watches", "label": "Watches"}, {"href": "/phones", "label": "Phones"}]
        assert commerce.calls[0][2] == {"filters": {}}

    def test_max_items(self, info, commerce) -> None:
        commerce.responses["categoryList"] = RAW_CATEGORY_TREE

        result = resolve_category_navigation(None, info, type="FOOTER", maxItems=1)

        assert [i["name"] for i in result["items"]] == ["Watches"]

    def test_failure_returns_empty(self, info, commerce) -> None:
        commerce.responses["categoryList"] = SourceError("GraphQL error: down")

        assert resolve_category_navigation(None, info) == {"items": [], "headerNav": [], "footerNav": []}


class TestCategoryBreadcrumbs:
    def test_no_category(self, info, commerce) -> None:
        assert resolve_category_breadcrumbs(None, info) == {"items": []}
        assert commerce.calls == []

    def test_trail(self, info, commerce) -> None:
        commerce.responses["categoryList"] = [
            {
                "id": 5,
                "name": "Android",
                "url_path": "phones/android",
                "level": 3,
                "breadcrumbs": [{"category_id": 2, "category_name": "Phones", "category_url_path": "phones", "category_level": 2}],
            }
        ]

        result = resolve_category_breadcrumbs(None, info, categoryUrlKey="android")

        assert [b["name"] for b in result["items"]] == ["Phones", "Android"]
        assert result["items"][1]["urlPath"] == "/phones/android"
        assert commerce.calls[0][2] == {"filters": {"url_key": {"eq": "android"}}}

    def test_unknown_category(self, info, commerce) -> None:
        commerce.responses["categoryList"] = []

        assert resolve_category_breadcrumbs(None, info, categoryUrlKey="nope") == {"items": []}

    def test_failure_returns_empty(self, info, commerce) -> None:
        commerce.responses["categoryList"] = SourceError("GraphQL error: down")

        assert resolve_category_breadcrumbs(None, info, categoryUrlKey="phones") == {"items": []}


class TestCategoryPage:
    def test_full_page(self, info, commerce, catalog, search) -> None:
        commerce.responses["categoryList"] = category_list
        catalog.responses["productSearch"] = search_response(
            [simple_view()], total_count=30, total_pages=2, facets=[MANUFACTURER_FACET]
        )

        page = resolve_category_page(None, info, categoryUrlKey="phones", filter={"facets": {"color": "Black"}})

        assert [i["name"] for i in page["navigation"]["items"]] == ["Watches", "Phones"]
        assert page["navigation"]["headerNav"][1]["children"][0]["label"] == "Android"
        assert page["products"]["totalCount"] == 30
        assert page["products"]["hasMoreItems"] is True
        assert page["products"]["items"][0]["sku"] == "PHONE-1"
        assert page["facets"]["facets"][0]["key"] == "manufacturer"
        assert page["breadcrumbs"]["items"] == [
            {"categoryId": 2, "name": "Phones", "urlPath": "phones", "level": 0, "isActive": True}
        ]
        assert page["categoryInfo"]["name"] == "Phones"
        assert page["categoryInfo"]["urlKey"] == "phones"
        assert page["categoryInfo"]["metaTitle"] == "Phones"
        assert catalog.calls[0][2]["filter"] == [
            {"attribute": "categoryPath", "in": ["phones"]},
            {"attribute": "cs_color", "in": ["Black"]},
        ]
        assert len(commerce.calls) == 2
        assert search.calls == []

    def test_phrase_uses_live_search(self, info, commerce, catalog, search) -> None:
        commerce.responses["categoryList"] = category_list
        search.responses["productSearch"] = search_response([simple_view()])

        resolve_category_page(None, info, categoryUrlKey="phones", phrase="pixel")

        assert search.calls[0][2]["filter"] == [{"attribute": "categories", "in": ["phones"]}]
        assert catalog.calls == []

    def test_all_products(self, info, commerce, catalog) -> None:
        commerce.responses["categoryList"] = category_list
        catalog.responses["productSearch"] = search_response([])

        page = resolve_category_page(None, info)

        assert page["categoryInfo"]["name"] == "All Products"
        assert page["breadcrumbs"]["items"] == []
        assert len(commerce.calls) == 1

    def test_failure_returns_empty_page(self, info, commerce, catalog) -> None:
        commerce.responses["categoryList"] = category_list
        catalog.responses["productSearch"] = SourceError("GraphQL error: down")

        page = resolve_category_page(None, info, categoryUrlKey="phones")

        assert page["products"]["items"] == []
        assert page["products"]["page_info"] == {"current_page": 1, "page_size": 20, "total_pages": 0}
        assert page["navigation"] == {"items": [], "headerNav": [], "footerNav": []}
        assert page["categoryInfo"]["name"] == "All Products"

"""Whole category page (navigation, products, facets, breadcrumbs) in one query.

The category tree, the product listing and the category details are fetched
in parallel; a failure anywhere yields the empty page so server-side
rendering still gets a schema-valid payload.
"""

from __future__ import annotations
import logging
from typing import Dict, Optional

from ..facets import transform_facets
from ..filters import build_page_filters, catalog_sort_input, map_sort_for_live_search, should_use_live_search
from ..navigation import (
    build_breadcrumbs,
    build_footer_nav,
    build_header_nav,
    filter_for_navigation,
    transform_category,
)
from ..queries import CATEGORY_DETAILS, CATEGORY_TREE, PRODUCT_LIST_WITH_FACETS
from ..sources import MeshContext, gather
from ..transform import DEFAULT_PAGE_SIZE, transform_product_to_card


logger = logging.getLogger(__name__)

NAVIGATION_LIMIT = 10
EMPTY_PAGE_SIZE = 20
ALL_PRODUCTS = "All Products"


def execute_unified_query(context: MeshContext, args: Dict) -> Dict:
    category_url_key = args.get("categoryUrlKey")
    use_search = should_use_live_search(args.get("phrase"))

    def fetch_products():
        if use_search:
            return context.search.query(
                "productSearch",
                {
                    "phrase": args.get("phrase"),
                    "filter": build_page_filters(category_url_key, args.get("filter"), "search"),
                    "page_size": args.get("limit") or DEFAULT_PAGE_SIZE,
                    "current_page": args.get("page") or 1,
                    "sort": map_sort_for_live_search(args.get("sort")),
                },
                PRODUCT_LIST_WITH_FACETS,
            )
        return context.catalog.query(
            "productSearch",
            {
                "phrase": "",
                "filter": build_page_filters(category_url_key, args.get("filter"), "catalog"),
                "page_size": args.get("limit") or DEFAULT_PAGE_SIZE,
                "current_page": args.get("page") or 1,
                "sort": catalog_sort_input(args.get("sort")),
            },
            PRODUCT_LIST_WITH_FACETS,
        )

    calls = [
        lambda: context.commerce.query("categoryList", {"filters": {}}, CATEGORY_TREE),
        fetch_products,
    ]
    if category_url_key:
        calls.append(
            lambda: context.commerce.query(
                "categoryList",
                {"filters": {"url_key": {"eq": category_url_key}}},
                CATEGORY_DETAILS,
            )
        )

    results = gather(*calls)
    category_list = results[2] if len(results) > 2 else None
    return {
        "navigation": results[0],
        "products": results[1],
        "category": category_list[0] if category_list else None,
    }


def _category_info(category: Optional[Dict]) -> Dict:
    if not category:
        return {
            "id": None,
            "name": ALL_PRODUCTS,
            "urlKey": "",
            "description": None,
            "metaTitle": None,
            "metaDescription": None,
        }
    return {
        "id": category.get("id"),
        "name": category.get("name") or ALL_PRODUCTS,
        "urlKey": category.get("url_path") or "",
        "description": category.get("description"),
        "metaTitle": category.get("meta_title") or category.get("name"),
        "metaDescription": category.get("meta_description"),
    }


def assemble_page_response(navigation, products: Optional[Dict], category: Optional[Dict]) -> Dict:
    tree = [transform_category(c) for c in navigation or []]
    nav_items = filter_for_navigation([c for c in tree if c], NAVIGATION_LIMIT)

    products = products or {}
    cards = [transform_product_to_card(i.get("productView")) for i in products.get("items") or []]
    page_info = products.get("page_info")
    current_page = (page_info or {}).get("current_page") or 1
    total_pages = (page_info or {}).get("total_pages") or 1
    total_count = products.get("total_count") or 0

    return {
        "navigation": {
            "items": nav_items,
            "headerNav": build_header_nav(nav_items, 5),
            "footerNav": build_footer_nav(nav_items, 8),
        },
        "products": {
            "items": [c for c in cards if c],
            "totalCount": total_count,
            "hasMoreItems": current_page < total_pages,
            "currentPage": current_page,
            "page_info": (
                {
                    "current_page": page_info.get("current_page"),
                    "page_size": page_info.get("page_size"),
                    "total_pages": page_info.get("total_pages"),
                }
                if page_info
                else None
            ),
        },
        "facets": {"facets": transform_facets(products.get("facets") or []), "totalCount": total_count},
        "breadcrumbs": {"items": build_breadcrumbs(category)},
        "categoryInfo": _category_info(category),
    }


def create_empty_response() -> Dict:
    return {
        "navigation": {"items": [], "headerNav": [], "footerNav": []},
        "products": {
            "items": [],
            "totalCount": 0,
            "hasMoreItems": False,
            "currentPage": 1,
            "page_info": {"current_page": 1, "page_size": EMPTY_PAGE_SIZE, "total_pages": 0},
        },
        "facets": {"facets": [], "totalCount": 0},
        "breadcrumbs": {"items": []},
        "categoryInfo": _category_info(None),
    }


def resolve_category_page(_root, info, **args) -> Dict:
    try:
        data = execute_unified_query(info.context, args)
        return assemble_page_response(data["navigation"], data["products"], data["category"])
    except Exception as e:
        logger.error(f"Category page error: {str(e)[:60]}")
        return create_empty_response()


RESOLVERS = {
    "Query": {
        "Citisignal_categoryPageData": resolve_category_page,
    },
}

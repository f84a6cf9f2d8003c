from __future__ import annotations
import logging
from typing import Dict

from ..facets import transform_facets
from ..filters import (
    build_catalog_filters,
    build_live_search_filters,
    catalog_sort_input,
    map_sort_for_live_search,
    should_use_live_search,
)
from ..queries import PRODUCT_LIST_WITH_FACETS
from ..sources import MeshContext
from ..transform import DEFAULT_PAGE_SIZE, build_card_result, transform_product_to_card


logger = logging.getLogger(__name__)


def execute_search_filter(context: MeshContext, args: Dict) -> Dict:
    """Products and facets from a single upstream call."""
    if should_use_live_search(args.get("phrase")):
        client = context.search
        variables = {
            "phrase": args.get("phrase") or "",
            "filter": build_live_search_filters(args.get("filter")),
            "sort": map_sort_for_live_search(args.get("sort")),
        }
    else:
        client = context.catalog
        variables = {
            "phrase": "",
            "filter": build_catalog_filters(args.get("filter")),
            "sort": catalog_sort_input(args.get("sort")),
        }
    variables["page_size"] = args.get("limit") or DEFAULT_PAGE_SIZE
    variables["current_page"] = args.get("page") or 1

    result = client.query("productSearch", variables, PRODUCT_LIST_WITH_FACETS) or {}
    products = [transform_product_to_card(i.get("productView")) for i in result.get("items") or []]
    return {
        "products": [p for p in products if p],
        "facets": transform_facets(result.get("facets") or []),
        "page_info": result.get("page_info"),
        "total_count": result.get("total_count") or 0,
    }


def empty_search_filter(args: Dict) -> Dict:
    return {
        "products": {
            "items": [],
            "totalCount": 0,
            "hasMoreItems": False,
            "currentPage": 1,
            "page_info": {
                "current_page": 1,
                "page_size": args.get("limit") or DEFAULT_PAGE_SIZE,
                "total_pages": 0,
            },
        },
        "facets": {"facets": [], "totalCount": 0},
        "totalCount": 0,
    }


def resolve_product_search_filter(_root, info, **args) -> Dict:
    try:
        result = execute_search_filter(info.context, args)
    except Exception as e:
        logger.error(f"Product search filter error: {str(e)[:60]}")
        return empty_search_filter(args)

    total = result["total_count"]
    return {
        "products": build_card_result(result["products"], total, result["page_info"], args),
        "facets": {"facets": result["facets"], "totalCount": total},
        "totalCount": total,
    }


RESOLVERS = {
    "Query": {
        "Citisignal_productSearchFilter": resolve_product_search_filter,
    },
}

from __future__ import annotations
import logging
from typing import Dict, List

from ..filters import (
    build_catalog_filters,
    build_live_search_filters,
    catalog_sort_input,
    map_sort_for_live_search,
    should_use_live_search,
)
from ..queries import PRODUCT_LIST, SEARCH_RANKING
from ..sources import MeshContext, gather
from ..transform import DEFAULT_PAGE_SIZE, build_card_result, transform_product_to_card


logger = logging.getLogger(__name__)


def _only_on_sale(items: List[Dict]) -> List[Dict]:
    return [i for i in items if (i.get("discountPercent") or 0) > 0]


def execute_search_mode(context: MeshContext, args: Dict) -> Dict:
    """Live Search ranking merged with Catalog Service product data."""
    page_size = args.get("limit") or DEFAULT_PAGE_SIZE
    current_page = args.get("page") or 1

    ranking, catalog = gather(
        lambda: context.search.query(
            "productSearch",
            {
                "phrase": args.get("phrase") or "",
                "filter": build_live_search_filters(args.get("filter")),
                "page_size": page_size,
                "current_page": current_page,
                "sort": map_sort_for_live_search(args.get("sort")),
            },
            SEARCH_RANKING,
        ),
        lambda: context.catalog.query(
            "productSearch",
            {
                "phrase": args.get("phrase") or "",
                "filter": build_catalog_filters(args.get("filter")),
                "page_size": page_size,
                "current_page": current_page,
                "sort": catalog_sort_input(args.get("sort")),
            },
            PRODUCT_LIST,
        ),
    )
    ranking = ranking or {}

    ordered_skus = []
    for item in ranking.get("items") or []:
        sku = (item.get("productView") or {}).get("sku") or (item.get("product") or {}).get("sku")
        if sku:
            ordered_skus.append(sku)

    by_sku = {}
    for item in (catalog or {}).get("items") or []:
        view = item.get("productView") or {}
        if view.get("sku"):
            by_sku[view["sku"]] = view

    items = [transform_product_to_card(by_sku[sku]) for sku in ordered_skus if sku in by_sku]
    on_sale_only = (args.get("filter") or {}).get("onSaleOnly")
    if on_sale_only:
        items = _only_on_sale(items)

    return {
        "items": items,
        "page_info": ranking.get("page_info"),
        "total_count": len(items) if on_sale_only else ranking.get("total_count") or 0,
    }


def execute_catalog_mode(context: MeshContext, args: Dict) -> Dict:
    result = context.catalog.query(
        "productSearch",
        {
            "phrase": "",
            "filter": build_catalog_filters(args.get("filter")),
            "page_size": args.get("limit") or DEFAULT_PAGE_SIZE,
            "current_page": args.get("page") or 1,
            "sort": catalog_sort_input(args.get("sort")),
        },
        PRODUCT_LIST,
    ) or {}

    items = [transform_product_to_card(i.get("productView")) for i in result.get("items") or []]
    items = [i for i in items if i]
    on_sale_only = (args.get("filter") or {}).get("onSaleOnly")
    if on_sale_only:
        items = _only_on_sale(items)

    return {
        "items": items,
        "page_info": result.get("page_info"),
        "total_count": len(items) if on_sale_only else result.get("total_count") or 0,
    }


def resolve_product_cards(_root, info, **args) -> Dict:
    context: MeshContext = info.context
    try:
        if should_use_live_search(args.get("phrase")):
            result = execute_search_mode(context, args)
        else:
            result = execute_catalog_mode(context, args)
        return build_card_result(result["items"], result["total_count"], result["page_info"], args)
    except Exception as e:
        logger.error(f"Product cards error: {str(e)[:60]}")
        raise


RESOLVERS = {
    "Query": {
        "Citisignal_productCards": resolve_product_cards,
    },
}

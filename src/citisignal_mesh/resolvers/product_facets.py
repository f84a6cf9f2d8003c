from __future__ import annotations
import logging
from typing import Dict, List

from ..facets import create_facet_query_params, transform_facets
from ..filters import build_catalog_filters, build_live_search_filters, should_use_live_search
from ..queries import FACETS_ONLY
from ..sources import MeshContext


logger = logging.getLogger(__name__)


def fetch_facets(context: MeshContext, args: Dict) -> List[Dict]:
    # One product per page: aggregation counts cover every match
    params = create_facet_query_params(args.get("filter"))
    if should_use_live_search(args.get("phrase")):
        client = context.search
        phrase = args.get("phrase") or ""
        filters = build_live_search_filters(params["filter"])
    else:
        client = context.catalog
        phrase = ""
        filters = build_catalog_filters(params["filter"])

    result = client.query(
        "productSearch",
        {
            "phrase": phrase,
            "filter": filters,
            "page_size": params["page_size"],
            "current_page": params["current_page"],
        },
        FACETS_ONLY,
    ) or {}
    return transform_facets(result.get("facets"))


def resolve_product_facets(_root, info, **args) -> Dict:
    try:
        return {"facets": fetch_facets(info.context, args)}
    except Exception as e:
        logger.error(f"Product facets error: {str(e)[:60]}")
        return {"facets": []}


RESOLVERS = {
    "Query": {
        "Citisignal_productFacets": resolve_product_facets,
    },
}

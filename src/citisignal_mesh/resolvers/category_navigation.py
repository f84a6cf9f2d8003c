from __future__ import annotations
import logging
from typing import Dict, List, Optional

from ..navigation import build_footer_nav, filter_for_navigation, transform_category
from ..queries import CATEGORY_TREE
from ..sources import MeshContext


logger = logging.getLogger(__name__)

DEFAULT_HEADER_NAV_ITEMS = 6
DEFAULT_FOOTER_NAV_ITEMS = 4
HEADER_NAV_LIMIT = 5
FOOTER_NAV_LIMIT = 8


def fetch_category_tree(context: MeshContext) -> List[Dict]:
    result = context.commerce.query("categoryList", {"filters": {}}, CATEGORY_TREE) or []
    categories = [transform_category(c) for c in result]
    return [c for c in categories if c]


def get_navigation_by_type(categories: List[Dict], nav_type: Optional[str], max_items: Optional[int]) -> List[Dict]:
    limit = max_items or (DEFAULT_FOOTER_NAV_ITEMS if nav_type == "FOOTER" else DEFAULT_HEADER_NAV_ITEMS)
    return filter_for_navigation(categories, limit)


def resolve_category_navigation(_root, info, type: Optional[str] = None, maxItems: Optional[int] = None) -> Dict:
    try:
        navigation = get_navigation_by_type(fetch_category_tree(info.context), type, maxItems)
    except Exception as e:
        logger.error(f"Category nav error: {str(e)[:63]}")
        return {"items": [], "headerNav": [], "footerNav": []}

    header_nav = [
        {"href": cat["href"], "label": cat["label"], "category": cat["urlKey"]}
        for cat in navigation[:HEADER_NAV_LIMIT]
    ]
    return {
        "items": navigation,
        "headerNav": header_nav,
        "footerNav": build_footer_nav(navigation, FOOTER_NAV_LIMIT),
    }


RESOLVERS = {
    "Query": {
        "Citisignal_categoryNavigation": resolve_category_navigation,
    },
}

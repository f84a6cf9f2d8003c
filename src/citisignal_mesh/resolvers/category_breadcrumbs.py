from __future__ import annotations
import logging
from typing import Dict, List, Optional

from ..navigation import build_breadcrumb_trail
from ..queries import CATEGORY_BREADCRUMBS
from ..sources import MeshContext


logger = logging.getLogger(__name__)


def fetch_breadcrumbs(context: MeshContext, category_url_key: Optional[str]) -> List[Dict]:
    if not category_url_key:
        return []
    try:
        result = context.commerce.query(
            "categoryList",
            {"filters": {"url_key": {"eq": category_url_key}}},
            CATEGORY_BREADCRUMBS,
        ) or []
    except Exception as e:
        logger.error(f"Fetch breadcrumbs error: {str(e)[:58]}")
        return []
    return build_breadcrumb_trail(result[0] if result else None)


def resolve_category_breadcrumbs(_root, info, categoryUrlKey: Optional[str] = None) -> Dict:
    try:
        return {"items": fetch_breadcrumbs(info.context, categoryUrlKey)}
    except Exception as e:
        logger.error(f"Breadcrumbs error: {str(e)[:63]}")
        return {"items": []}


RESOLVERS = {
    "Query": {
        "Citisignal_categoryBreadcrumbs": resolve_category_breadcrumbs,
    },
}

from __future__ import annotations
import logging
from typing import Dict, List, Optional

from ..images import ensure_https_url
from ..prices import dig, format_price
from ..queries import SEARCH_SUGGESTIONS
from ..sources import MeshContext


logger = logging.getLogger(__name__)

SUGGESTIONS_LIMIT = 5
MIN_PHRASE_LENGTH = 2


def transform_to_suggestion(item: Optional[Dict]) -> Optional[Dict]:
    if not item:
        return None
    product = item.get("product") or {}
    view = item.get("productView") or {}

    sku = view.get("sku") or product.get("sku")
    name = product.get("name") or view.get("name")
    price = (
        dig(view, "price", "final", "amount", "value")
        or dig(view, "price", "regular", "amount", "value")
        or dig(product, "price", "regularPrice", "amount", "value")
    )
    images = view.get("images") or []
    image_url = (
        (images[0].get("url") if images else None)
        or dig(product, "small_image", "url")
        or dig(product, "image", "url")
    )

    return {
        "id": view.get("id") or product.get("id") or sku or name,
        "name": name,
        "sku": sku,
        "urlKey": view.get("urlKey") or product.get("url_key") or product.get("urlKey") or sku,
        "price": format_price(price),
        "image": ensure_https_url(image_url),
    }


def fetch_suggestions(context: MeshContext, phrase: Optional[str]) -> List[Dict]:
    if not phrase or len(phrase.strip()) < MIN_PHRASE_LENGTH:
        return []
    result = context.search.query(
        "productSearch",
        {"phrase": phrase, "page_size": SUGGESTIONS_LIMIT, "current_page": 1},
        SEARCH_SUGGESTIONS,
    ) or {}
    suggestions = [transform_to_suggestion(i) for i in result.get("items") or []]
    return [s for s in suggestions if s]


def resolve_search_suggestions(_root, info, phrase: Optional[str] = None) -> Dict:
    try:
        return {"suggestions": fetch_suggestions(info.context, phrase)}
    except Exception as e:
        logger.error(f"Search suggestions error: {str(e)[:60]}")
        return {"suggestions": []}


RESOLVERS = {
    "Query": {
        "Citisignal_searchSuggestions": resolve_search_suggestions,
    },
}

from __future__ import annotations
import logging
from typing import Dict, List, Optional

from ..queries import COMMERCE_VARIANTS, PRODUCT_DETAIL
from ..sources import MeshContext
from ..transform import (
    extract_product_pricing,
    generate_product_breadcrumbs,
    is_complex_product,
    transform_configurable_options,
    transform_product_attributes,
    transform_product_images,
    transform_product_variants,
)


logger = logging.getLogger(__name__)


def query_product_variants(context: MeshContext, sku: str) -> List[Dict]:
    """Configurable variants from Commerce; the page still renders without them."""
    try:
        result = context.commerce.query("products", {"filter": {"sku": {"eq": sku}}}, COMMERCE_VARIANTS) or {}
    except Exception as e:
        logger.warning(f"Failed to fetch variants for {sku}: {str(e)[:60]}")
        return []
    items = result.get("items") or []
    return (items[0].get("variants") if items else None) or []


def query_product_by_url_key(context: MeshContext, url_key: str) -> Optional[Dict]:
    result = context.catalog.query(
        "productSearch",
        {
            "phrase": "",
            "filter": [{"attribute": "url_key", "in": [url_key]}],
            "page_size": 1,
            "current_page": 1,
        },
        PRODUCT_DETAIL,
    ) or {}
    items = result.get("items") or []
    if not items:
        return None
    return items[0].get("productView")


def transform_product(product: Optional[Dict], commerce_variants: Optional[List[Dict]] = None) -> Optional[Dict]:
    if not product:
        return None

    images = transform_product_images(product.get("images"), product.get("name"))
    attributes = transform_product_attributes(product.get("attributes"))
    configurable_options = transform_configurable_options(product.get("options"))

    detail = {
        "id": product.get("id") or "",
        "sku": product.get("sku") or "",
        "name": product.get("name") or "",
        "urlKey": product.get("urlKey") or "",
        "description": product.get("description") or "",
        "shortDescription": product.get("shortDescription") or "",
        "inStock": product.get("inStock") or False,
        "stockLevel": product.get("stockLevel") or None,
    }
    detail.update(extract_product_pricing(product, is_complex_product(product)))
    detail.update(
        {
            "images": images,
            "attributes": attributes,
            "breadcrumbs": generate_product_breadcrumbs(attributes, product),
            "configurable_options": configurable_options,
            "variants": transform_product_variants(commerce_variants or [], configurable_options),
        }
    )
    return detail


def resolve_product_detail(_root, info, urlKey: str) -> Optional[Dict]:
    context: MeshContext = info.context
    try:
        product = query_product_by_url_key(context, urlKey)
        if not product:
            return None

        variants: List[Dict] = []
        if is_complex_product(product) and product.get("sku"):
            variants = query_product_variants(context, product["sku"])
        return transform_product(product, variants)
    except Exception as e:
        logger.error(f"Product detail error: {str(e)[:60]}")
        raise


RESOLVERS = {
    "Query": {
        "Citisignal_productDetail": resolve_product_detail,
    },
}

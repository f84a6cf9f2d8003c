from __future__ import annotations
from typing import Any, Dict, List, Optional

from .attributes import extract_variant_options, find_attribute_value
from .images import ensure_https_url
from .mapping import attribute_code_to_url_key
from .prices import calculate_discount_percent, extract_price_value, format_price, is_on_sale


COMPLEX_TYPENAMES = ("Catalog_ComplexProductView", "Search_ComplexProductView")
PRODUCT_FAMILY_ATTRIBUTE = "cs_product_family"
COLOR_OPTION_CODE = "cs_color"
DEFAULT_PAGE_SIZE = 24


def is_complex_product(product: Dict) -> bool:
    return product.get("__typename") in COMPLEX_TYPENAMES


def transform_product_to_card(product: Optional[Dict]) -> Optional[Dict]:
    """Listing card shared by cards, search, facets and category page."""
    if not product:
        return None

    is_complex = is_complex_product(product)
    regular_price = extract_price_value(product, "regular", is_complex)
    final_price = extract_price_value(product, "final", is_complex)
    manufacturer = find_attribute_value(product.get("attributes"), "manufacturer")
    on_sale = is_on_sale(regular_price, final_price)

    images = product.get("images") or []
    image_url = images[0].get("url") if images else None

    card: Dict[str, Any] = {
        "id": product.get("id"),
        "sku": product.get("sku"),
        "name": product.get("name"),
        "urlKey": product.get("urlKey") or "",
        "manufacturer": manufacturer or None,
        "price": format_price(final_price),
        "originalPrice": format_price(regular_price) if on_sale else None,
        "discountPercent": calculate_discount_percent(regular_price, final_price),
        "inStock": product["inStock"] if "inStock" in product else True,
        "image": (
            {"url": ensure_https_url(image_url), "altText": images[0].get("label") or product.get("name")}
            if image_url
            else None
        ),
    }
    card.update(extract_variant_options(product.get("options")))
    card["configurable_options"] = transform_configurable_options(product.get("options"))
    return card


def transform_live_search_products(items: Optional[List[Dict]]) -> List[Dict]:
    if not isinstance(items, list):
        return []
    cards = [transform_product_to_card(item.get("productView")) for item in items]
    return [c for c in cards if c]


def transform_catalog_products(items: Optional[List[Dict]]) -> List[Dict]:
    if not isinstance(items, list):
        return []
    cards = []
    for item in items:
        product = item.get("productView") or item.get("product") or item
        card = transform_product_to_card(product)
        if card:
            cards.append(card)
    return cards


def _html_or_text(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("html") or ""
    return value or ""


def transform_product_detail(product: Optional[Dict]) -> Optional[Dict]:
    if not product:
        return None
    card = transform_product_to_card(product)
    if not card:
        return None

    name = product.get("name")
    detail = dict(card)
    detail.update(
        {
            "description": _html_or_text(product.get("description")),
            "shortDescription": _html_or_text(product.get("short_description")),
            "images": [
                {
                    "url": ensure_https_url(img.get("url")),
                    "label": img.get("label") or name,
                    "position": img.get("position") or 0,
                }
                for img in product.get("images") or []
            ],
            "metaTitle": product.get("meta_title") or name,
            "metaDescription": product.get("meta_description") or product.get("short_description"),
            "metaKeywords": product.get("meta_keywords") or "",
            "attributes": {
                attribute_code_to_url_key(attr.get("name")): attr.get("value")
                for attr in product.get("attributes") or []
            },
            "categories": product.get("categories") or [],
            "relatedProducts": product.get("related_products") or [],
            "crossSellProducts": product.get("crosssell_products") or [],
            "upSellProducts": product.get("upsell_products") or [],
        }
    )
    return detail


def create_empty_product_card(message: str = "") -> Dict:
    return {
        "id": "",
        "sku": "",
        "name": message or "Product not available",
        "urlKey": "",
        "manufacturer": None,
        "price": "$0.00",
        "originalPrice": None,
        "discountPercent": None,
        "inStock": False,
        "image": None,
        "memory": [],
        "colors": [],
    }


def merge_products(primary: Optional[List[Dict]], secondary: Optional[List[Dict]], key: str = "sku") -> List[Dict]:
    """Keep the primary ordering; primary fields win over secondary ones."""
    if not isinstance(primary, list):
        return secondary or []
    if not isinstance(secondary, list):
        return primary

    by_key = {p.get(key): p for p in secondary}
    merged: List[Dict] = []
    for item in primary:
        match = by_key.get(item.get(key))
        if match:
            combined = dict(match)
            combined.update(item)
            merged.append(combined)
        else:
            merged.append(item)
    return merged


# Detail page helpers

def extract_product_pricing(product: Dict, is_complex: bool) -> Dict:
    regular_price = extract_price_value(product, "regular", is_complex)
    final_price = extract_price_value(product, "final", is_complex)

    manufacturer = None
    for attr in product.get("attributes") or []:
        if attr.get("name") in ("manufacturer", "cs_manufacturer"):
            manufacturer = attr.get("value")
            break

    return {
        "price": format_price(final_price),
        "originalPrice": format_price(regular_price) if is_on_sale(regular_price, final_price) else None,
        "discountPercent": calculate_discount_percent(regular_price, final_price),
        "manufacturer": manufacturer or None,
    }


def transform_product_images(images: Optional[List[Dict]], product_name: Optional[str]) -> List[Dict]:
    return [
        {
            "url": ensure_https_url(image.get("url")),
            "altText": image.get("label") or product_name or "",
            "type": "image" if index == 0 else "thumbnail",
        }
        for index, image in enumerate(images or [])
    ]


def transform_product_attributes(attributes: Optional[List[Dict]]) -> List[Dict]:
    return [
        {
            "key": attr.get("name") or "",
            "label": attr.get("label") or attr.get("name") or "",
            "value": attr.get("value") or "",
            "type": "text",
        }
        for attr in attributes or []
    ]


def _swatch(value: Dict) -> Optional[Dict]:
    swatch = value.get("swatch_data")
    if not swatch:
        return None
    return {
        "type": swatch.get("type") or "color",
        "value": swatch.get("value") or value.get("value") or "",
    }


def transform_configurable_options(options: Optional[List[Dict]]) -> List[Dict]:
    return [
        {
            "label": option.get("title") or option.get("label") or "",
            "attribute_code": option.get("id") or "",
            "values": [
                {
                    "label": value.get("title") or value.get("label") or "",
                    "value": value.get("value") or "",
                    "swatch_data": _swatch(value),
                }
                for value in option.get("values") or []
            ],
        }
        for option in options or []
    ]


def _variant_attributes(variant: Dict, configurable_options: List[Dict]) -> Dict[str, str]:
    attributes: Dict[str, str] = {}
    color_option = next((o for o in configurable_options if o.get("attribute_code") == COLOR_OPTION_CODE), None)
    for attr in variant.get("attributes") or []:
        code, label = attr.get("code"), attr.get("label")
        if not code or not label:
            continue
        if code == COLOR_OPTION_CODE:
            # Commerce returns the colour label; the storefront selects by swatch value
            match = None
            if color_option:
                match = next((v for v in color_option.get("values") or [] if v.get("label") == label), None)
            attributes[code] = (match or {}).get("value") or label
        else:
            attributes[code] = label
    return attributes


def transform_product_variants(commerce_variants: Optional[List[Dict]], configurable_options: Optional[List[Dict]]) -> List[Dict]:
    variants: List[Dict] = []
    for variant in commerce_variants or []:
        product = variant.get("product") or {}
        minimum = (product.get("price_range") or {}).get("minimum_price") or {}
        regular_price = (minimum.get("regular_price") or {}).get("value")
        final_price = (minimum.get("final_price") or {}).get("value") or regular_price
        image = product.get("image")

        variants.append(
            {
                "id": product.get("sku") or "",
                "sku": product.get("sku") or "",
                "attributes": _variant_attributes(variant, configurable_options or []),
                "price": format_price(final_price),
                "originalPrice": (
                    format_price(regular_price)
                    if regular_price and final_price and regular_price > final_price
                    else None
                ),
                "inStock": product.get("stock_status") == "IN_STOCK",
                "stockLevel": None,
                "image": (
                    {
                        "url": ensure_https_url(image.get("url")),
                        "altText": image.get("label") or f"{product.get('sku')} variant",
                    }
                    if image
                    else None
                ),
            }
        )
    return variants


def generate_product_breadcrumbs(attributes: Optional[List[Dict]], product: Dict) -> Dict:
    category_name = "Products"
    category_path = "/products"
    for attr in attributes or []:
        if attr.get("key") == PRODUCT_FAMILY_ATTRIBUTE and attr.get("value"):
            category_name = attr["value"]
            category_path = f"/{category_name.lower()}"
            break

    return {
        "items": [
            {"name": category_name, "urlPath": category_path},
            {"name": product.get("name") or "", "urlPath": f"/products/{product.get('urlKey')}"},
        ]
    }


def build_card_result(items: List[Dict], total_count: int, page_info: Optional[Dict], args: Dict) -> Dict:
    """Product list payload with the computed hasMoreItems flag."""
    page_info = page_info or {}
    current_page = page_info.get("current_page") or args.get("page") or 1
    total_pages = page_info.get("total_pages") or 1
    return {
        "items": items,
        "totalCount": total_count,
        "hasMoreItems": current_page < total_pages,
        "currentPage": current_page,
        "page_info": {
            "current_page": current_page,
            "page_size": page_info.get("page_size") or args.get("limit") or DEFAULT_PAGE_SIZE,
            "total_pages": total_pages,
        },
    }

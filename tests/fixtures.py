"""Sample upstream payloads shaped like Catalog Service and Commerce responses."""

from typing import Any, Dict, List


def _money(value: float) -> Dict[str, Any]:
    return {"amount": {"value": value, "currency": "USD"}}


def simple_view(sku: str = "PHONE-1", regular: float = 999.0, final: float = 799.0, **extra: Any) -> Dict[str, Any]:
    view = {
        "__typename": "Catalog_SimpleProductView",
        "id": f"id-{sku}",
        "sku": sku,
        "name": f"Product {sku}",
        "urlKey": sku.lower(),
        "inStock": True,
        "images": [{"url": f"http://cdn.example.com/{sku}.jpg", "label": f"{sku} front"}],
        "attributes": [{"name": "cs_manufacturer", "value": "Apple"}],
        "price": {"regular": _money(regular), "final": _money(final)},
    }
    view.update(extra)
    return view


def complex_view(sku: str = "PHONE-2", regular: float = 1099.0, final: float = 1099.0, **extra: Any) -> Dict[str, Any]:
    swatch = "Catalog_ProductViewOptionValueSwatch"
    view = {
        "__typename": "Catalog_ComplexProductView",
        "id": f"id-{sku}",
        "sku": sku,
        "name": f"Product {sku}",
        "urlKey": sku.lower(),
        "inStock": True,
        "images": [{"url": f"//cdn.example.com/{sku}.jpg", "label": None}],
        "attributes": [{"name": "cs_manufacturer", "value": "Samsung"}],
        "priceRange": {"minimum": {"regular": _money(regular), "final": _money(final)}},
        "options": [
            {
                "id": "cs_color",
                "title": "Color",
                "values": [
                    {"__typename": swatch, "title": "Black", "value": "#000000"},
                    {"__typename": swatch, "title": "Silver", "value": "#C0C0C0"},
                ],
            },
            {
                "id": "cs_memory",
                "title": "Memory",
                "values": [
                    {"__typename": swatch, "title": "128GB", "value": "128GB"},
                    {"__typename": swatch, "title": "256GB", "value": "256GB"},
                ],
            },
        ],
    }
    view.update(extra)
    return view


def search_response(views: List[Dict], total_count: Any = None, total_pages: int = 1, facets: Any = None) -> Dict[str, Any]:
    response = {
        "items": [{"productView": v} for v in views],
        "total_count": len(views) if total_count is None else total_count,
        "page_info": {"current_page": 1, "page_size": 24, "total_pages": total_pages},
    }
    if facets is not None:
        response["facets"] = facets
    return response


MANUFACTURER_FACET = {
    "attribute": "cs_manufacturer",
    "title": "Manufacturer",
    "type": "PINNED",
    "buckets": [{"title": "Apple", "count": 3}, {"title": "Samsung", "count": 2}],
}

PRICE_FACET = {
    "attribute": "price",
    "title": "Price",
    "type": "RANGE",
    "buckets": [{"title": "300-400", "count": 2}, {"title": "700-800", "count": 1}],
}

EMPTY_FACET = {"attribute": "cs_connectivity", "title": "Connectivity", "buckets": []}


RAW_CATEGORY_TREE = [
    {
        "id": 2,
        "name": "Phones",
        "url_path": "phones",
        "url_key": "phones",
        "level": 2,
        "position": 2,
        "include_in_menu": 1,
        "is_active": True,
        "product_count": 10,
        "children": [
            {
                "id": 5,
                "name": "Android",
                "url_path": "phones/android",
                "url_key": "android",
                "level": 3,
                "position": 1,
                "include_in_menu": 1,
                "is_active": True,
                "children": [],
            }
        ],
    },
    {
        "id": 3,
        "name": "Watches",
        "url_path": "watches",
        "url_key": "watches",
        "level": 2,
        "position": 1,
        "include_in_menu": 1,
        "is_active": True,
    },
    {
        "id": 4,
        "name": "Hidden",
        "url_path": "hidden",
        "url_key": "hidden",
        "level": 2,
        "position": 0,
        "include_in_menu": 0,
        "is_active": True,
    },
]


def adobe_cart() -> Dict[str, Any]:
    return {
        "id": "cart-1",
        "items": [
            {
                "id": "11",
                "quantity": 2,
                "prices": {"price": {"value": 799.0}, "row_total": {"value": 1598.0}},
                "product": {
                    "id": 1,
                    "sku": "PHONE-1",
                    "name": "Phone",
                    "thumbnail": {"url": "https://cdn.example.com/t.jpg"},
                },
                "configurable_options": [
                    {"option_label": "Color", "value_label": "Black", "attribute_code": "cs_color"},
                    {"option_label": "Memory", "value_label": "128GB", "attribute_code": "cs_memory"},
                ],
            },
            {
                "id": "12",
                "quantity": 1,
                "prices": {},
                "product": {
                    "id": 2,
                    "sku": "CASE",
                    "name": "Case",
                    "price_range": {"minimum_price": {"final_price": {"value": 20.0}}},
                },
            },
        ],
    }

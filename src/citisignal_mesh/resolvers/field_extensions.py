from __future__ import annotations
from typing import Dict, List, Optional

from ..attributes import extract_attribute_value
from ..images import secure_image, secure_images
from ..prices import calculate_discount_percent, dig, is_on_sale


DEFAULT_MANUFACTURER = "CitiSignal"
DEFAULT_CURRENCY = "USD"
SIMPLE_PRICE = ("price",)
COMPLEX_PRICE = ("priceRange", "minimum")


def extract_option_by_title(options: Optional[List[Dict]], title: str) -> Optional[Dict]:
    for option in options or []:
        if option.get("title") == title:
            return option
    return None


def extract_memory_options(options: Optional[List[Dict]]) -> List[str]:
    option = extract_option_by_title(options, "Memory") or {}
    return [v.get("title") for v in option.get("values") or []]


def extract_color_options(options: Optional[List[Dict]]) -> List[Dict]:
    option = extract_option_by_title(options, "Color") or {}
    return [{"name": v.get("title"), "hex": v.get("value") or "#000000"} for v in option.get("values") or []]


def _price_fields(price_path):
    def _amount(root: Dict, kind: str, key: str = "value"):
        return dig(root, *price_path, kind, "amount", key)

    def manufacturer(root, _info):
        return extract_attribute_value(root.get("attributes"), "manufacturer", DEFAULT_MANUFACTURER)

    def on_sale(root, _info):
        return is_on_sale(_amount(root, "regular"), _amount(root, "final"))

    def display_price(root, _info):
        return _amount(root, "final") or 0

    def display_currency(root, _info):
        return _amount(root, "final", "currency") or DEFAULT_CURRENCY

    def discount_percentage(root, _info):
        return calculate_discount_percent(_amount(root, "regular"), _amount(root, "final")) or 0

    def in_stock(root, _info):
        return root.get("inStock") or False

    return {
        "manufacturer": manufacturer,
        "is_on_sale": on_sale,
        "display_price": display_price,
        "display_currency": display_currency,
        "discount_percentage": discount_percentage,
        "in_stock": in_stock,
        "secure_image": lambda root, _info: secure_image(root.get("images")),
        "secure_images": lambda root, _info: secure_images(root.get("images")),
    }


RESOLVERS = {
    "Catalog_SimpleProductView": _price_fields(SIMPLE_PRICE),
    "Catalog_ComplexProductView": {
        **_price_fields(COMPLEX_PRICE),
        "memory_options": lambda root, _info: extract_memory_options(root.get("options")),
        "available_colors": lambda root, _info: extract_color_options(root.get("options")),
    },
}

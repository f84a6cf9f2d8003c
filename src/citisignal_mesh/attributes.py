from __future__ import annotations
from typing import Any, Dict, List, Optional

from .mapping import attribute_code_to_url_key
from .normalize import ATTRIBUTE_PREFIX, clean_attribute_name


DEFAULT_COLOR_HEX = "#808080"

COLOR_HEX = {
    # Basic
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "green": "#008000",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "brown": "#A52A2A",
    "gray": "#808080",
    "grey": "#808080",
    # Metals
    "silver": "#C0C0C0",
    "gold": "#FFD700",
    "rose gold": "#B76E79",
    "bronze": "#CD7F32",
    "copper": "#B87333",
    # Device finishes
    "space gray": "#4A4A4A",
    "space grey": "#4A4A4A",
    "midnight": "#003366",
    "graphite": "#41424C",
    "starlight": "#F9F6EF",
    # Nature
    "navy": "#000080",
    "teal": "#008080",
    "turquoise": "#40E0D0",
    "coral": "#FF7F50",
    "lavender": "#E6E6FA",
    "mint": "#98FF98",
    "cream": "#FFFDD0",
    "beige": "#F5F5DC",
}


def find_attribute_value(attributes: Optional[List[Dict]], name: str) -> Optional[Any]:
    if not isinstance(attributes, list):
        return None
    candidates = [name, f"{ATTRIBUTE_PREFIX}{name}"]
    if name.startswith(ATTRIBUTE_PREFIX):
        candidates.append(name[len(ATTRIBUTE_PREFIX):])
    for candidate in candidates:
        for attr in attributes:
            if attr.get("name") == candidate:
                return attr.get("value") or None
    return None


def extract_attribute_value(attributes: Optional[List[Dict]], name: str, default: Any = "") -> Any:
    if not isinstance(attributes, list):
        return default
    prefixed = f"{ATTRIBUTE_PREFIX}{name}"
    for attr in attributes:
        attr_name = attr.get("name")
        if attr_name in (name, prefixed) or clean_attribute_name(attr_name) == name:
            return attr.get("value") or default
    return default


def extract_attributes(attributes: Optional[List[Dict]], names: Optional[List[str]]) -> Dict[str, Any]:
    if not attributes or not names:
        return {}
    return {name: find_attribute_value(attributes, name) for name in names}


def get_color_hex(color_name: Optional[str]) -> str:
    if not color_name:
        return DEFAULT_COLOR_HEX
    return COLOR_HEX.get(color_name.lower(), DEFAULT_COLOR_HEX)


def extract_variant_options(options: Optional[List[Dict]]) -> Dict[str, Any]:
    variant_options: Dict[str, Any] = {}
    if not isinstance(options, list):
        return variant_options

    for option in options:
        option_id = option.get("id")
        if not option_id:
            continue
        key = attribute_code_to_url_key(option_id) if option_id.startswith(ATTRIBUTE_PREFIX) else option_id
        values = option.get("values")
        if values is None:
            continue
        if key == "color":
            variant_options["colors"] = [
                {
                    "name": v.get("title") or v.get("value"),
                    "hex": v.get("value") or get_color_hex(v.get("title")) or "#000000",
                }
                for v in values
            ]
        else:
            variant_options[key] = [v.get("title") or v.get("value") for v in values]
    return variant_options


def is_in_stock(product: Dict) -> bool:
    if product.get("inStock") is not None:
        return product["inStock"]
    if product.get("in_stock") is not None:
        return product["in_stock"]
    view = product.get("productView") or {}
    if view.get("inStock") is not None:
        return view["inStock"]
    if product.get("stock_status"):
        return str(product["stock_status"]).lower() == "in_stock"
    # No stock info: show the product and let the PDP decide
    return True


def extract_manufacturer(product: Dict) -> Optional[str]:
    view = product.get("productView") or {}
    if product.get("manufacturer"):
        return product["manufacturer"]
    if view.get("manufacturer"):
        return view["manufacturer"]
    return find_attribute_value(product.get("attributes") or view.get("attributes"), "manufacturer")


def _first_of(product: Dict, *keys: str) -> str:
    sources = [product, product.get("productView") or {}, product.get("product") or {}]
    for source in sources:
        for key in keys:
            if source.get(key):
                return source[key]
    return ""


def extract_sku(product: Dict) -> str:
    return _first_of(product, "sku")


def extract_name(product: Dict) -> str:
    return _first_of(product, "name")


def extract_url_key(product: Dict) -> str:
    return _first_of(product, "urlKey", "url_key")


def attributes_to_object(attributes: Optional[List[Dict]]) -> Dict[str, Any]:
    if not isinstance(attributes, list):
        return {}
    out: Dict[str, Any] = {}
    for attr in attributes:
        name = attr.get("name")
        if not name:
            continue
        key = attribute_code_to_url_key(name) if name.startswith(ATTRIBUTE_PREFIX) else name
        out[key] = attr.get("value")
    return out

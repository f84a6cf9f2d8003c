"""Price extraction and formatting shared by every resolver."""

from __future__ import annotations
from typing import Any, Dict, Optional

from .normalize import round_half_up, to_float


DEFAULT_MIN_PRICE = 0
DEFAULT_MAX_PRICE = 999999


def format_price(amount: Optional[float]) -> str:
    """Currency string for a non-nullable price field ("$1,234.50")."""
    if not amount and amount != 0:
        return "$0.00"
    return f"${float(amount):,.2f}"


def calculate_discount_percent(regular_price: Optional[float], final_price: Optional[float]) -> Optional[int]:
    if not regular_price or not final_price or final_price >= regular_price:
        return None
    return round_half_up((regular_price - final_price) / regular_price * 100)


def dig(obj: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def extract_price_value(product: Optional[Dict], price_type: str, is_complex: bool) -> Optional[float]:
    if not product:
        return None
    kind = "regular" if price_type == "regular" else "final"
    if is_complex:
        return dig(product, "priceRange", "minimum", kind, "amount", "value")
    return dig(product, "price", kind, "amount", "value")


def extract_price_from_any_format(price_obj: Any) -> Optional[float]:
    if not price_obj:
        return None
    if isinstance(price_obj, (int, float)) and not isinstance(price_obj, bool):
        return price_obj
    if not isinstance(price_obj, dict):
        return None
    # Live Search: {value}; Catalog: {amount: {value}}; then legacy flat keys
    if price_obj.get("value") is not None:
        return price_obj["value"]
    if dig(price_obj, "amount", "value") is not None:
        return price_obj["amount"]["value"]
    if price_obj.get("regular_price") is not None:
        return price_obj["regular_price"]
    if price_obj.get("final_price") is not None:
        return price_obj["final_price"]
    return None


def is_on_sale(regular_price: Optional[float], final_price: Optional[float]) -> bool:
    return bool(regular_price and final_price and final_price < regular_price)


def format_price_range(min_price: Optional[float], max_price: Optional[float]) -> str:
    formatted_min = format_price(min_price)
    if min_price == max_price:
        return formatted_min
    return f"{formatted_min} - {format_price(max_price)}"


def parse_price_range(range_str: Any) -> Dict[str, float]:
    if not range_str or not isinstance(range_str, str):
        return {"from": DEFAULT_MIN_PRICE, "to": DEFAULT_MAX_PRICE}
    parts = range_str.split("-")
    low = to_float(parts[0])
    high = to_float(parts[1]) if len(parts) > 1 else None
    return {
        "from": low or DEFAULT_MIN_PRICE,
        "to": high or DEFAULT_MAX_PRICE,
    }

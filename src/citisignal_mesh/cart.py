"""Commerce cart payloads to the Citisignal cart shape, and back to mutation inputs."""

from __future__ import annotations
from typing import Dict, List, Optional

from .images import extract_cart_image
from .normalize import to_float
from .prices import format_price


def transform_cart_to_semantic(adobe_cart: Optional[Dict]) -> Optional[Dict]:
    if not adobe_cart:
        return None

    items = [transform_cart_item_to_semantic(item) for item in adobe_cart.get("items") or []]
    items = [i for i in items if i]
    item_count = sum(i["quantity"] for i in items)
    total_value = sum(i["totalValue"] for i in items)

    return {
        "id": adobe_cart.get("id"),
        "itemCount": item_count,
        "totalValue": total_value,
        "totalDisplay": format_price(total_value),
        "items": items,
        "isEmpty": item_count == 0,
    }


def transform_cart_item_to_semantic(adobe_item: Optional[Dict]) -> Optional[Dict]:
    if not adobe_item or not adobe_item.get("product"):
        return None

    product = adobe_item["product"]
    quantity = adobe_item.get("quantity") or 1
    price_value = extract_cart_item_price(adobe_item)
    total_value = price_value * quantity

    return {
        "id": adobe_item.get("id"),
        "productId": product.get("id"),
        "sku": product.get("sku"),
        "name": product.get("name"),
        "quantity": quantity,
        "priceValue": price_value,
        "priceDisplay": format_price(price_value),
        "totalValue": total_value,
        "totalDisplay": format_price(total_value),
        "image": extract_cart_image(product),
        "selectedOptions": extract_selected_options(adobe_item),
        "variantDisplay": extract_variant_display(adobe_item),
    }


def extract_cart_item_price(cart_item: Dict) -> float:
    prices = cart_item.get("prices") or {}
    minimum = ((cart_item.get("product") or {}).get("price_range") or {}).get("minimum_price") or {}
    # Unit price first; row total only when nothing else is known
    price = (
        (prices.get("price") or {}).get("value")
        or (minimum.get("final_price") or {}).get("value")
        or (prices.get("row_total") or {}).get("value")
        or 0
    )
    return to_float(price) or 0


def extract_variant_display(cart_item: Dict) -> Optional[str]:
    options = cart_item.get("configurable_options")
    if not options:
        return None
    labels = [o.get("value_label") for o in options if o.get("value_label")]
    return ", ".join(labels) or None


def extract_selected_options(cart_item: Dict) -> List[Dict]:
    return [
        {
            "label": option.get("option_label"),
            "value": option.get("value_label"),
            "attributeCode": option.get("attribute_code") or "",
        }
        for option in cart_item.get("configurable_options") or []
    ]


def build_adobe_cart_input(semantic_input: Dict, cart_id: str) -> Dict:
    selected = semantic_input.get("selectedOptions") or []
    line: Dict = {"data": {"sku": semantic_input.get("sku"), "quantity": semantic_input.get("quantity")}}
    if selected:
        line["selected_options"] = [
            {"option_value": option.get("value"), "option_id": option.get("attributeCode")}
            for option in selected
        ]
    return {"cart_id": cart_id, "cart_items": [line]}


def find_existing_cart_item(adobe_cart: Optional[Dict], new_item: Optional[Dict]) -> Optional[Dict]:
    """Line with the same SKU and the same configurable selection, if any."""
    if not adobe_cart or not adobe_cart.get("items") or not new_item:
        return None

    new_options = new_item.get("selectedOptions") or []
    for cart_item in adobe_cart["items"]:
        if (cart_item.get("product") or {}).get("sku") != new_item.get("sku"):
            continue
        cart_options = cart_item.get("configurable_options") or []
        if len(cart_options) != len(new_options):
            continue
        if all(
            any(
                c.get("attribute_code") == n.get("attributeCode") and c.get("value_label") == n.get("value")
                for c in cart_options
            )
            for n in new_options
        ):
            return cart_item
    return None


def build_cart_update_input(update_input: Dict, cart_id: str) -> Dict:
    return {
        "cart_id": cart_id,
        "cart_items": [
            {
                "cart_item_id": int(update_input["cartItemId"]),
                "quantity": update_input.get("quantity"),
            }
        ],
    }


def build_remove_item_input(cart_item_id, cart_id: str) -> Dict:
    return {"cart_id": cart_id, "cart_item_id": int(cart_item_id)}

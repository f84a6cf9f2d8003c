from __future__ import annotations
import logging
from typing import Dict, Optional

from ..cart import (
    build_adobe_cart_input,
    build_cart_update_input,
    build_remove_item_input,
    find_existing_cart_item,
    transform_cart_to_semantic,
)
from ..prices import format_price
from ..queries import CART_DETAILS, CART_ID, CART_MUTATION_RESULT
from ..sources import MeshContext


logger = logging.getLogger(__name__)


def ensure_cart_id(context: MeshContext) -> Optional[str]:
    """Reuse the x-cart-id cart while Commerce still knows it, else open a new one."""
    existing = context.cart_id
    if existing:
        try:
            context.commerce.query("cart", {"cart_id": existing}, CART_ID)
            return existing
        except Exception as e:
            logger.warning(f"Cart invalid, creating new: {str(e)[:55]}")
    return context.commerce.mutate("createEmptyCart")


def query_cart_details(context: MeshContext, cart_id: str) -> Optional[Dict]:
    return context.commerce.query("cart", {"cart_id": cart_id}, CART_DETAILS)


def add_product_to_cart(context: MeshContext, item: Dict, cart_id: str):
    field_name = "addConfigurableProductsToCart" if item.get("selectedOptions") else "addSimpleProductsToCart"
    return context.commerce.mutate(field_name, {"input": build_adobe_cart_input(item, cart_id)}, CART_MUTATION_RESULT)


def _failure(message: str) -> Dict:
    return {"success": False, "cart": None, "errors": [message]}


def _refetched(context: MeshContext, cart_id: str) -> Dict:
    return {
        "success": True,
        "cart": transform_cart_to_semantic(query_cart_details(context, cart_id)),
        "errors": [],
    }


def resolve_cart(_root, info) -> Optional[Dict]:
    context: MeshContext = info.context
    try:
        cart_id = ensure_cart_id(context)
        if not cart_id:
            return None
        return transform_cart_to_semantic(query_cart_details(context, cart_id))
    except Exception as e:
        logger.error(f"Cart query error: {str(e)[:65]}")
        return None


def resolve_add_to_cart(_root, info, input: Dict) -> Dict:
    context: MeshContext = info.context
    try:
        cart_id = ensure_cart_id(context)
        current = query_cart_details(context, cart_id)
        existing = find_existing_cart_item(current, input)
        if existing:
            update = {
                "cartItemId": existing["id"],
                "quantity": (existing.get("quantity") or 0) + (input.get("quantity") or 1),
            }
            context.commerce.mutate(
                "updateCartItems", {"input": build_cart_update_input(update, cart_id)}, CART_MUTATION_RESULT
            )
        else:
            add_product_to_cart(context, input, cart_id)
        return _refetched(context, cart_id)
    except Exception as e:
        logger.error(f"Add to cart error: {str(e)[:62]}")
        return _failure(str(e))


def resolve_update_cart_item(_root, info, input: Dict) -> Dict:
    context: MeshContext = info.context
    try:
        cart_id = ensure_cart_id(context)
        context.commerce.mutate(
            "updateCartItems", {"input": build_cart_update_input(input, cart_id)}, CART_MUTATION_RESULT
        )
        return _refetched(context, cart_id)
    except Exception as e:
        logger.error(f"Update cart error: {str(e)[:62]}")
        return _failure(str(e))


def resolve_remove_from_cart(_root, info, cartItemId: str) -> Dict:
    context: MeshContext = info.context
    try:
        cart_id = ensure_cart_id(context)
        context.commerce.mutate(
            "removeItemFromCart", {"input": build_remove_item_input(cartItemId, cart_id)}, CART_MUTATION_RESULT
        )
        return _refetched(context, cart_id)
    except Exception as e:
        logger.error(f"Remove from cart error: {str(e)[:57]}")
        return _failure(str(e))


def resolve_clear_cart(_root, info) -> Dict:
    context: MeshContext = info.context
    try:
        # A fresh empty cart replaces the old one
        new_cart_id = context.commerce.mutate("createEmptyCart")
    except Exception as e:
        logger.error(f"Clear cart error: {str(e)[:64]}")
        return _failure(str(e))
    return {
        "success": True,
        "cart": {
            "id": new_cart_id,
            "itemCount": 0,
            "totalValue": 0,
            "totalDisplay": format_price(0),
            "items": [],
            "isEmpty": True,
        },
        "errors": [],
    }


RESOLVERS = {
    "Query": {
        "Citisignal_cart": resolve_cart,
    },
    "Mutation": {
        "Citisignal_addToCart": resolve_add_to_cart,
        "Citisignal_updateCartItem": resolve_update_cart_item,
        "Citisignal_removeFromCart": resolve_remove_from_cart,
        "Citisignal_clearCart": resolve_clear_cart,
    },
}

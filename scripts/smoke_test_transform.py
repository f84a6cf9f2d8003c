#!/usr/bin/env python3
"""Basic smoke test for the transformers.

Runs listing, facet and cart transforms on a sample Catalog Service and
Commerce payload and checks the storefront shapes. No network is used.
"""
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / 'src'))

from citisignal_mesh.cart import transform_cart_to_semantic  # type: ignore
from citisignal_mesh.facets import sort_facets, transform_facets  # type: ignore
from citisignal_mesh.transform import transform_catalog_products  # type: ignore


SAMPLE_SEARCH = {
    "items": [
        {
            "productView": {
                "__typename": "Catalog_SimpleProductView",
                "id": "1",
                "sku": "PHONE-1",
                "name": "Citi Phone",
                "urlKey": "citi-phone",
                "inStock": True,
                "images": [{"url": "http://cdn.example.com/p1.jpg", "label": "Front"}],
                "attributes": [{"name": "cs_manufacturer", "value": "Apple"}],
                "price": {
                    "regular": {"amount": {"value": 999}},
                    "final": {"amount": {"value": 799}},
                },
            }
        }
    ],
    "facets": [
        {"attribute": "cs_manufacturer", "title": "Manufacturer", "buckets": [{"title": "Apple", "count": 3}]},
        {"attribute": "price", "title": "Price", "type": "RANGE", "buckets": [{"title": "300-400", "count": 2}]},
    ],
}

SAMPLE_CART = {
    "id": "cart-1",
    "items": [
        {
            "id": "10",
            "quantity": 2,
            "prices": {"price": {"value": 49.5}},
            "product": {"id": 5, "sku": "CASE-1", "name": "Case", "thumbnail": {"url": "https://cdn.example.com/c.jpg"}},
        }
    ],
}


def main() -> int:
    cards = transform_catalog_products(SAMPLE_SEARCH["items"])
    if not cards or cards[0]["price"] != "$799.00" or cards[0]["discountPercent"] != 20:
        print(f"Smoke test failed: unexpected cards {cards}")
        return 1

    facets = sort_facets(transform_facets(SAMPLE_SEARCH["facets"]))
    if [f["key"] for f in facets] != ["price", "manufacturer"]:
        print(f"Smoke test failed: unexpected facet order {[f['key'] for f in facets]}")
        return 1

    cart = transform_cart_to_semantic(SAMPLE_CART)
    if not cart or cart["totalDisplay"] != "$99.00":
        print(f"Smoke test failed: unexpected cart {cart}")
        return 1

    print(f"Smoke test ok: {len(cards)} cards, {len(facets)} facets, cart total {cart['totalDisplay']}")
    print(json.dumps(cards[0], indent=2))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

from __future__ import annotations
from typing import Dict

from ..queries import CATALOG_PASSTHROUGH


def resolve_catalog_product_search(_root, info, **args) -> Dict:
    """Catalog Service productSearch exposed as-is; upstream errors propagate."""
    return info.context.catalog.query("productSearch", args, CATALOG_PASSTHROUGH)


RESOLVERS = {
    "Query": {
        "Catalog_productSearch": resolve_catalog_product_search,
    },
}

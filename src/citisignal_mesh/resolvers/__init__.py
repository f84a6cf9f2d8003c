"""
Gateway resolvers, one module per root field family.

Each module exposes ``RESOLVERS``: a ``{TypeName: {fieldName: resolver}}``
map. Resolvers take ``(root, info, **args)`` and find the per-request
``MeshContext`` on ``info.context``.
"""

from __future__ import annotations
from typing import Callable, Dict

from . import (
    cart_operations,
    category_breadcrumbs,
    category_navigation,
    category_page,
    field_extensions,
    product_cards,
    product_detail,
    product_facets,
    product_search,
    product_search_filter,
    search_suggestions,
)

RESOLVER_MODULES = [
    product_cards,
    product_facets,
    product_search_filter,
    search_suggestions,
    product_detail,
    category_navigation,
    category_breadcrumbs,
    category_page,
    cart_operations,
    product_search,
    field_extensions,
]


def merge_resolvers() -> Dict[str, Dict[str, Callable]]:
    merged: Dict[str, Dict[str, Callable]] = {}
    for module in RESOLVER_MODULES:
        for type_name, fields in module.RESOLVERS.items():
            merged.setdefault(type_name, {}).update(fields)
    return merged


__all__ = ["RESOLVER_MODULES", "merge_resolvers"]

"""Client filter/sort arguments to upstream search clauses.

Catalog Service and Live Search accept the same clause shape
(``{attribute, in}`` or ``{attribute, range: {from, to}}``) but name the
category attribute differently.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .mapping import url_key_to_attribute_code
from .normalize import normalize_filter_value
from .prices import parse_price_range


CATALOG_CATEGORY_ATTRIBUTE = "categoryPath"
SEARCH_CATEGORY_ATTRIBUTE = "categories"
MANUFACTURER_ATTRIBUTES = ("cs_manufacturer", "manufacturer")

SORT_ATTRIBUTES = {
    "PRICE": "price",
    "NAME": "name",
    "POSITION": "position",
    "RELEVANCE": "relevance",
}


def _facet_clauses(facets: Any) -> List[Dict]:
    clauses: List[Dict] = []
    if not isinstance(facets, dict):
        return clauses

    for url_key, value in facets.items():
        if not value:
            continue
        attribute_code = url_key_to_attribute_code(url_key)

        if attribute_code == "price":
            if isinstance(value, list):
                clauses.append({"attribute": attribute_code, "range": parse_price_range(value[0])})
            elif isinstance(value, str) and "-" in value:
                clauses.append({"attribute": attribute_code, "range": parse_price_range(value)})
        elif attribute_code in MANUFACTURER_ATTRIBUTES:
            values = value if isinstance(value, list) else [value]
            clauses.append({"attribute": attribute_code, "in": [normalize_filter_value(v) for v in values]})
        else:
            clauses.append({"attribute": attribute_code, "in": value if isinstance(value, list) else [value]})
    return clauses


def _build_filters(filter_arg: Optional[Dict], category_attribute: str) -> List[Dict]:
    if not filter_arg:
        return []
    clauses: List[Dict] = []
    if filter_arg.get("categoryUrlKey"):
        clauses.append({"attribute": category_attribute, "in": [filter_arg["categoryUrlKey"]]})
    clauses.extend(_facet_clauses(filter_arg.get("facets")))
    return clauses


def build_catalog_filters(filter_arg: Optional[Dict]) -> List[Dict]:
    return _build_filters(filter_arg, CATALOG_CATEGORY_ATTRIBUTE)


def build_live_search_filters(filter_arg: Optional[Dict]) -> List[Dict]:
    return _build_filters(filter_arg, SEARCH_CATEGORY_ATTRIBUTE)


def build_page_filters(category_url_key: Optional[str], page_filter: Optional[Dict], service: str = "catalog") -> List[Dict]:
    """Category from the resolver argument, facets from the page filter."""
    category_attribute = SEARCH_CATEGORY_ATTRIBUTE if service == "search" else CATALOG_CATEGORY_ATTRIBUTE
    clauses: List[Dict] = []
    if category_url_key:
        clauses.append({"attribute": category_attribute, "in": [category_url_key]})

    builder = build_live_search_filters if service == "search" else build_catalog_filters
    for clause in builder(page_filter or {}):
        if clause["attribute"] in (SEARCH_CATEGORY_ATTRIBUTE, CATALOG_CATEGORY_ATTRIBUTE):
            continue
        clauses.append(clause)
    return clauses


def map_sort_attribute(attribute: str, service: str) -> str:
    mapped = SORT_ATTRIBUTES.get(attribute) or (attribute or "").lower()
    # Catalog Service has no relevance ranking
    if service == "catalog" and mapped == "relevance":
        return "position"
    return mapped


def build_sort(sort: Optional[Dict], service: str = "catalog") -> Optional[Dict]:
    if not sort:
        return None
    return {
        "attribute": map_sort_attribute(sort.get("attribute") or "", service),
        "direction": sort.get("direction") or "ASC",
    }


def map_sort_for_catalog(sort: Optional[Dict]) -> Optional[Dict]:
    if not sort or sort.get("attribute") == "RELEVANCE":
        return None
    field = {"PRICE": "price", "NAME": "name"}.get(sort.get("attribute") or "")
    if not field:
        return None
    return {"attribute": field, "direction": sort.get("direction") or "DESC"}


def map_sort_for_live_search(sort: Optional[Dict]) -> List[Dict]:
    if not sort:
        return []
    field = {"PRICE": "price", "NAME": "name", "RELEVANCE": "relevance"}.get(sort.get("attribute") or "")
    if not field:
        return []
    return [{"attribute": field, "direction": sort.get("direction") or "DESC"}]


def should_use_live_search(phrase: Optional[str]) -> bool:
    """Live Search ranks typed searches; plain browsing goes to Catalog Service."""
    return bool(phrase and phrase.strip())


def catalog_sort_input(sort: Optional[Dict]) -> Optional[List[Dict]]:
    """Catalog sort as the list the upstream argument is declared as."""
    mapped = map_sort_for_catalog(sort)
    return [mapped] if mapped else None

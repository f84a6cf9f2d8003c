from __future__ import annotations
import re
from typing import Any, Dict, List, Optional

from .mapping import attribute_code_to_url_key
from .prices import format_price


PRICE_BUCKET_RE = re.compile(r"^(\d+(?:\.\d+)?)-(\d+(?:\.\d+)?)$")

FACET_PRIORITY = {
    "price": 1,
    "manufacturer": 2,
    "brand": 2,
    "category": 3,
    "color": 4,
    "size": 5,
    "memory": 6,
    "storage": 6,
    "rating": 7,
    "customer-rating": 7,
}


def determine_facet_type(url_key: str, facet: Dict) -> str:
    if url_key == "price":
        return "range" if facet.get("type") == "RANGE" else "radio"
    if url_key in ("rating", "customer-rating"):
        return "radio"
    return "checkbox"


def transform_price_option(bucket: Dict) -> Dict:
    title = bucket.get("title")
    m = PRICE_BUCKET_RE.match(title or "")
    if not m:
        return {"id": title, "name": title, "count": bucket.get("count") or 0, "value": title}
    low = float(m.group(1))
    high = float(m.group(2))
    return {
        "id": title,
        "name": f"{format_price(low)} - {format_price(high)}",
        "count": bucket.get("count") or 0,
        "value": title,
        "min": low,
        "max": high,
    }


def transform_facet_options(buckets: Optional[List[Dict]], url_key: str) -> List[Dict]:
    if not isinstance(buckets, list):
        return []
    options: List[Dict] = []
    for bucket in buckets:
        if url_key == "price" and bucket.get("title"):
            options.append(transform_price_option(bucket))
            continue
        label = bucket.get("title") or bucket.get("value") or ""
        options.append(
            {
                "id": label,
                "name": label,
                "count": bucket.get("count") or 0,
                "value": bucket.get("value") or bucket.get("title"),
            }
        )
    return options


def transform_facet(facet: Optional[Dict]) -> Optional[Dict]:
    if not facet:
        return None
    url_key = attribute_code_to_url_key(facet.get("attribute"))
    return {
        "key": url_key,
        "attributeCode": facet.get("attribute"),
        "title": facet.get("title") or url_key,
        "type": determine_facet_type(url_key, facet),
        "options": transform_facet_options(facet.get("buckets") or [], url_key),
    }


def transform_facets(facets: Optional[List[Dict]]) -> List[Dict]:
    if not isinstance(facets, list):
        return []
    out: List[Dict] = []
    for facet in facets:
        transformed = transform_facet(facet)
        if transformed and transformed["options"]:
            out.append(transformed)
    return out


def sort_facets(facets: Optional[List[Dict]]) -> List[Dict]:
    if not isinstance(facets, list):
        return []
    return sorted(facets, key=lambda f: (FACET_PRIORITY.get(f.get("key"), 999), (f.get("title") or "").lower()))


def _find_option(options: List[Dict], value: Any) -> Optional[Dict]:
    # First match wins, like a linear find
    return next((o for o in options if o.get("value") == value), None)


def get_active_filters(filter_arg: Optional[Dict], facets: List[Dict]) -> List[Dict]:
    active: List[Dict] = []
    if not filter_arg or not filter_arg.get("facets"):
        return active

    for url_key, value in filter_arg["facets"].items():
        facet = next((f for f in facets if f.get("key") == url_key), None)
        if not facet:
            continue
        options = facet.get("options") or []
        if isinstance(value, list):
            for v in value:
                option = _find_option(options, v)
                if option:
                    active.append({"facetKey": url_key, "facetTitle": facet["title"], "value": v, "label": option["name"]})
        elif value:
            option = _find_option(options, value)
            active.append(
                {
                    "facetKey": url_key,
                    "facetTitle": facet["title"],
                    "value": value,
                    "label": option["name"] if option else value,
                }
            )
    return active


def create_facet_query_params(filter_arg: Optional[Dict]) -> Dict[str, Any]:
    # Aggregations cover every match, so one product per page is enough
    return {"page_size": 1, "current_page": 1, "filter": filter_arg or {}}

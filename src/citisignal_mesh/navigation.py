from __future__ import annotations
from typing import Dict, List, Optional


HEADER_CHILD_LIMIT = 5
MEGA_MENU_COLUMN_SIZE = 5
MEGA_MENU_CHILD_LIMIT = 8


def _as_flag(value) -> bool:
    return value is True or value == 1


def transform_category(category: Optional[Dict]) -> Optional[Dict]:
    if not category:
        return None
    url_path = category.get("url_path")
    children = [transform_category(c) for c in category.get("children") or []]
    return {
        "id": str(category.get("id") or category.get("uid")),
        "name": category.get("name") or "",
        "href": f"/{url_path}" if url_path else "/",
        "label": category.get("name") or "",
        "level": category.get("level") or 0,
        "position": category.get("position") or 0,
        "includeInMenu": _as_flag(category.get("include_in_menu")),
        "isActive": _as_flag(category.get("is_active")),
        "productCount": category.get("product_count") or 0,
        "children": [c for c in children if c],
        "urlPath": url_path or "",
        "urlKey": category.get("url_key") or "",
        "parentId": category.get("parent_id") or None,
        "description": category.get("description") or None,
        "metaTitle": category.get("meta_title") or category.get("name"),
        "metaDescription": category.get("meta_description") or None,
    }


def filter_for_navigation(categories: Optional[List[Dict]], max_items: int = 10) -> List[Dict]:
    """Menu-visible, active, named and linked categories in admin order."""
    if not isinstance(categories, list):
        return []
    visible = [
        c
        for c in categories
        if c.get("includeInMenu") and c.get("isActive") and c.get("name") and c.get("href")
    ]
    visible.sort(key=lambda c: c.get("position") or 0)
    out: List[Dict] = []
    for cat in visible[:max_items]:
        copy = dict(cat)
        copy["children"] = filter_for_navigation(cat.get("children"), max_items)
        out.append(copy)
    return out


def build_header_nav(categories: Optional[List[Dict]], max_items: int = 5) -> List[Dict]:
    if not isinstance(categories, list):
        return []
    return [
        {
            "href": cat.get("href"),
            "label": cat.get("label"),
            "category": cat.get("urlKey"),
            "children": [
                {"href": child.get("href"), "label": child.get("label"), "category": child.get("urlKey")}
                for child in (cat.get("children") or [])[:HEADER_CHILD_LIMIT]
            ],
        }
        for cat in categories[:max_items]
    ]


def build_footer_nav(categories: Optional[List[Dict]], max_items: int = 8) -> List[Dict]:
    if not isinstance(categories, list):
        return []
    return [{"href": cat.get("href"), "label": cat.get("label")} for cat in categories[:max_items]]


def build_breadcrumbs(category: Optional[Dict], include_home: bool = False) -> List[Dict]:
    breadcrumbs: List[Dict] = []
    if include_home:
        breadcrumbs.append({"categoryId": None, "name": "Home", "urlPath": "/", "level": 0})

    if category and isinstance(category.get("breadcrumbs"), list):
        for index, crumb in enumerate(category["breadcrumbs"]):
            breadcrumbs.append(
                {
                    "categoryId": crumb.get("category_id") or None,
                    "name": crumb.get("category_name") or "",
                    "urlPath": crumb.get("category_url_path") or "",
                    "level": index + 1 if include_home else index,
                }
            )

    if category:
        breadcrumbs.append(
            {
                "categoryId": category.get("id") or None,
                "name": category.get("name") or "",
                "urlPath": category.get("url_path") or "",
                "level": len(breadcrumbs),
                "isActive": True,
            }
        )
    return breadcrumbs


def transform_breadcrumb(breadcrumb: Optional[Dict]) -> Optional[Dict]:
    if not breadcrumb:
        return None
    url_path = breadcrumb.get("category_url_path") or breadcrumb.get("url_path") or ""
    return {
        "categoryId": breadcrumb.get("category_id") or None,
        "name": breadcrumb.get("category_name") or breadcrumb.get("name") or "",
        "urlPath": f"/{url_path}" if url_path else "/",
        "level": breadcrumb.get("category_level") or breadcrumb.get("level") or 0,
    }


def build_breadcrumb_trail(category: Optional[Dict]) -> List[Dict]:
    """Parents then the category itself; the storefront renders Home on its own."""
    trail: List[Dict] = []
    if not category:
        return trail

    for crumb in category.get("breadcrumbs") or []:
        transformed = transform_breadcrumb(crumb)
        if transformed:
            trail.append(transformed)

    if category.get("name"):
        url_path = category.get("url_path")
        trail.append(
            {
                "categoryId": category.get("id") or category.get("uid") or None,
                "name": category["name"],
                "urlPath": f"/{url_path}" if url_path else "/",
                "level": category.get("level") or len(trail),
            }
        )
    return trail


def find_category_by_url_key(categories: Optional[List[Dict]], url_key: Optional[str]) -> Optional[Dict]:
    if not categories or not url_key:
        return None
    for category in categories:
        if category.get("urlKey") == url_key or category.get("url_key") == url_key:
            return category
        if category.get("children"):
            found = find_category_by_url_key(category["children"], url_key)
            if found:
                return found
    return None


def get_category_path(categories: Optional[List[Dict]], category_id, path: Optional[List[Dict]] = None) -> List[Dict]:
    if not categories or not category_id:
        return []
    path = path or []
    for category in categories:
        current = path + [category]
        if str(category.get("id")) == str(category_id):
            return current
        if category.get("children"):
            found = get_category_path(category["children"], category_id, current)
            if found:
                return found
    return []


def flatten_categories(categories: Optional[List[Dict]], max_depth: float = float("inf"), current_depth: int = 0) -> List[Dict]:
    if not categories or current_depth >= max_depth:
        return []
    flattened: List[Dict] = []
    for category in categories:
        entry = {k: v for k, v in category.items() if k != "children"}
        entry["depth"] = current_depth
        flattened.append(entry)
        if category.get("children"):
            flattened.extend(flatten_categories(category["children"], max_depth, current_depth + 1))
    return flattened


def build_mega_menu(categories: Optional[List[Dict]]) -> Dict:
    if not isinstance(categories, list):
        return {"columns": []}
    columns: List[List[Dict]] = []
    for index, category in enumerate(categories):
        if index % MEGA_MENU_COLUMN_SIZE == 0:
            columns.append([])
        columns[-1].append(
            {
                "title": category.get("name"),
                "href": category.get("href"),
                "items": [
                    {"label": child.get("name"), "href": child.get("href")}
                    for child in (category.get("children") or [])[:MEGA_MENU_CHILD_LIMIT]
                ],
            }
        )
    return {"columns": columns}

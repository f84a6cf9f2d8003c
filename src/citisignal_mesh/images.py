from __future__ import annotations
from typing import Any, Dict, List, Optional


CART_IMAGE_ROLES = ("image", "base")


def ensure_https_url(url: Any) -> Any:
    if not url or not isinstance(url, str):
        return url
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def secure_image(images: Optional[List[Dict]]) -> Optional[Dict]:
    if not images:
        return None
    first = dict(images[0])
    first["url"] = ensure_https_url(first.get("url"))
    return first


def secure_images(images: Optional[List[Dict]]) -> List[Dict]:
    out: List[Dict] = []
    for img in images or []:
        copy = dict(img)
        copy["url"] = ensure_https_url(copy.get("url"))
        out.append(copy)
    return out


def extract_cart_image(product: Dict) -> Optional[Dict]:
    alt_text = product.get("name") or "Product image"
    gallery = product.get("media_gallery") or []

    for img in gallery:
        if img.get("role") == "thumbnail" and img.get("url"):
            return {"url": img["url"], "altText": alt_text}
    for img in gallery:
        role = img.get("role")
        if (not role or role in CART_IMAGE_ROLES) and img.get("url"):
            return {"url": img["url"], "altText": alt_text}

    thumbnail = product.get("thumbnail") or {}
    if thumbnail.get("url"):
        return {"url": thumbnail["url"], "altText": alt_text}

    legacy = product.get("images") or []
    if legacy:
        return {"url": legacy[0].get("url"), "altText": alt_text}
    return None

from __future__ import annotations
import json
from pathlib import Path
from typing import Dict


MAPPINGS_PATH = Path(__file__).with_name("facet_mappings.json")

FACET_MAPPINGS = json.loads(MAPPINGS_PATH.read_text(encoding="utf-8"))


def attribute_code_to_url_key(attribute_code: str) -> str:
    if not attribute_code:
        return ""
    mappings = FACET_MAPPINGS.get("mappings") or {}
    if attribute_code in mappings:
        return mappings[attribute_code]

    url_key = attribute_code
    defaults = FACET_MAPPINGS.get("defaults") or {}
    for prefix in defaults.get("removePrefix") or []:
        if url_key.startswith(prefix):
            url_key = url_key[len(prefix):]
    if defaults.get("replaceUnderscore"):
        url_key = url_key.replace("_", "-")
    if defaults.get("toLowerCase"):
        url_key = url_key.lower()
    return url_key


def url_key_to_attribute_code(url_key: str) -> str:
    if not url_key:
        return ""
    for attribute_code, mapped_key in (FACET_MAPPINGS.get("mappings") or {}).items():
        if mapped_key == url_key:
            return attribute_code
    # Best effort for keys produced by the default rules
    return url_key.replace("-", "_")


def map_url_filters_to_attribute_codes(url_filters: Dict) -> Dict:
    if not isinstance(url_filters, dict):
        return {}
    return {url_key_to_attribute_code(k): v for k, v in url_filters.items()}

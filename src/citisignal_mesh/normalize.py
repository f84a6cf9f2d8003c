from __future__ import annotations
import math
from typing import Any, Optional


ATTRIBUTE_PREFIX = "cs_"


def normalize_filter_value(value: Any) -> Any:
    if not value or not isinstance(value, str):
        return value
    return value[:1].upper() + value[1:].lower()


def clean_attribute_name(name: Optional[str]) -> str:
    if not name:
        return ""
    return name[len(ATTRIBUTE_PREFIX):] if name.startswith(ATTRIBUTE_PREFIX) else name


def to_float(value: Any) -> Optional[float]:
    """Lenient float parse: leading numeric prefix of strings, None when nothing numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else float(value)
    text = str(value).strip()
    end = 0
    seen_dot = False
    for i, ch in enumerate(text):
        if ch.isdigit():
            end = i + 1
        elif ch == "." and not seen_dot:
            seen_dot = True
        elif ch in "+-" and i == 0:
            continue
        else:
            break
    if end == 0:
        return None
    try:
        return float(text[:end])
    except ValueError:
        return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

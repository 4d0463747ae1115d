from typing import Any, Dict, List, Optional, Union

from config.config import settings
from utils.errors_ut import ValidationError


def _positive_int(value: Union[int, str, None], label: str, default: int) -> int:
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}")
    try:
        v = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}")
    if v < 1:
        raise ValidationError(f"{label} must be a positive integer")
    return v


def normalize_page(page: Union[int, str, None]) -> int:
    return _positive_int(page, "page", 1)


def normalize_page_size(ps: Union[int, str, None]) -> int:
    v = _positive_int(ps, "limit", settings.PAGE_SIZE_DEFAULT)
    if v > settings.PAGE_SIZE_MAX:
        v = settings.PAGE_SIZE_MAX
    return v


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_page(items: List[Dict[str, Any]], total: int, page: int, limit: int) -> Dict[str, Any]:
    """
    Page envelope shared by every paginated listing.
    A page past the end yields empty items, never an error.
    """
    total_pages = (total + limit - 1) // limit if total else 0
    return {
        "items": items,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def optional_str(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None

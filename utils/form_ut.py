from typing import Any, Iterable, Optional

from utils.errors_ut import ValidationError

_TRUE = ("1", "true", "yes", "on", "y", "t")
_FALSE = ("0", "false", "no", "off", "n", "f")


def bool_from_form(val: Any) -> Optional[bool]:
    """
    None when the value is missing or not recognizably boolean.
    """
    if isinstance(val, bool):
        return val
    if val is None:
        return None
    s = str(val).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None


def require_fields(values: Iterable[Any]) -> None:
    for v in values:
        if v is None or (isinstance(v, str) and v.strip() == ""):
            raise ValidationError("All fields are required")

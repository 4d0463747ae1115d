from typing import Optional

from bson import ObjectId

from utils.errors_ut import ValidationError


def parse_object_id(value: Optional[str], label: str = "id") -> ObjectId:
    """
    Validate and convert an identifier coming from the outside world.
    Raises ValidationError before anything touches the database.
    """
    if isinstance(value, ObjectId):
        return value
    if value is None or not str(value).strip():
        raise ValidationError(f"{label.capitalize()} is missing")
    raw = str(value).strip()
    if not ObjectId.is_valid(raw):
        raise ValidationError(f"Invalid {label}")
    return ObjectId(raw)

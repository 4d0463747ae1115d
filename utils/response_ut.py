from typing import Any, Dict

from bson import ObjectId
from fastapi.encoders import jsonable_encoder


def ok(**payload: Any) -> Dict[str, Any]:
    """
    Success envelope; ObjectIds become hex strings, datetimes ISO strings.
    """
    return jsonable_encoder({"ok": True, **payload}, custom_encoder={ObjectId: str})

import base64
import hmac
import time
from dataclasses import dataclass
from hashlib import sha256
from typing import Optional

from bson import ObjectId
from fastapi import Request
from passlib.context import CryptContext

from config.config import settings

_pwd_ctx = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    deprecated="auto",
)


@dataclass(frozen=True)
class Viewer:
    """
    Resolved identity of the caller. Guests are represented by None, never by a Viewer.
    """
    user_id: ObjectId
    username: Optional[str] = None


def hash_password(password: str) -> str:
    return _pwd_ctx.hash(password)


def _sign(value: str, ts: int) -> str:
    msg = f"{value}.{ts}".encode("ascii")
    mac = hmac.new(settings.SECRET_KEY.encode("utf-8"), msg, sha256).digest()
    return base64.urlsafe_b64encode(mac).decode("ascii").rstrip("=")


def viewer_from_session(cookie: Optional[str]) -> Optional[Viewer]:
    """
    Session cookie layout (issued by the auth service): "<user_id>.<exp>.<sig>".
    Anything malformed, expired or unsigned resolves to a guest.
    """
    if not cookie:
        return None
    parts = cookie.split(".")
    if len(parts) != 3:
        return None
    user_id, exp_str, sig = parts
    try:
        exp = int(exp_str)
    except ValueError:
        return None
    if exp < int(time.time()):
        return None
    if not hmac.compare_digest(_sign(user_id, exp), sig):
        return None
    if not ObjectId.is_valid(user_id):
        return None
    return Viewer(user_id=ObjectId(user_id))


def get_current_viewer(request: Request) -> Optional[Viewer]:
    return viewer_from_session(request.cookies.get(settings.SESSION_COOKIE_NAME))

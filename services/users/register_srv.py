import logging
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from db.users_db import find_user_by_username_or_email, get_user_by_id, insert_user
from services.media.base_srv import MediaError, MediaProvider
from utils.errors_ut import ConflictError, InternalError, UpstreamError, ValidationError
from utils.form_ut import require_fields
from utils.security_ut import hash_password
from utils.time_ut import now_utc

logger = logging.getLogger(__name__)


async def register_user(
    db,
    media: MediaProvider,
    full_name: Optional[str],
    email: Optional[str],
    username: Optional[str],
    password: Optional[str],
    avatar_path: Optional[str],
    cover_image_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create an account record. Returns the stored user without credential fields.
    """
    require_fields([full_name, email, username, password])
    uname = username.strip().lower()
    mail = email.strip().lower()

    if await find_user_by_username_or_email(db, uname, mail):
        raise ConflictError("User with username or email already exists")
    if not avatar_path:
        raise ValidationError("Avatar file is required")

    try:
        avatar = await media.store(avatar_path, "image")
    except MediaError as e:
        raise UpstreamError("Avatar upload failed") from e

    stored = [avatar.file_id]
    cover_url = ""
    if cover_image_path:
        try:
            cover = await media.store(cover_image_path, "image")
            cover_url = cover.url
            stored.append(cover.file_id)
        except MediaError as e:
            logger.warning("Cover image upload failed for username=%s: %s", uname, e)

    doc = {
        "full_name": full_name.strip(),
        "avatar": avatar.url,
        "cover_image": cover_url,
        "email": mail,
        "username": uname,
        "password_hash": hash_password(password),
        "created_at": now_utc(),
    }
    try:
        user_id = await insert_user(db, doc)
    except DuplicateKeyError as e:
        # Lost a race with a concurrent signup; the uploads belong to nobody
        for file_id in stored:
            try:
                await media.remove(file_id, "image")
            except MediaError as me:
                logger.warning("Orphaned media after failed signup file_id=%s: %s", file_id, me)
        raise ConflictError("User with username or email already exists") from e

    created = await get_user_by_id(db, user_id)
    if not created:
        raise InternalError("Something went wrong while registering the user")
    logger.info("User registered user_id=%s username=%s", user_id, uname)
    return created

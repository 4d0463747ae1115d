from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from db import get_db
from services.media.base_srv import MediaProvider
from services.media.build_client_srv import get_media
from services.users.register_srv import register_user
from utils.response_ut import ok
from utils.upload_ut import discard_temp, save_upload

router = APIRouter(tags=["auth"])


# Login and session issuance belong to the auth service; only sign-up lives here
@router.post("/register", status_code=201)
async def register(
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None),
    db=Depends(get_db),
    media: MediaProvider = Depends(get_media),
) -> Any:
    avatar_path = await save_upload(avatar, prefix="avatar_")
    cover_path = await save_upload(cover_image, prefix="cover_")
    try:
        user = await register_user(db, media, full_name, email, username, password, avatar_path, cover_path)
    finally:
        discard_temp([avatar_path, cover_path])
    return ok(user=user)

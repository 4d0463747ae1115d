from fastapi import FastAPI

from .auth_rout import router as auth_router
from .channel_rout import router as channel_router
from .history_rout import router as history_router
from .reactions_rout import router as reactions_router
from .videos_rout import router as videos_router
from .watch_rout import router as watch_router


def register_routes(app: FastAPI) -> None:
    app.include_router(auth_router, prefix="/auth")
    app.include_router(videos_router)
    app.include_router(watch_router)
    app.include_router(reactions_router)
    app.include_router(channel_router)
    app.include_router(history_router)

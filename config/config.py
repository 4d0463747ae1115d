import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _getenv_int(key: str, default: int) -> int:
    val = os.getenv(key)
    if val is None or val == "":
        return default
    return int(val)


def _getenv_bool(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if val is None or val == "":
        return default
    return val.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = _getenv_int("APP_PORT", 8000)

    ## Disable built-in "/docs", "/redoc", "openapi.json"
    API_DOCS_ENABLED: bool = _getenv_bool("API_DOCS_ENABLED", False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Shared with the auth service that issues session cookies
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "vhsid")

    # Listings
    PAGE_SIZE_DEFAULT: int = _getenv_int("PAGE_SIZE_DEFAULT", 10)
    PAGE_SIZE_MAX: int = _getenv_int("PAGE_SIZE_MAX", 100)
    NEXT_VIDEOS_SIZE: int = _getenv_int("NEXT_VIDEOS_SIZE", 10)

    # "regex" works everywhere, "atlas" needs an Atlas Search index on videos
    SEARCH_BACKEND: str = os.getenv("SEARCH_BACKEND", "regex").strip().lower()
    SEARCH_INDEX_NAME: str = os.getenv("SEARCH_INDEX_NAME", "search-videos")


settings = Settings()

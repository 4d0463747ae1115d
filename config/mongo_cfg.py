from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoSettings(BaseSettings):
    # Full URI wins over host/port/credentials when set
    MONGO_URI: str = ""
    MONGO_HOST: str = "127.0.0.1"
    MONGO_PORT: int = 27017
    MONGO_DB_NAME: str = "vidhub"
    MONGO_USER: str = ""
    MONGO_PASSWORD: str = ""
    MONGO_AUTH_SOURCE: str = "admin"

    # Driver-level timeouts (ms)
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGO_SOCKET_TIMEOUT_MS: int = 10000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


mongo_settings = MongoSettings()

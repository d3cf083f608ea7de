from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SALON_API_BASE_URL: str | None = None
    SALON_API_TIMEOUT_SECONDS: float = 10.0

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    CLIENT_DATA_DIR: str = "./data/clients"

    CALENDAR_WINDOW_DAYS: int = 14


settings = Settings()

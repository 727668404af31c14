from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    api_key: str = "dev-key"
    database_url: str = "sqlite:///pdca.db"

    # storage key the whole app snapshot lives under
    snapshot_key: str = "pdca-todo-data"

    # countdown scheduler
    timezone: str = "UTC"
    tick_seconds: int = 1

    log_level: str = "INFO"

    # load .env, ignore unknown keys so new vars don't break boot
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PDCA_",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()

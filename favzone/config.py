from pydantic_settings import BaseSettings, SettingsConfigDict

from favzone.core.models import Mode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    db_dsn: str = "sqlite:///./data/favzone.db"
    default_mode: Mode = Mode.GOLD
    api_key: str | None = None

    # image extraction backend
    dify_api_key: str | None = None
    dify_base_url: str = "https://suroschooldifyai.xyz/v1"
    dify_user: str = "pachislot-calculator"
    dify_timeout: float = 60.0

    usage_max_per_window: int = 3
    usage_window_minutes: int = 60

settings = Settings()

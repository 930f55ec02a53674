from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    API_URL: str = Field(
        default="http://localhost:3001",
        validation_alias=AliasChoices("NEXT_PUBLIC_API_URL", "API_URL"),
    )

    # Supabase auth (public client)
    SUPABASE_PUBLIC_URL: str = Field(
        default="",
        validation_alias=AliasChoices("NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_PUBLIC_URL"),
    )
    SUPABASE_ANON_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("NEXT_PUBLIC_SUPABASE_ANON_KEY", "SUPABASE_ANON_KEY"),
    )

    # Admin credentials, only read by out-of-band tooling
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""

    PORT: int = 3000
    APP_URL: str = "http://localhost:3000"

    REQUEST_TIMEOUT_SECONDS: float = 10.0
    BULK_REQUEST_TIMEOUT_SECONDS: float = 30.0

    DEFAULT_STALE_SECONDS: float = 0.0
    SETTINGS_STALE_SECONDS: float = 300.0  # 5 minutes
    NOTIFICATION_POLL_SECONDS: int = 30

    THEME_PRIMARY_COLOR: str = "#e4f4f5"
    THEME_COLOR_SCHEME: str = "light"

    TIMEZONE: str = "Asia/Riyadh"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

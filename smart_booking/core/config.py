from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    API_BASE_URL: str = "https://smart-booking-backend-production.up.railway.app"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    TOKEN_STORE_PATH: str = "./data/auth_token.json"

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    DISABLED_WEEKDAYS: list[int] = [5, 6]  # Saturday, Sunday

    STALE_APPOINTMENTS_SECONDS: float = 300.0
    STALE_SERVICES_SECONDS: float = 1800.0
    STALE_USER_SECONDS: float = 600.0
    STALE_SLOTS_SECONDS: float = 120.0

    WIZARD_REVALIDATE_SLOT: bool = True


settings = Settings()

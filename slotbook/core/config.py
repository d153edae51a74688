from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ID: str = "default-app-id"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str | None = None  # "memory" | "json"; falls back to ENV
    DATA_DIR: str = "./data"
    STORE_LATENCY_SECONDS: float = 0.0

    BUSINESS_NAME: str = "Barbershop"
    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    BUSINESS_OPEN_HOUR: int = 9
    BUSINESS_CLOSE_HOUR: int = 18
    SLOT_MINUTES: int = 60
    LEAD_TIME_MINUTES: int = 60

    SERVICE_PRICE: Decimal = Decimal("10.00")
    CURRENCY: str = "BRL"

    PAYMENT_AUTO_APPROVE: bool = True
    SYNC_WAIT_SECONDS: float = 2.0
    SESSION_IDLE_SECONDS: float = 900.0


settings = Settings()

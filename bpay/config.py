"""Application configuration using Pydantic Settings."""
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "BPay"
    debug: bool = False
    log_level: str = "INFO"

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "bpay"

    # CORS (comma-separated origins, e.g. "https://admin.bpay.com.br")
    cors_origins: str = "http://localhost:5173"

    # Billing
    billing_timezone: str = "America/Sao_Paulo"  # "today" and "current month" are evaluated here
    pix_base_url: str = "https://bpay.example.com/pix"
    pix_merchant_name: str = "BPay Pagamentos"
    pix_merchant_city: str = "SAO PAULO"
    generation_log_limit: int = 50

    # Daily trigger
    auto_generation_enabled: bool = True
    auto_generation_hour: int = 6  # local hour, 0-23

    seed_demo_data: bool = False

    # Integrations (only reported as active/inactive)
    mercado_pago_access_token: str = ""
    resend_api_key: str = ""

    @field_validator("auto_generation_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("AUTO_GENERATION_HOUR must be between 0 and 23")
        return v

    @field_validator("billing_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown BILLING_TIMEZONE: {v}") from e
        return v

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.billing_timezone)


settings = Settings()

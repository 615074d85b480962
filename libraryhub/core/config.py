from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App Basics
    app_env: str = "dev"
    app_name: str = "LibraryHub"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "info"

    # Database
    database_url: str = "sqlite:///./libraryhub.db"
    db_echo: bool = False
    seed_on_startup: bool = True

    # Circulation
    late_fee_per_day: Decimal = Decimal("1.00")
    late_fee_due_days: int = 7

    # Billing
    # Only completed payments settle their linked fee when enabled
    settle_fees_on_completed_only: bool = False
    upcoming_fee_window_days: int = 7

    # Reminders
    reminders_enabled: bool = True
    reminder_window_days: int = 3
    reminder_hour_utc: int = Field(default=9, ge=0, le=23)

    # Notification channel
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    mail_from: str = "LibraryHub <noreply@libraryhub.com>"
    notify_webhook_url: str = ""

    # Tell pydantic to read from .env file
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

settings = Settings()

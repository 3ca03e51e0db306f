from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    app_name: str = "Event RSVP WhatsApp"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = True
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # WhatsApp Business Cloud API
    whatsapp_access_token: str = ""
    whatsapp_phone_number_id: str = ""
    whatsapp_business_account_id: str = ""
    whatsapp_api_version: str = "v21.0"
    # if set, inbound webhooks must carry a valid X-Hub-Signature-256
    whatsapp_app_secret: str = ""
    webhook_verify_token: str = "default_verify_token"

    # Pause between two invitation sends
    invitation_send_interval_seconds: float = 1.0

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

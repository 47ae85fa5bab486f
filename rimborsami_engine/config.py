"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Opportunity catalog store (Supabase REST)
    catalog_api_base: str = "http://localhost:54321"
    catalog_api_key: str = ""

    # Service
    service_name: str = "rimborsami-engine"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Scoring
    anomaly_score_multiplier: int = 15  # fallback risk score per anomaly
    extended_amount_rules: bool = False  # insurance/energy/class_action literal amounts


settings = Settings()

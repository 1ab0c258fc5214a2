"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "collection-desk"
    log_level: str = "INFO"

    # Search
    search_fuzzy_threshold: float = 0.6
    search_max_results: int = 100
    dashboard_max_results: int = 50
    exact_match_boost: float = 3.0

    # Recommendations
    recommendation_min_priority: float = 3.0
    recommendation_max_results: int = 50


settings = Settings()

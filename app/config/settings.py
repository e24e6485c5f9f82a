from pydantic_settings import BaseSettings
from typing import Optional

from app.models.schemas import CoverageStrategy


class Settings(BaseSettings):
    # API Configuration
    debug: bool = False
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"

    # OpenAI Configuration (secrets come from environment)
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://models.github.ai/inference"
    openai_model: str = "openai/gpt-4.1"
    openai_temperature: float = 0.3
    openai_timeout_seconds: float = 120.0

    # Minimum content sizes accepted by the AI endpoints
    min_generation_content_length: int = 10
    min_extraction_content_length: int = 50

    # Requirements parsing
    # Prefix for generated requirement ids when the source is an uploaded document
    default_requirement_prefix: str = "TG"

    # Coverage validation: "keyword" or "word_count"
    coverage_strategy: CoverageStrategy = CoverageStrategy.KEYWORD

    # Upper bound on concurrent AI generation calls per request
    max_concurrent_generations: int = 4

    # JIRA Integration (configure via environment)
    jira_base_url: Optional[str] = None
    jira_username: Optional[str] = None
    jira_api_token: Optional[str] = None

    # Zephyr Integration (configure via environment)
    zephyr_base_url: Optional[str] = "https://eu.api.zephyrscale.smartbear.com/v2"
    zephyr_api_token: Optional[str] = None

    # Cache TTLs (seconds)
    cache_ttl_jira_ok: float = 30.0
    cache_ttl_jira_error: float = 30.0
    cache_ttl_generation: float = 3600.0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()

from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "LISTIQ_"}

    # Database (key-value state store)
    database_url: str = "sqlite:///data/listiq.db"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # API Keys
    anthropic_api_key: str = ""

    # Comparison summary
    summary_model: str = "claude-haiku-4-5-20251001"
    summary_max_tokens: int = 500
    summary_cache_ttl_seconds: int = 3600

    # Mortgage defaults (applied on first load)
    default_interest_rate: Decimal = Decimal("6.5")
    default_down_payment_pct: Decimal = Decimal("20")
    default_loan_term_years: int = 30

    # Homeowner's insurance heuristic, % of price per year
    insurance_rate_pct: Decimal = Decimal("0.5")

    # Sharing
    share_base_url: str = "http://localhost:8000/"

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for onboarding, membership changes and ledger writes

    # Stock bookkeeping
    stock_write_attempts: int = 5  # compare-and-swap rounds before giving up on a contended row
    default_categories: str = "Cameras,Lenses,Lighting,Audio,Tripods & Supports,Accessories"

    # Reports
    report_top_n: int = 10
    report_recent_n: int = 5

    # App
    app_name: str = "equipment-tracker"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_default_categories_list(self) -> List[str]:
        return [c.strip() for c in self.default_categories.split(",") if c.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str
    jwt_secret_key: str = "your-secret-key-change-in-production"  # Default for development
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # How far past today (or the assignment start) rotations are expanded
    default_horizon_weeks: int = 12

    # Comma-separated list, e.g. "http://localhost:8081,https://rota.example.com"
    cors_origins: str = ""

    log_level: str = "INFO"


settings = Settings()

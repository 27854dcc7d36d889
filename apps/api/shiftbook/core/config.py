from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str
    jwt_secret_key: str = "your-secret-key-change-in-production"  # Default for development
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Comma-separated, e.g. "http://localhost:8081,https://shifts.example.com"
    cors_origins: str = ""
    log_level: str = "INFO"

    # Every request must finish or fail within a bounded time
    db_pool_timeout_seconds: int = 10
    db_statement_timeout_ms: int = 5000

    recent_window_days: int = 7

    class Config:
        env_file = ".env"

settings = Settings()

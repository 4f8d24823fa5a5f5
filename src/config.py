"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str
    db_echo: bool = False

    # "database" or "memory" (in-process consultations; users and admin auth
    # still go through the database)
    consultation_store: str = "database"

    # Redis (admin sessions)
    redis_url: str

    # App
    log_level: str = "INFO"
    environment: str = "development"

    # Admin panel
    admin_username: str = "admin"
    admin_password: str = ""  # required by scripts/seed_db.py
    admin_cookie_secure: bool = True

    # Session
    session_ttl_seconds: int = 86400  # 24 hours

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()  # type: ignore[call-arg]

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    project_name: str = "Gradebook"
    database_url: str = "sqlite:///./gradebook.db"
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    log_level: str = "INFO"

    # teachers cannot use teacher endpoints until an admin approves them
    require_teacher_approval: bool = True

    admin_email: str = "admin@example.com"
    admin_password: str = "admin"
    admin_name: str = "Administrator"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

@lru_cache
def get_settings() -> Settings:
    return Settings()

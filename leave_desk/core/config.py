from pydantic_settings import BaseSettings


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    database_url: str = "sqlite:///./leave_desk.db"
    # DB bootstrap (dev only)
    auto_db_bootstrap: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    jwt_secret: str = "dev-secret"
    jwt_expires_days: int = 7
    admin_email: str = ""
    allowed_departments: str = "cse,it,ece"
    frontend_url: str = "http://localhost:5173"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"

    smtp_host: str = ""
    smtp_port: int = 25
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    smtp_starttls: bool = False
    reset_token_expires_min: int = 15

    faculty_load_url: str = ""
    faculty_load_timeout_seconds: float = 10.0

    # Storage
    storage_backend: str = "local"  # local | object
    local_upload_root: str = "./uploads"

    # Object Storage (S3 compatible)
    object_storage_endpoint: str | None = None
    object_storage_bucket: str | None = None
    object_storage_public_base_url: str | None = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def department_codes(self) -> list[str]:
        return [code.lower() for code in _split_csv(self.allowed_departments)]

    @property
    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_origins)


settings = Settings()


def get_settings() -> Settings:
    return settings

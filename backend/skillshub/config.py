from pydantic_settings import BaseSettings
from pydantic import model_validator
from functools import lru_cache


DEFAULT_ALLOWED_FILE_TYPES = (
    "application/pdf,"
    "application/msword,"
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document,"
    "image/jpeg,image/jpg,image/png,image/webp,text/plain"
)


class Settings(BaseSettings):
    # Database
    database_url: str = ""
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_database: str = "skillshub"
    postgres_user: str = "skillshub"
    postgres_password: str = ""

    # Sessions
    session_cookie_name: str = "session"
    session_expire_days: int = 7
    otp_expire_minutes: int = 10

    # Email
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_timeout_seconds: float = 10.0
    from_email: str = ""

    # Object storage (AWS S3 or any S3-compatible service)
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_region: str = "us-east-1"
    s3_endpoint: str = ""
    s3_force_path_style: bool = False
    s3_bucket: str = "salone-skillshub-files"
    s3_url_expiry_seconds: int = 3600
    s3_timeout_seconds: float = 10.0

    # Uploads
    max_file_size: int = 5 * 1024 * 1024
    allowed_file_types: str = DEFAULT_ALLOWED_FILE_TYPES

    # App
    app_url: str = "http://localhost:8000"
    environment: str = "development"
    enable_scheduler: bool = False

    # Seeded admin account
    admin_email: str = "admin@skillshub.sl"
    admin_username: str = "admin"
    admin_password: str = "Admin@123"

    @model_validator(mode="after")
    def validate_admin_password(self) -> "Settings":
        """Refuse the default admin password outside development."""
        weak_passwords = {"Admin@123", "", "admin", "changeme", "password"}
        if self.environment != "development" and self.admin_password in weak_passwords:
            raise ValueError(
                f"ADMIN_PASSWORD must be set to a strong value in {self.environment} environment."
            )
        return self

    @model_validator(mode="after")
    def assemble_database_url(self) -> "Settings":
        """Build the PostgreSQL URL from its parts unless DATABASE_URL is set."""
        if not self.database_url:
            self.database_url = (
                f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_database}"
            )
        return self

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    @property
    def s3_configured(self) -> bool:
        return bool(self.s3_access_key_id and self.s3_secret_access_key)

    @property
    def allowed_file_type_list(self) -> list[str]:
        return [t.strip() for t in self.allowed_file_types.split(",") if t.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()

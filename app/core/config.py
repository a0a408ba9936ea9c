"""Application configuration with environment variables."""

from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    VERSION: str = "0.3.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./complaints.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 24

    # Password hashing cost (bcrypt log rounds)
    BCRYPT_ROUNDS: int = 12

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Complaint timestamps are stored as display strings in this zone
    COMPLAINT_TIMEZONE: str = "UTC"

    # Voice uploads
    MAX_VOICE_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MB

    # Blob storage: "local" or "s3"
    STORAGE_BACKEND: str = "local"
    LOCAL_STORAGE_PATH: str = "/tmp/complaint-desk-uploads"
    LOCAL_STORAGE_BASE_URL: str = "/uploads"
    S3_BUCKET: str = "complaint-desk-voice"
    S3_REGION: str = "us-east-1"
    S3_PUBLIC_BASE_URL: str = ""  # e.g. CDN in front of the bucket
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""

    # Bootstrap super admin (used by `complaint-desk init-db`)
    SUPERADMIN_USERNAME: str = ""
    SUPERADMIN_PASSWORD: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.JWT_EXPIRES_HOURS)


settings = Settings()

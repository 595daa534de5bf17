"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str = "sqlite:///./coursemail.db"

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 4

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Frontend (for signature call-to-action links)
    FRONTEND_URL: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Sender shown for the synthetic "no-reply" sender option
    NOREPLY_ADDRESS: str = "noreply@example.com"

    # Block-level messaging defaults (course overrides live in course_config_overrides)
    MESSAGING_DEFAULT_MESSAGE_TYPE: str = "email"  # 'message' | 'email'
    MESSAGING_MESSAGE_TYPES_AVAILABLE: str = "all"  # 'all' | 'message' | 'email'
    MESSAGING_ALLOW_ADDITIONAL_EMAILS: bool = False
    MESSAGING_ALLOW_MENTOR_COPY: bool = False
    MESSAGING_RECEIPT_DEFAULT: bool = False
    MESSAGING_ALLOW_STUDENTS: bool = False

    # Rich text editor limits
    EDITOR_MAX_FILES: int = -1  # -1 = unlimited
    EDITOR_MAX_BYTES: int = 0  # 0 = course/site limit applies
    EDITOR_ACCEPTED_TYPES: str = "*"

    # Attachment limits
    ATTACHMENT_MAX_BYTES: int = 10 * 1024 * 1024
    ATTACHMENT_MAX_FILES: int = -1
    ATTACHMENT_ACCEPTED_TYPES: str = "*"

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

    @staticmethod
    def split_types(value: str) -> list[str]:
        """Split a comma-separated accepted-types setting into a list."""
        return [t.strip() for t in value.split(",") if t.strip()]


settings = Settings()

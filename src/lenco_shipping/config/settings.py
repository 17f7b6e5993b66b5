"""Configuration management using Pydantic Settings.

Loads configuration from environment variables with .env file support.
The instance is frozen: build it once at process start and hand it to the
collaborators that need it.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    # Lenco Webhook Configuration
    lenco_webhook_hash_key: Optional[str] = None

    # Resend (email) Configuration
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com"
    mail_from_email: str = "store@syaonlinetrading.com"
    staff_emails: str = ""

    # Mercury (shipping) Configuration
    mercury_api_url: str = "http://116.202.29.37/quotation1/app"
    mercury_email: str = ""
    mercury_private_key: str = ""
    mercury_timeout_seconds: float = 30.0

    # Database Configuration
    database_url: str = "sqlite+aiosqlite:///./shipments.db"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    environment: str = "development"

    # GlitchTip Error Monitoring
    glitchtip_dsn: Optional[str] = None

    # Webhook audit log (JSONL, disabled when unset)
    webhook_event_log_dir: Optional[str] = None

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
        frozen = True

    @property
    def staff_email_list(self) -> List[str]:
        """Staff recipients parsed from the comma-separated STAFF_EMAILS."""
        return [email.strip() for email in self.staff_emails.split(",") if email.strip()]


# Create a global settings instance
settings = Settings()

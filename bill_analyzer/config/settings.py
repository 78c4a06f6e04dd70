from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bill_analyzer.analysis.retry import RetryPolicy

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png", "application/pdf")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8080

    upload_max_file_size_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    upload_allowed_types: list[str] = Field(
        default_factory=lambda: list(SUPPORTED_MIME_TYPES), min_length=1
    )

    image_max_width_px: int = Field(default=1200, ge=1)
    image_jpeg_quality: float = Field(default=0.9, gt=0.0, le=1.0)

    analysis_provider: str = "groq"
    analysis_api_key: str = ""
    analysis_model_name: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    analysis_base_url: str = ""
    analysis_timeout_seconds: int = Field(default=30, ge=1)
    analysis_temperature: float = 0.0
    analysis_max_image_size_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    analysis_use_json_schema: bool = False

    analysis_retry_max_attempts: int = Field(default=3, ge=1)
    analysis_retry_initial_delay_ms: int = Field(default=1000, ge=100)
    analysis_retry_multiplier: float = Field(default=2.0, ge=1.0)

    @field_validator("upload_allowed_types")
    @classmethod
    def _check_allowed_types(cls, value: list[str]) -> list[str]:
        unknown = [t for t in value if t not in SUPPORTED_MIME_TYPES]
        if unknown:
            raise ValueError(
                f"Unsupported upload types {unknown}. Choose from: {list(SUPPORTED_MIME_TYPES)}"
            )
        return value

    def is_file_size_valid(self, size_bytes: int) -> bool:
        """Return True when 0 < size_bytes <= upload_max_file_size_bytes."""
        return 0 < size_bytes <= self.upload_max_file_size_bytes

    def is_type_allowed(self, mime_type: str | None) -> bool:
        """Check a MIME label against the allow-list.

        This is a label check only. Content detection (magic bytes) happens
        in the upload validator and is the only source of the label.
        """
        return mime_type is not None and mime_type in self.upload_allowed_types

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.analysis_retry_max_attempts,
            initial_delay_seconds=self.analysis_retry_initial_delay_ms / 1000,
            multiplier=self.analysis_retry_multiplier,
        )

"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The Firestore backend needs service-account
credentials, which are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DOCUMENT_STORE_BACKENDS = ("memory", "firestore")
TELEMETRY_EXPORTERS = ("console", "otlp", "none")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "taskmaster-rules"
    app_version: str = "1.0.0"
    debug: bool = False

    # Rules
    legacy_rules_enabled: bool = True
    max_lookups_per_decision: int = 20

    # Document store: "memory" (process-local, for tests and demos) or "firestore"
    document_store_backend: str = "memory"
    firestore_timeout_seconds: float = 10.0

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend_and_limits(self) -> "Settings":
        """Validate store backend, credentials and numeric limits.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - max_lookups_per_decision must be positive.
        - telemetry_sample_rate must be within 0.0 and 1.0.
        """
        if self.document_store_backend not in DOCUMENT_STORE_BACKENDS:
            raise ValueError(
                f"document_store_backend must be 'memory' or 'firestore', "
                f"got: {self.document_store_backend!r}"
            )
        if self.document_store_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When document_store_backend is 'firestore', set "
                    "FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) or "
                    "FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        if self.max_lookups_per_decision < 1:
            raise ValueError("max_lookups_per_decision must be at least 1")
        if self.telemetry_exporter not in TELEMETRY_EXPORTERS:
            raise ValueError(
                f"Invalid telemetry_exporter '{self.telemetry_exporter}'. "
                "Must be one of: 'console', 'otlp', 'none'"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("telemetry_sample_rate must be between 0.0 and 1.0")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

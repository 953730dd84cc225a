"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """AudioNote application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        stt_provider: Which speech-to-text backend to use ("alle_ai").
        alle_ai_api_key: Vendor API key. Empty means "not configured".
        supported_formats: Comma-separated allow-list of audio extensions.
        recorder_mime_types: Recording encodings in order of preference.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Speech-to-text vendor ---
    stt_provider: str = "alle_ai"

    # Alle AI settings
    alle_ai_api_key: str = ""  # Required for transcription
    alle_ai_endpoint: str = "https://api.alle-ai.com"
    alle_ai_version: str = "v1"
    alle_ai_timeout: float = 30.0  # Seconds
    alle_ai_model: str = "whisper-1"
    alle_ai_response_format: str = "verbose_json"
    alle_ai_language: str = "auto"  # "auto" = let the vendor detect

    # --- Upload limits ---
    max_file_size_mb: int = 50
    supported_formats: str = "mp3,wav,m4a,mp4,webm"

    # --- Recorder ---
    min_recording_seconds: int = 1
    recorder_mime_types: list[str] = Field(
        default_factory=lambda: [
            "audio/mp4",
            "audio/webm;codecs=opus",
            "audio/webm",
            "audio/wav",
        ]
    )
    recorder_timeslice: float = 1.0  # Seconds of audio per delivered chunk
    recorder_sample_rate: int = 16000

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:8501",  # Streamlit
            "http://localhost:3000",  # Dev frontend
        ]
    )
    api_base_url: str = "http://localhost:8000"  # Used by the UI and CLI clients

    @property
    def supported_format_list(self) -> list[str]:
        """Normalized allow-list of audio format extensions."""
        return [fmt.strip().lower() for fmt in self.supported_formats.split(",") if fmt.strip()]

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def is_vendor_configured(self) -> bool:
        return bool(self.alle_ai_api_key and self.alle_ai_endpoint)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()

"""Application settings loaded from environment variables via pydantic-settings.

Configuration is read from two sources (in priority order):

  1. Environment variables, e.g. ``EMYSOUND_BASE_URL=http://fp:3340``
  2. A ``.env`` file in the working directory

Field name ``audio_db_path`` maps to env var ``AUDIO_DB_PATH``.  The stream
URL itself is NOT a setting; it is the single positional CLI argument.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

MPEGURL_CONTENT_TYPE = "application/vnd.apple.mpegurl; charset=UTF-8"


class Settings(BaseSettings):
    """radioRecall settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Storage ===
    # Three independent SQLite files; created on first use.
    audio_db_path: str = "./audio.sqlite3"
    metadata_db_path: str = "./metadata.sqlite3"
    matches_db_path: str = "./matches.sqlite3"

    # === Fingerprinting (EmySound REST API) ===
    emysound_base_url: str = "http://localhost:3340"
    emysound_username: str = "ADMIN"
    emysound_password: str = ""
    emysound_min_coverage: float = 0.2

    # === HTTP / polling ===
    http_timeout: float = 30.0
    manifest_content_type: str = MPEGURL_CONTENT_TYPE
    # Used only when a cycle is skipped and no target duration is known.
    fallback_poll_interval: float = 5.0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

"""Timetable configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class TimetableConfig(BaseSettings):
    """Timetable configuration loaded from environment variables.

    Every field has a usable default. For local development, create a .env
    file in the project root.
    """

    # Data source
    metadata_url: str = Field(
        default="http://localhost:3000/api/data",
        description="Endpoint returning the sheet URL and per-day gids",
    )
    region: str = Field(
        default="karachi",
        description="Top-level key of the metadata document to read",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for each HTTP request",
    )
    metadata_retry_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts for the metadata request on transient failures",
    )
    metadata_retry_wait_seconds: float = Field(
        default=5.0,
        description="Delay between metadata attempts",
    )
    excluded_days: list[str] = Field(
        default=["Saturday"],
        description="Day names dropped from the timetable",
    )

    # Refresh
    refresh_interval_seconds: float = Field(
        default=3600.0,
        description="Interval between background refreshes",
    )

    # Paths
    state_dir: str = Field(
        default="data/state",
        description="Directory holding the persisted class selection",
    )
    export_dir: str = Field(
        default="data/export",
        description="Directory image exports are written to",
    )

    # Export
    export_width: int = Field(
        default=1200,
        description="Viewport width forced while rasterising the grid",
    )
    export_scale: float = Field(
        default=2.0,
        description="Device scale factor for exported images",
    )
    export_settle_ms: int = Field(
        default=150,
        description="Delay before capture so layout can settle",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "TIMETABLE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the timetable configuration singleton.

    Returns:
        TimetableConfig: Timetable configuration instance
    """
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config

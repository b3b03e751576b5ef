"""Configuration management for the analyzer.

Loads configuration from environment variables using a Pydantic model.
Provides sensible defaults for all settings while allowing override via
environment.

Provides:
- Config: Pydantic model with all application settings
- load_config: Factory function to create Config instance
"""

import os

from pydantic import BaseModel, Field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config(BaseModel):
    """Analyzer configuration loaded from environment.

    Attributes:
        max_source_bytes: Largest accepted source, in UTF-8 bytes
            (RISKSCAN_MAX_SOURCE_BYTES)
        strict_source_check: Reject input that does not look like Solidity
            instead of analyzing it anyway (RISKSCAN_STRICT)
        parallel_detectors: Dispatch detectors to worker threads
            (RISKSCAN_PARALLEL)
        log_level: Minimum structlog level for CLI output (RISKSCAN_LOG_LEVEL)
    """

    # Input limits
    max_source_bytes: int = Field(
        default_factory=lambda: int(os.getenv("RISKSCAN_MAX_SOURCE_BYTES", "1048576")),
        gt=0,
    )

    # Analysis behavior
    strict_source_check: bool = Field(default_factory=lambda: _env_flag("RISKSCAN_STRICT"))
    parallel_detectors: bool = Field(default_factory=lambda: _env_flag("RISKSCAN_PARALLEL"))

    # Logging
    log_level: str = Field(default_factory=lambda: os.getenv("RISKSCAN_LOG_LEVEL", "WARNING").upper())


def load_config() -> Config:
    """Load configuration from environment.

    Returns:
        Populated Config instance
    """
    return Config()

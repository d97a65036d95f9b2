"""
Configuration management.
"""

import os
from dataclasses import dataclass, field


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Pipeline
    default_state: str = field(default_factory=lambda: os.getenv("DEFAULT_STATE", "NSW"))
    min_auto_mapped_fields: int = field(
        default_factory=lambda: int(os.getenv("MIN_AUTO_MAPPED_FIELDS", "3"))
    )

    # Results
    max_result_rows: int = field(
        default_factory=lambda: int(os.getenv("MAX_RESULT_ROWS", "200"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "default_state": self.default_state,
            "min_auto_mapped_fields": self.min_auto_mapped_fields,
            "max_result_rows": self.max_result_rows,
        }

"""Configuration management for the document operations service."""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


@dataclass
class ProcessingConfig:
    """Configuration for document processing."""
    max_file_size_mb: int = field(
        default_factory=lambda: int(os.environ.get("MAX_FILE_SIZE_MB", "100"))
    )
    scratch_dir: str = field(
        default_factory=lambda: os.environ.get("SCRATCH_DIR", "uploads")
    )
    watermark_font_size: float = field(
        default_factory=lambda: float(os.environ.get("WATERMARK_FONT_SIZE", "50"))
    )
    watermark_opacity: float = field(
        default_factory=lambda: float(os.environ.get("WATERMARK_OPACITY", "0.3"))
    )
    require_encryption: bool = field(
        default_factory=lambda: _env_bool("PROTECT_REQUIRE_ENCRYPTION", "false")
    )


@dataclass
class ServerConfig:
    """Configuration for HTTP server."""
    host: str = field(
        default_factory=lambda: os.environ.get("HTTP_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("HTTP_PORT", "5000"))
    )
    cors_origins: List[str] = field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
    )


@dataclass
class Config:
    """Main configuration container."""
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Force reload of configuration from environment."""
    global _config
    _config = Config()
    return _config

"""
Core module for spot-ripper.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs
    - progress: Rich progress bar for the delivery pipeline

Usage:
    from spot_ripper.core import (
        Config, load_config,
        setup_logging, get_logger,
        SpotRipperError, ConfigError, CatalogError
    )
"""

from spot_ripper.core.config import (
    Config,
    DownloadConfig,
    LoggingConfig,
    OutputConfig,
    default_config,
    load_config,
)
from spot_ripper.core.exceptions import (
    AudioKeyError,
    CatalogError,
    ConfigError,
    DecryptionError,
    DeliveryError,
    FormatError,
    HelperError,
    InvalidIdError,
    SessionError,
    SpotRipperError,
    StreamError,
    UnavailableError,
)
from spot_ripper.core.logger import (
    get_logger,
    log_item_skipped,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "OutputConfig",
    "DownloadConfig",
    "LoggingConfig",
    "default_config",
    "load_config",
    # Exceptions
    "SpotRipperError",
    "ConfigError",
    "SessionError",
    "CatalogError",
    "InvalidIdError",
    "UnavailableError",
    "FormatError",
    "AudioKeyError",
    "StreamError",
    "DecryptionError",
    "DeliveryError",
    "HelperError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_item_skipped",
    "shutdown_logging",
]

"""
Configuration management for spot-ripper.

This module handles loading, validating, and providing access to the
optional application configuration stored in config.yaml.

Credentials are NOT part of the configuration file; they are passed on the
command line. The file only tunes where output goes and how the session is
serviced while an audio stream is being read.

Configuration File Location:
    config.yaml in the current working directory, or an explicit path given
    with --config. When the default file is absent, defaults are used.

Example config.yaml:
    output:
      directory: "~/Music/Ripped"
      log_directory: null       # defaults to {directory}/logs

    download:
      poll_interval: 0.1        # seconds per session turn while reading

    logging:
      console_level: INFO
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from spot_ripper.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_CONSOLE_LEVEL = "INFO"


@dataclass(frozen=True)
class OutputConfig:
    """
    Output directory configuration.

    Attributes:
        directory: Absolute path where .ogg files are written in file mode.
                   Defaults to the current working directory.
        log_directory: Absolute path for the run's log files.
                       Defaults to {directory}/logs.
    """
    directory: Path
    log_directory: Path


@dataclass(frozen=True)
class DownloadConfig:
    """
    Delivery behavior configuration.

    Attributes:
        poll_interval: Seconds the session is serviced per turn while the
                       background worker drains an audio stream.
    """
    poll_interval: float


@dataclass(frozen=True)
class LoggingConfig:
    """
    Console logging configuration.

    Attributes:
        console_level: Numeric logging level for the console handler.
                       Log files always receive DEBUG and above.
    """
    console_level: int


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Saving to: {config.output.directory}")
    """
    output: OutputConfig
    download: DownloadConfig
    logging: LoggingConfig


def default_config() -> Config:
    """Return the configuration used when no config.yaml exists."""
    return _build_config({})


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory
                     and falls back to defaults when it is not there.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or contains invalid values.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        if explicit:
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        return default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "all defaults" configuration
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return _build_config(raw_config)


def _build_config(raw_config: dict[str, Any]) -> Config:
    for section in ("output", "download", "logging"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    return Config(
        output=_parse_output_config(raw_config.get("output")),
        download=_parse_download_config(raw_config.get("download")),
        logging=_parse_logging_config(raw_config.get("logging")),
    )


def _parse_output_config(output_section: dict[str, Any] | None) -> OutputConfig:
    """
    Parse and validate the output configuration section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directories (that happens at startup).

    Raises:
        ConfigError: If a directory value is not a non-empty string.
    """
    output_section = output_section or {}

    directory = output_section.get("directory", ".")
    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'output.directory' must be a non-empty string",
            details={"field": "output.directory"}
        )
    path = Path(directory.strip()).expanduser().resolve()

    log_dir_raw = output_section.get("log_directory")
    if log_dir_raw is not None:
        if not isinstance(log_dir_raw, str) or not log_dir_raw.strip():
            raise ConfigError(
                "'output.log_directory' must be a non-empty string",
                details={"field": "output.log_directory"}
            )
        log_path = Path(log_dir_raw.strip()).expanduser().resolve()
    else:
        log_path = path / "logs"

    return OutputConfig(directory=path, log_directory=log_path)


def _parse_download_config(download_section: dict[str, Any] | None) -> DownloadConfig:
    """
    Parse and validate the download configuration section.

    Raises:
        ConfigError: If poll_interval is not a positive number.
    """
    poll_interval = DEFAULT_POLL_INTERVAL

    if download_section is not None:
        raw_interval = download_section.get("poll_interval")
        if raw_interval is not None:
            if (
                isinstance(raw_interval, bool)
                or not isinstance(raw_interval, (int, float))
                or raw_interval <= 0
            ):
                raise ConfigError(
                    "'download.poll_interval' must be a positive number",
                    details={"field": "download.poll_interval", "value": raw_interval}
                )
            poll_interval = float(raw_interval)

    return DownloadConfig(poll_interval=poll_interval)


def _parse_logging_config(logging_section: dict[str, Any] | None) -> LoggingConfig:
    """
    Parse and validate the logging configuration section.

    Raises:
        ConfigError: If console_level is not a known level name.
    """
    level_name = DEFAULT_CONSOLE_LEVEL

    if logging_section is not None:
        raw_level = logging_section.get("console_level")
        if raw_level is not None:
            level_name = raw_level

    if not isinstance(level_name, str):
        raise ConfigError(
            "'logging.console_level' must be a level name",
            details={"field": "logging.console_level", "value": level_name}
        )

    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(
            f"Unknown logging level: {level_name}",
            details={"field": "logging.console_level", "value": level_name}
        )

    return LoggingConfig(console_level=level)

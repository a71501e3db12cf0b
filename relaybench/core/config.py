"""
Configuration management for RelayBench.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

import toml

from .durations import parse_duration
from .errors import ConfigError
from .logger import resolve_level

DEFAULT_RELAYS_URL = "https://api.mullvad.net/www/relays/wireguard"
DEFAULT_TIMEOUT = 1.0
DEFAULT_OUTPUT = "bench_result.csv"


@dataclass(frozen=True)
class DirectoryConfig:
    """Relay directory settings."""
    url: str = DEFAULT_RELAYS_URL
    request_timeout: float = 30.0


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    file: str = ""
    max_size: int = 10
    backup_count: int = 3


@dataclass(frozen=True)
class Config:
    """Main configuration class, built once at startup."""
    list_countries: bool = False
    country_scope: Tuple[str, ...] = ()
    timeout: float = DEFAULT_TIMEOUT
    output_path: str = DEFAULT_OUTPUT
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from TOML file. Missing sections keep their defaults."""
        try:
            config_data = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Failed to load configuration: {e}")

        try:
            directory_data = config_data.get('directory', {})
            directory = DirectoryConfig(
                url=directory_data.get('url', DEFAULT_RELAYS_URL),
                request_timeout=float(directory_data.get('request_timeout', 30.0))
            )

            probe_data = config_data.get('probe', {})
            timeout = _duration_value(probe_data.get('timeout', DEFAULT_TIMEOUT))

            report_data = config_data.get('report', {})
            output_path = str(report_data.get('output', DEFAULT_OUTPUT))

            logging_data = config_data.get('logging', {})
            logging_config = LoggingConfig(
                level=str(logging_data.get('level', 'WARNING')),
                file=str(logging_data.get('file', '')),
                max_size=int(logging_data.get('max_size', 10)),
                backup_count=int(logging_data.get('backup_count', 3))
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}")

        return cls(
            timeout=timeout,
            output_path=output_path,
            directory=directory,
            logging=logging_config
        )

    def with_overrides(self,
                       list_countries: Optional[bool] = None,
                       country_scope: Optional[Tuple[str, ...]] = None,
                       timeout: Optional[float] = None,
                       output_path: Optional[str] = None,
                       log_level: Optional[str] = None) -> 'Config':
        """Return a copy with the given command-line values applied."""
        changes = {}
        if list_countries is not None:
            changes['list_countries'] = list_countries
        if country_scope is not None:
            changes['country_scope'] = tuple(country_scope)
        if timeout is not None:
            changes['timeout'] = timeout
        if output_path is not None:
            changes['output_path'] = output_path
        if log_level is not None:
            changes['logging'] = replace(self.logging, level=log_level)
        return replace(self, **changes)

    def validate(self) -> bool:
        """Validate configuration values."""
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}s")

        if not self.output_path:
            raise ConfigError("Output path must not be empty")

        if not self.directory.url:
            raise ConfigError("Directory URL must not be empty")

        if self.directory.request_timeout <= 0:
            raise ConfigError("Directory request timeout must be positive")

        try:
            resolve_level(self.logging.level)
        except ValueError as e:
            raise ConfigError(str(e))

        return True


def _duration_value(value) -> float:
    # TOML may carry either a duration string or a plain number of seconds
    if isinstance(value, bool):
        raise ValueError(f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    return parse_duration(str(value))

"""
Configuration management for SAS generation

Provides defaults applied by the signer (service version, protocol, token
lifetime) and debug switches, loadable from JSON or environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ConfigurationError
from ..sas.types import ApiVersion, SasProtocol

ENV_VERSION = 'BLOB_SAS_VERSION'
ENV_PROTOCOL = 'BLOB_SAS_PROTOCOL'
ENV_TTL_SECONDS = 'BLOB_SAS_TTL_SECONDS'
ENV_DEBUG = 'BLOB_SAS_DEBUG'

DEFAULT_TTL_SECONDS = 3600

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


@dataclass
class DebugConfig:
    """Debug configuration"""
    log_string_to_sign: bool = False


@dataclass
class SasConfig:
    """
    Defaults applied when generating SAS tokens

    Attributes:
        default_version: Signed version used when a builder sets none
        default_protocol: Protocol restriction used when a builder sets none
        default_ttl_seconds: Token lifetime used by callers that derive
            expiry from the current time (e.g. the CLI)
        debug: Debug switches
    """
    default_version: str = ApiVersion.LATEST.value
    default_protocol: Optional[SasProtocol] = None
    default_ttl_seconds: int = DEFAULT_TTL_SECONDS
    debug: DebugConfig = field(default_factory=DebugConfig)

    def __post_init__(self):
        """Validate configuration values"""
        if not self.default_version:
            raise ConfigurationError("Default version cannot be empty", "INVALID_FORMAT")

        if self.default_protocol is not None and not isinstance(self.default_protocol, SasProtocol):
            try:
                self.default_protocol = SasProtocol(self.default_protocol)
            except ValueError:
                raise ConfigurationError(
                    f"Unknown protocol: {self.default_protocol!r}",
                    "INVALID_FORMAT",
                    {"allowed": [p.value for p in SasProtocol]}
                )

        if (isinstance(self.default_ttl_seconds, bool)
                or not isinstance(self.default_ttl_seconds, int)
                or self.default_ttl_seconds <= 0):
            raise ConfigurationError(
                f"Default TTL must be a positive number of seconds, got {self.default_ttl_seconds!r}",
                "INVALID_FORMAT"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SasConfig':
        """Build configuration from a parsed JSON object"""
        try:
            debug = DebugConfig(**data.get('debug', {}))
            return cls(
                default_version=data.get('default_version', ApiVersion.LATEST.value),
                default_protocol=data.get('default_protocol'),
                default_ttl_seconds=data.get('default_ttl_seconds', DEFAULT_TTL_SECONDS),
                debug=debug,
            )
        except (AttributeError, TypeError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}", "INVALID_FORMAT")

    @classmethod
    def from_json(cls, json_string: str) -> 'SasConfig':
        """Load configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")

        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object", "INVALID_FORMAT")

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'SasConfig':
        """Load configuration from file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", "FILE_ERROR")

        return cls.from_json(json_string)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'SasConfig':
        """
        Load configuration from BLOB_SAS_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ

        ttl = env.get(ENV_TTL_SECONDS)
        if ttl is not None:
            try:
                ttl_seconds = int(ttl)
            except ValueError:
                raise ConfigurationError(
                    f"{ENV_TTL_SECONDS} must be an integer, got {ttl!r}",
                    "INVALID_FORMAT"
                )
        else:
            ttl_seconds = DEFAULT_TTL_SECONDS

        return cls(
            default_version=env.get(ENV_VERSION) or ApiVersion.LATEST.value,
            default_protocol=env.get(ENV_PROTOCOL) or None,
            default_ttl_seconds=ttl_seconds,
            debug=DebugConfig(
                log_string_to_sign=env.get(ENV_DEBUG, '').strip().lower() in _TRUE_VALUES
            ),
        )


def load_default_config() -> SasConfig:
    """Load configuration from the environment"""
    return SasConfig.from_env()

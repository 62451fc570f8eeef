"""
Configuration management for Blob SAS Python SDK
"""

from .sas_config import (
    SasConfig,
    DebugConfig,
    load_default_config,
)

__all__ = [
    'SasConfig',
    'DebugConfig',
    'load_default_config',
]

"""
Type definitions for shared access signature generation

This module provides the value types, enums and error classes used when
building blob service SAS tokens.
"""

import ipaddress
from typing import Dict, Optional, Any
from dataclasses import dataclass, fields
from enum import Enum

from ..exceptions import ValidationError


class ApiVersion(str, Enum):
    """Storage service API versions that share the 16-field blob SAS layout"""
    V2020_12_06 = "2020-12-06"
    V2021_08_06 = "2021-08-06"
    V2023_11_03 = "2023-11-03"
    V2025_01_05 = "2025-01-05"
    LATEST = "2025-01-05"


class SasProtocol(str, Enum):
    """Protocols a SAS token may be used over"""
    HTTPS_ONLY = "https"
    HTTPS_OR_HTTP = "https,http"


class BlobSasResource(str, Enum):
    """Resource scope a blob service SAS is issued for"""
    CONTAINER = "c"
    BLOB = "b"


@dataclass(frozen=True)
class SasIpRange:
    """
    Inclusive range of client IP addresses allowed to use a SAS

    Attributes:
        start: First address of the range (or the single allowed address)
        end: Optional last address of the range
    """
    start: str
    end: Optional[str] = None

    def __post_init__(self):
        """Validate addresses after initialization"""
        start_address = _parse_address(self.start, "start")

        if self.end is not None:
            end_address = _parse_address(self.end, "end")

            if start_address.version != end_address.version:
                raise ValidationError(
                    "IP range start and end must be the same address family",
                    "INVALID_IP_RANGE",
                    {"start": self.start, "end": self.end}
                )

            if start_address > end_address:
                raise ValidationError(
                    "IP range start must not be greater than its end",
                    "INVALID_IP_RANGE",
                    {"start": self.start, "end": self.end}
                )

    @classmethod
    def parse(cls, value: str) -> 'SasIpRange':
        """
        Parse a range written as "start-end" or a single address.

        Args:
            value: Range string

        Returns:
            SasIpRange: Parsed range

        Raises:
            ValidationError: If either address is malformed
        """
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("IP range cannot be empty", "INVALID_IP_RANGE")

        start, separator, end = value.strip().partition('-')
        return cls(start.strip(), end.strip() if separator else None)

    def __str__(self) -> str:
        if self.end is None:
            return self.start
        return f"{self.start}-{self.end}"


def _parse_address(value: str, position: str):
    try:
        return ipaddress.ip_address(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid IP address for range {position}: {value!r}",
            "INVALID_IP_ADDRESS",
            {position: value}
        )


@dataclass
class BlobSasPermissions:
    """
    Permission flags for a blob service SAS

    Rendering with str() yields the permission letters in the order the
    storage service expects them.
    """
    read: bool = False
    add: bool = False
    create: bool = False
    write: bool = False
    delete: bool = False
    delete_previous_version: bool = False
    permanent_delete: bool = False
    list: bool = False
    tag: bool = False
    move: bool = False
    execute: bool = False
    set_immutability_policy: bool = False
    ownership: bool = False
    permissions: bool = False

    _LETTERS = {
        'read': 'r',
        'add': 'a',
        'create': 'c',
        'write': 'w',
        'delete': 'd',
        'delete_previous_version': 'x',
        'permanent_delete': 'y',
        'list': 'l',
        'tag': 't',
        'move': 'm',
        'execute': 'e',
        'set_immutability_policy': 'i',
        'ownership': 'o',
        'permissions': 'p',
    }

    # Service order differs from field order for the last few flags
    _ORDER = 'racwdxyltmeopi'

    @classmethod
    def from_string(cls, value: str) -> 'BlobSasPermissions':
        """
        Parse a permission string such as "rw" or "racwdl".

        Raises:
            ValidationError: If the string contains an unknown letter
        """
        by_letter = {letter: name for name, letter in cls._LETTERS.items()}
        flags = {}

        for letter in value:
            name = by_letter.get(letter)
            if name is None:
                raise ValidationError(
                    f"Unknown blob SAS permission: {letter!r}",
                    "INVALID_PERMISSIONS",
                    {"permissions": value}
                )
            flags[name] = True

        return cls(**flags)

    def __str__(self) -> str:
        enabled = {self._LETTERS[f.name] for f in fields(self) if getattr(self, f.name)}
        return ''.join(letter for letter in self._ORDER if letter in enabled)


@dataclass
class SasSignatureResult:
    """
    Generated SAS with the intermediate values used to produce it

    Attributes:
        query_string: Ready-to-append query string (no leading "?")
        string_to_sign: Exact string that was signed
        parameters: Serialized parameters in wire order, empty ones removed
    """
    query_string: str
    string_to_sign: str
    parameters: Dict[str, str]

    def __post_init__(self):
        """Validate signature result"""
        if not self.query_string:
            raise ValueError("Query string cannot be empty")

        if 'sig' not in self.parameters:
            raise ValueError("Parameters must include a signature")


class SasGenerationError(Exception):
    """
    Error class for SAS generation

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', code='{self.code}', details={self.details})"


class SasErrorCodes:
    """Standard error codes for SAS generation"""

    MISSING_AUTHORIZATION_CONSTRAINT = "MISSING_AUTHORIZATION_CONSTRAINT"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    SIGNING_FAILED = "SIGNING_FAILED"


class MissingAuthorizationConstraint(SasGenerationError):
    """Raised when neither permissions nor a stored access policy identifier is set"""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "Unable to generate SAS: either permissions or an access policy identifier must be set",
            SasErrorCodes.MISSING_AUTHORIZATION_CONSTRAINT,
            details
        )

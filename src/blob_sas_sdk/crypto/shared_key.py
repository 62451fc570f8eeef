"""
Shared key credential for Blob SAS Python SDK

This module provides the storage account shared key credential and the
HMAC-SHA256 primitive used to sign SAS tokens, built on the cryptography
package.
"""

import os
import sys
import base64
import binascii
import platform
from typing import Dict, Optional, Any

# Import cryptography components
try:
    from cryptography.hazmat.primitives import hashes, hmac
    CRYPTOGRAPHY_AVAILABLE = True
except ImportError:
    CRYPTOGRAPHY_AVAILABLE = False

from ..exceptions import CredentialError, UnsupportedPlatformError

ENV_ACCOUNT_NAME = 'BLOB_SAS_ACCOUNT_NAME'
ENV_ACCOUNT_KEY = 'BLOB_SAS_ACCOUNT_KEY'
ENV_CONNECTION_STRING = 'BLOB_SAS_CONNECTION_STRING'


def check_platform_compatibility() -> Dict[str, Any]:
    """
    Check platform compatibility for HMAC-SHA256 signing.

    Returns:
        dict: Compatibility information including cryptography availability
              and platform details
    """
    return {
        'cryptography_available': CRYPTOGRAPHY_AVAILABLE,
        'platform_info': {
            'system': platform.system(),
            'python_version': sys.version,
            'architecture': platform.architecture()[0],
        }
    }


def compute_hmac_sha256(key: bytes, message: bytes) -> bytes:
    """
    Compute an HMAC-SHA256 digest.

    Args:
        key: Raw key bytes
        message: Bytes to authenticate

    Returns:
        bytes: 32-byte digest

    Raises:
        UnsupportedPlatformError: If cryptography is not available
    """
    if not CRYPTOGRAPHY_AVAILABLE:
        raise UnsupportedPlatformError(
            "Cryptography package not available - HMAC signing is not supported",
            "CRYPTOGRAPHY_UNAVAILABLE"
        )

    mac = hmac.HMAC(key, hashes.SHA256())
    mac.update(message)
    return mac.finalize()


class StorageSharedKeyCredential:
    """
    Storage account name and shared key.

    The key is held decoded; it is never included in repr() output.
    """

    def __init__(self, account_name: str, account_key: str):
        """
        Initialize the credential.

        Args:
            account_name: Storage account name
            account_key: Base64-encoded account key

        Raises:
            CredentialError: If the name is empty or the key is not valid base64
        """
        if not account_name:
            raise CredentialError("Account name cannot be empty", "INVALID_ACCOUNT_NAME")

        if not account_key:
            raise CredentialError("Account key cannot be empty", "INVALID_ACCOUNT_KEY")

        try:
            self._key = base64.b64decode(account_key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CredentialError(
                f"Account key is not valid base64: {e}",
                "INVALID_ACCOUNT_KEY",
                {"account_name": account_name}
            )

        self.account_name = account_name

    @classmethod
    def from_connection_string(cls, connection_string: str) -> 'StorageSharedKeyCredential':
        """
        Create a credential from a storage connection string.

        Args:
            connection_string: String such as
                "DefaultEndpointsProtocol=https;AccountName=...;AccountKey=..."

        Returns:
            StorageSharedKeyCredential: Parsed credential

        Raises:
            CredentialError: If AccountName or AccountKey is missing
        """
        settings = {}
        for segment in connection_string.split(';'):
            # Keys end in "=" padding so only split on the first one
            name, separator, value = segment.strip().partition('=')
            if separator:
                settings[name.lower()] = value

        account_name = settings.get('accountname')
        account_key = settings.get('accountkey')

        if not account_name or not account_key:
            raise CredentialError(
                "Connection string must contain AccountName and AccountKey",
                "INVALID_CONNECTION_STRING",
                {"present_settings": sorted(settings.keys())}
            )

        return cls(account_name, account_key)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'StorageSharedKeyCredential':
        """
        Create a credential from environment variables.

        BLOB_SAS_ACCOUNT_NAME and BLOB_SAS_ACCOUNT_KEY take precedence over
        BLOB_SAS_CONNECTION_STRING.

        Raises:
            CredentialError: If no credential is configured
        """
        env = os.environ if environ is None else environ

        account_name = env.get(ENV_ACCOUNT_NAME)
        account_key = env.get(ENV_ACCOUNT_KEY)
        if account_name and account_key:
            return cls(account_name, account_key)

        connection_string = env.get(ENV_CONNECTION_STRING)
        if connection_string:
            return cls.from_connection_string(connection_string)

        raise CredentialError(
            f"No credential configured: set {ENV_ACCOUNT_NAME} and {ENV_ACCOUNT_KEY} "
            f"or {ENV_CONNECTION_STRING}",
            "CREDENTIAL_NOT_CONFIGURED"
        )

    def compute_hmac_sha256(self, string_to_sign: str) -> str:
        """
        Sign a string with the account key.

        Args:
            string_to_sign: Text to sign, encoded as UTF-8

        Returns:
            str: Base64-encoded HMAC-SHA256 signature
        """
        digest = compute_hmac_sha256(self._key, string_to_sign.encode('utf-8'))
        return base64.b64encode(digest).decode('ascii')

    def __repr__(self) -> str:
        return f"StorageSharedKeyCredential(account_name='{self.account_name}')"

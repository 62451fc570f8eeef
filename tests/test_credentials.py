"""
Test suite for the shared key credential
"""

import base64
import hashlib
import hmac
from unittest.mock import patch

import pytest

from blob_sas_sdk import initialize_sdk, is_compatible
from blob_sas_sdk.crypto import (
    StorageSharedKeyCredential,
    check_platform_compatibility,
    compute_hmac_sha256,
)
from blob_sas_sdk.exceptions import CredentialError, UnsupportedPlatformError


RAW_KEY = b"\x00\x01secret-key\xfe\xff"
ACCOUNT_KEY = base64.b64encode(RAW_KEY).decode('ascii')


class TestStorageSharedKeyCredential:
    """Test credential construction and signing"""

    def test_compute_hmac_sha256(self):
        """Test signatures match an independent HMAC-SHA256"""
        credential = StorageSharedKeyCredential("acct", ACCOUNT_KEY)
        message = "line one\nline two ü"

        expected = base64.b64encode(
            hmac.new(RAW_KEY, message.encode('utf-8'), hashlib.sha256).digest()
        ).decode('ascii')

        assert credential.compute_hmac_sha256(message) == expected

    def test_raw_digest(self):
        """Test the low-level primitive returns 32 raw bytes"""
        digest = compute_hmac_sha256(b"key", b"message")
        assert digest == hmac.new(b"key", b"message", hashlib.sha256).digest()
        assert len(digest) == 32

    def test_invalid_base64_key(self):
        """Test malformed keys are rejected"""
        with pytest.raises(CredentialError) as exc_info:
            StorageSharedKeyCredential("acct", "not base64!")
        assert exc_info.value.error_code == "INVALID_ACCOUNT_KEY"

    def test_empty_values(self):
        """Test empty account name or key is rejected"""
        with pytest.raises(CredentialError):
            StorageSharedKeyCredential("", ACCOUNT_KEY)
        with pytest.raises(CredentialError):
            StorageSharedKeyCredential("acct", "")

    def test_repr_hides_key(self):
        """Test the key never appears in repr"""
        credential = StorageSharedKeyCredential("acct", ACCOUNT_KEY)
        assert ACCOUNT_KEY not in repr(credential)
        assert "acct" in repr(credential)

    def test_from_connection_string(self):
        """Test parsing a standard connection string"""
        connection_string = (
            "DefaultEndpointsProtocol=https;AccountName=acct;"
            f"AccountKey={ACCOUNT_KEY};EndpointSuffix=core.windows.net"
        )
        credential = StorageSharedKeyCredential.from_connection_string(connection_string)

        assert credential.account_name == "acct"
        assert credential.compute_hmac_sha256("x") == \
            StorageSharedKeyCredential("acct", ACCOUNT_KEY).compute_hmac_sha256("x")

    def test_connection_string_missing_key(self):
        """Test connection strings without a key are rejected"""
        with pytest.raises(CredentialError) as exc_info:
            StorageSharedKeyCredential.from_connection_string("AccountName=acct")
        assert exc_info.value.error_code == "INVALID_CONNECTION_STRING"

    def test_from_env_name_and_key(self):
        """Test loading from name and key variables"""
        env = {"BLOB_SAS_ACCOUNT_NAME": "acct", "BLOB_SAS_ACCOUNT_KEY": ACCOUNT_KEY}
        assert StorageSharedKeyCredential.from_env(env).account_name == "acct"

    def test_from_env_connection_string(self):
        """Test loading from a connection string variable"""
        env = {"BLOB_SAS_CONNECTION_STRING": f"AccountName=other;AccountKey={ACCOUNT_KEY}"}
        assert StorageSharedKeyCredential.from_env(env).account_name == "other"

    def test_from_env_missing(self):
        """Test an unconfigured environment is reported"""
        with pytest.raises(CredentialError) as exc_info:
            StorageSharedKeyCredential.from_env({})
        assert exc_info.value.error_code == "CREDENTIAL_NOT_CONFIGURED"


class TestPlatformCompatibility:
    """Test platform checks"""

    def test_compatible(self):
        """Test cryptography is detected"""
        assert check_platform_compatibility()['cryptography_available'] is True
        assert initialize_sdk() == {'compatible': True, 'warnings': []}
        assert is_compatible()

    def test_cryptography_unavailable(self):
        """Test signing fails cleanly without cryptography"""
        with patch('blob_sas_sdk.crypto.shared_key.CRYPTOGRAPHY_AVAILABLE', False):
            with pytest.raises(UnsupportedPlatformError):
                compute_hmac_sha256(b"key", b"message")

            result = initialize_sdk()
            assert result['compatible'] is False
            assert result['warnings']

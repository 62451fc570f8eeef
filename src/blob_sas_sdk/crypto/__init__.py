"""
Cryptographic operations for Blob SAS Python SDK
"""

from .shared_key import (
    StorageSharedKeyCredential,
    check_platform_compatibility,
    compute_hmac_sha256,
)

__all__ = [
    'StorageSharedKeyCredential',
    'check_platform_compatibility',
    'compute_hmac_sha256',
]

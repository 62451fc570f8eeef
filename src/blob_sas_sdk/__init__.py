"""
Blob SAS Python SDK
Shared access signature generation for blob storage
"""

from .version import __version__
from .crypto.shared_key import (
    StorageSharedKeyCredential,
    check_platform_compatibility,
)
from .exceptions import (
    BlobSasSDKError,
    ValidationError,
    CredentialError,
    UnsupportedPlatformError,
    ConfigurationError,
)
from .sas import (
    # Builder and signer
    BlobSasBuilder,
    BlobSasSigner,
    create_signer,
    generate_blob_sas,
    # Types
    ApiVersion,
    BlobSasPermissions,
    BlobSasResource,
    SasIpRange,
    SasProtocol,
    SasSignatureResult,
    SasGenerationError,
    SasErrorCodes,
    MissingAuthorizationConstraint,
    # Utilities
    append_sas_to_url,
    build_string_to_sign,
)
from .config import (
    SasConfig,
    DebugConfig,
    load_default_config,
)


def initialize_sdk():
    """
    Initialize the Blob SAS SDK and check platform compatibility.
    
    Returns:
        dict: Compatibility information with 'compatible' (bool) and 'warnings' (list)
    """
    warnings = []
    compatible = True
    
    compat_info = check_platform_compatibility()
    if not compat_info['cryptography_available']:
        warnings.append('Cryptography package not available - SAS signing will fail')
        compatible = False
    
    return {
        'compatible': compatible,
        'warnings': warnings
    }


def is_compatible():
    """
    Quick synchronous compatibility check.
    
    Returns:
        bool: True if platform is compatible with SAS signing
    """
    return initialize_sdk()['compatible']


# Public API exports
__all__ = [
    '__version__',
    'initialize_sdk',
    'is_compatible',
    # Credentials
    'StorageSharedKeyCredential',
    'check_platform_compatibility',
    # Exceptions
    'BlobSasSDKError',
    'ValidationError',
    'CredentialError',
    'UnsupportedPlatformError',
    'ConfigurationError',
    # SAS - Builder and signer
    'BlobSasBuilder',
    'BlobSasSigner',
    'create_signer',
    'generate_blob_sas',
    # SAS - Types
    'ApiVersion',
    'BlobSasPermissions',
    'BlobSasResource',
    'SasIpRange',
    'SasProtocol',
    'SasSignatureResult',
    'SasGenerationError',
    'SasErrorCodes',
    'MissingAuthorizationConstraint',
    # SAS - Utilities
    'append_sas_to_url',
    'build_string_to_sign',
    # Configuration
    'SasConfig',
    'DebugConfig',
    'load_default_config',
]

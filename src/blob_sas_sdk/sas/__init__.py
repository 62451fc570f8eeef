"""
Blob SAS Python SDK - Shared Access Signature Module

Builds, canonicalizes and signs blob service shared access signatures
with a storage account shared key.
"""

from .types import (
    ApiVersion,
    BlobSasPermissions,
    BlobSasResource,
    SasIpRange,
    SasProtocol,
    SasSignatureResult,
    SasGenerationError,
    SasErrorCodes,
    MissingAuthorizationConstraint,
)

from .blob_sas_builder import BlobSasBuilder

from .string_to_sign import (
    STRING_TO_SIGN_FIELDS,
    CanonicalSasFields,
    build_string_to_sign,
    derive_canonical_fields,
    get_canonicalized_resource,
    split_string_to_sign,
)

from .signer import (
    BlobSasSigner,
    create_signer,
    generate_blob_sas,
)

from .utils import (
    append_sas_to_url,
    build_query,
    format_iso8601_zulu,
    to_unix_timestamp,
    url_decode,
)

# Public API exports
__all__ = [
    # Types
    'ApiVersion',
    'BlobSasPermissions',
    'BlobSasResource',
    'SasIpRange',
    'SasProtocol',
    'SasSignatureResult',
    'SasGenerationError',
    'SasErrorCodes',
    'MissingAuthorizationConstraint',
    # Builder
    'BlobSasBuilder',
    # Canonicalization
    'STRING_TO_SIGN_FIELDS',
    'CanonicalSasFields',
    'build_string_to_sign',
    'derive_canonical_fields',
    'get_canonicalized_resource',
    'split_string_to_sign',
    # Signing
    'BlobSasSigner',
    'create_signer',
    'generate_blob_sas',
    # Utilities
    'append_sas_to_url',
    'build_query',
    'format_iso8601_zulu',
    'to_unix_timestamp',
    'url_decode',
]

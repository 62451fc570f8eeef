"""
Blob service SAS signer

This module validates a populated BlobSasBuilder, signs its canonical
string-to-sign with a shared key credential and serializes the resulting
token into a URL query string.
"""

import logging
from typing import Dict, Optional, TYPE_CHECKING

from ..exceptions import BlobSasSDKError
from .blob_sas_builder import BlobSasBuilder
from .string_to_sign import CanonicalSasFields, derive_canonical_fields
from .types import (
    MissingAuthorizationConstraint,
    SasErrorCodes,
    SasGenerationError,
    SasSignatureResult,
)
from .utils import build_query, filter_empty, url_decode

if TYPE_CHECKING:
    from ..config.sas_config import SasConfig
    from ..crypto.shared_key import StorageSharedKeyCredential

logger = logging.getLogger(__name__)


class BlobSasSigner:
    """
    Signer for blob and container SAS tokens

    A signer holds only configuration; it never mutates the builders it
    signs and can be reused.
    """

    def __init__(self, config: Optional['SasConfig'] = None):
        """
        Initialize the signer.

        Args:
            config: Defaults for version and protocol (library defaults if None)
        """
        if config is None:
            from ..config.sas_config import SasConfig
            config = SasConfig()
        self.config = config

    def build(self, builder: BlobSasBuilder, credential: 'StorageSharedKeyCredential') -> str:
        """
        Generate a SAS query string.

        Args:
            builder: Populated SAS builder
            credential: Shared key credential of the storage account

        Returns:
            str: Query string without leading "?"

        Raises:
            MissingAuthorizationConstraint: If neither permissions nor
                identifier is set
            SasGenerationError: If a required field is missing or signing fails
        """
        return self.sign(builder, credential).query_string

    def sign(self, builder: BlobSasBuilder, credential: 'StorageSharedKeyCredential') -> SasSignatureResult:
        """
        Generate a SAS along with the string-to-sign that produced it.

        Args:
            builder: Populated SAS builder
            credential: Shared key credential of the storage account

        Returns:
            SasSignatureResult: Query string, string-to-sign and parameters
        """
        self._validate(builder)

        fields = derive_canonical_fields(
            builder,
            credential.account_name,
            default_version=self.config.default_version,
            default_protocol=self.config.default_protocol,
        )
        string_to_sign = fields.to_string_to_sign()

        logger.debug(
            f"Signing {fields.signed_resource!r} SAS for {fields.canonicalized_resource} "
            f"(version {fields.signed_version})"
        )
        if self.config.debug.log_string_to_sign:
            logger.debug(f"String-to-sign: {string_to_sign!r}")

        signature = self._compute_signature(credential, string_to_sign)

        parameters = self._build_parameters(fields, signature)
        return SasSignatureResult(
            query_string=build_query(parameters),
            string_to_sign=string_to_sign,
            parameters=filter_empty(parameters),
        )

    def _validate(self, builder: BlobSasBuilder) -> None:
        """
        Check required fields before anything is signed.

        Raises:
            MissingAuthorizationConstraint: If neither permissions nor
                identifier is set
            SasGenerationError: If the container name or expiry is missing
        """
        if builder.permissions is None and builder.identifier is None:
            raise MissingAuthorizationConstraint(
                {"container_name": builder.container_name, "blob_name": builder.blob_name}
            )

        missing = []
        if not builder.container_name:
            missing.append('container_name')
        if builder.expires_on is None:
            missing.append('expires_on')

        if missing:
            raise SasGenerationError(
                f"Required SAS fields missing: {', '.join(missing)}",
                SasErrorCodes.MISSING_REQUIRED_FIELD,
                {"missing_fields": missing}
            )

    def _compute_signature(self, credential: 'StorageSharedKeyCredential', string_to_sign: str) -> str:
        """
        Sign the string-to-sign with the credential.

        Returns:
            str: Base64 signature (percent-encoded later, during serialization)

        Raises:
            SasGenerationError: If the credential fails to sign
        """
        try:
            return credential.compute_hmac_sha256(string_to_sign)
        except BlobSasSDKError:
            raise
        except Exception as e:
            raise SasGenerationError(
                f"SAS signing failed: {e}",
                SasErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            )

    def _build_parameters(self, fields: CanonicalSasFields, signature: str) -> Dict[str, Optional[str]]:
        """
        Map canonical fields to SAS query keys in wire order.

        Values are decoded the same way as in the string-to-sign so the
        service receives exactly what was signed.
        """
        return {
            'st': url_decode(fields.signed_start),
            'se': url_decode(fields.signed_expiry),
            'sv': url_decode(fields.signed_version),
            'sr': url_decode(fields.signed_resource),
            'sip': url_decode(fields.signed_ip),
            'sig': signature,
            'spr': url_decode(fields.signed_protocol),
            'sst': url_decode(fields.signed_snapshot_time),
            'sp': url_decode(fields.permissions),
            'si': url_decode(fields.identifier),
            'rscc': url_decode(fields.cache_control),
            'rscd': url_decode(fields.content_disposition),
            'rsce': url_decode(fields.content_encoding),
            'rscl': url_decode(fields.content_language),
            'rsct': url_decode(fields.content_type),
            'ses': url_decode(fields.encryption_scope),
        }


def create_signer(config: Optional['SasConfig'] = None) -> BlobSasSigner:
    """
    Create a new SAS signer.

    Args:
        config: Optional defaults for version and protocol

    Returns:
        BlobSasSigner: Configured signer instance
    """
    return BlobSasSigner(config)


def generate_blob_sas(
    builder: BlobSasBuilder,
    credential: 'StorageSharedKeyCredential',
    config: Optional['SasConfig'] = None
) -> str:
    """
    Generate a SAS query string for a builder.

    Args:
        builder: Populated SAS builder
        credential: Shared key credential
        config: Optional signer defaults

    Returns:
        str: SAS query string
    """
    signer = create_signer(config)
    return signer.build(builder, credential)

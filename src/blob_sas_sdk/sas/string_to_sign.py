"""
String-to-sign construction for blob service shared access signatures

This module derives the canonical form of every SAS constraint and assembles
the newline-separated string the storage service recomputes when it
validates a token.
"""

from dataclasses import dataclass, astuple
from typing import List, Optional

from .blob_sas_builder import BlobSasBuilder
from .types import ApiVersion, SasProtocol
from .utils import format_iso8601_zulu, to_unix_timestamp, url_decode


# Order and count are fixed by the service for the 2020-12-06+ layout
STRING_TO_SIGN_FIELDS = (
    'permissions',
    'signed_start',
    'signed_expiry',
    'canonicalized_resource',
    'identifier',
    'signed_ip',
    'signed_protocol',
    'signed_version',
    'signed_resource',
    'signed_snapshot_time',
    'encryption_scope',
    'cache_control',
    'content_disposition',
    'content_encoding',
    'content_language',
    'content_type',
)


@dataclass(frozen=True)
class CanonicalSasFields:
    """
    Canonical values of every signed SAS field

    Field order matches STRING_TO_SIGN_FIELDS. None marks an absent value.
    """
    permissions: Optional[str]
    signed_start: Optional[str]
    signed_expiry: str
    canonicalized_resource: str
    identifier: Optional[str]
    signed_ip: Optional[str]
    signed_protocol: Optional[str]
    signed_version: str
    signed_resource: str
    signed_snapshot_time: Optional[str]
    encryption_scope: Optional[str]
    cache_control: Optional[str]
    content_disposition: Optional[str]
    content_encoding: Optional[str]
    content_language: Optional[str]
    content_type: Optional[str]

    def to_string_to_sign(self) -> str:
        """
        Join the sixteen fields with newlines.

        Each value is percent-decoded; absent values become empty lines.
        """
        return '\n'.join(url_decode(value) for value in astuple(self))


def get_canonicalized_resource(
    account_name: str,
    container_name: str,
    blob_name: Optional[str] = None
) -> str:
    """
    Build the canonicalized resource path.

    Names are used exactly as supplied, without escaping or case changes.

    Args:
        account_name: Storage account name
        container_name: Container name
        blob_name: Optional blob name

    Returns:
        str: "/blob/{account}/{container}" with "/{blob}" when a blob is set
    """
    resource = f"/blob/{account_name}/{container_name}"

    if blob_name:
        resource += f"/{blob_name}"

    return resource


def derive_canonical_fields(
    builder: BlobSasBuilder,
    account_name: str,
    default_version: Optional[str] = None,
    default_protocol: Optional[SasProtocol] = None
) -> CanonicalSasFields:
    """
    Derive canonical values from a builder without modifying it.

    Args:
        builder: Populated SAS builder
        account_name: Account the resource belongs to
        default_version: Version used when the builder has none
            (ApiVersion.LATEST when this is None too)
        default_protocol: Protocol used when the builder has none

    Returns:
        CanonicalSasFields: Values ready to sign and serialize
    """
    protocol = builder.protocol or default_protocol
    version = builder.version or default_version or ApiVersion.LATEST.value

    return CanonicalSasFields(
        permissions=builder.permissions,
        signed_start=format_iso8601_zulu(builder.starts_on),
        signed_expiry=format_iso8601_zulu(builder.expires_on),
        canonicalized_resource=get_canonicalized_resource(
            account_name, builder.container_name, builder.blob_name
        ),
        identifier=builder.identifier,
        signed_ip=str(builder.ip_range) if builder.ip_range is not None else None,
        signed_protocol=SasProtocol(protocol).value if protocol is not None else None,
        signed_version=version,
        signed_resource=builder.resource_scope.value,
        signed_snapshot_time=to_unix_timestamp(builder.snapshot_time),
        encryption_scope=builder.encryption_scope,
        cache_control=builder.cache_control,
        content_disposition=builder.content_disposition,
        content_encoding=builder.content_encoding,
        content_language=builder.content_language,
        content_type=builder.content_type,
    )


def build_string_to_sign(
    builder: BlobSasBuilder,
    account_name: str,
    default_version: Optional[str] = None,
    default_protocol: Optional[SasProtocol] = None
) -> str:
    """
    Build the string-to-sign for a builder.

    Takes the same defaults as BlobSasSigner so both produce the same string.

    Returns:
        str: Sixteen newline-separated canonical fields
    """
    return derive_canonical_fields(
        builder, account_name, default_version, default_protocol
    ).to_string_to_sign()


def split_string_to_sign(string_to_sign: str) -> List[str]:
    """
    Split a string-to-sign back into its fields, for debugging.

    Returns:
        list: Field values in signing order
    """
    return string_to_sign.split('\n')

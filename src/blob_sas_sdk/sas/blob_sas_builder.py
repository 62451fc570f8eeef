"""
Fluent builder for blob service shared access signatures

The builder only accumulates constraints; validation, canonicalization and
signing happen in BlobSasSigner when build() is called.
"""

from datetime import datetime
from typing import Optional, Union, TYPE_CHECKING

from .types import (
    BlobSasPermissions,
    BlobSasResource,
    SasIpRange,
    SasProtocol,
)

if TYPE_CHECKING:
    from ..crypto.shared_key import StorageSharedKeyCredential


class BlobSasBuilder:
    """
    Builder for blob and container SAS tokens with fluent API
    """

    def __init__(self):
        self.container_name: Optional[str] = None
        self.blob_name: Optional[str] = None
        self.expires_on: Optional[datetime] = None
        self.starts_on: Optional[datetime] = None
        self.permissions: Optional[str] = None
        self.identifier: Optional[str] = None
        self.ip_range: Optional[SasIpRange] = None
        self.protocol: Optional[SasProtocol] = None
        self.version: Optional[str] = None
        self.snapshot_time: Optional[datetime] = None
        self.cache_control: Optional[str] = None
        self.content_disposition: Optional[str] = None
        self.content_encoding: Optional[str] = None
        self.content_language: Optional[str] = None
        self.content_type: Optional[str] = None
        self.encryption_scope: Optional[str] = None

    @classmethod
    def new(cls) -> 'BlobSasBuilder':
        """Create an empty builder."""
        return cls()

    @property
    def resource_scope(self) -> BlobSasResource:
        """Blob when a blob name is set, container otherwise."""
        return BlobSasResource.BLOB if self.blob_name else BlobSasResource.CONTAINER

    def set_container_name(self, value: str) -> 'BlobSasBuilder':
        """
        Set the container the SAS grants access to.

        Args:
            value: Container name, used literally in the signed resource

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.container_name = value
        return self

    def set_blob_name(self, value: str) -> 'BlobSasBuilder':
        """
        Set the blob name, narrowing the SAS to a single blob.

        Args:
            value: Blob name, used literally in the signed resource

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.blob_name = value
        return self

    def set_expires_on(self, value: datetime) -> 'BlobSasBuilder':
        """
        Set the expiry time of the SAS.

        Args:
            value: Expiry; timezone-aware values are converted to UTC

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.expires_on = value
        return self

    def set_starts_on(self, value: datetime) -> 'BlobSasBuilder':
        """
        Set the time the SAS becomes valid.

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.starts_on = value
        return self

    def set_permissions(self, value: Union[str, BlobSasPermissions]) -> 'BlobSasBuilder':
        """
        Set the granted permissions.

        Args:
            value: Permission letters such as "rw", or BlobSasPermissions

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.permissions = str(value)
        return self

    def set_identifier(self, value: str) -> 'BlobSasBuilder':
        """
        Reference a stored access policy on the container.

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.identifier = value
        return self

    def set_ip_range(self, value: SasIpRange) -> 'BlobSasBuilder':
        self.ip_range = value
        return self

    def set_protocol(self, value: SasProtocol) -> 'BlobSasBuilder':
        self.protocol = value
        return self

    def set_version(self, value: str) -> 'BlobSasBuilder':
        """
        Set the signed service version.

        Defaults to ApiVersion.LATEST when left unset.

        Returns:
            BlobSasBuilder: Self for method chaining
        """
        self.version = value
        return self

    def set_snapshot_time(self, value: datetime) -> 'BlobSasBuilder':
        self.snapshot_time = value
        return self

    def set_cache_control(self, value: str) -> 'BlobSasBuilder':
        self.cache_control = value
        return self

    def set_content_disposition(self, value: str) -> 'BlobSasBuilder':
        self.content_disposition = value
        return self

    def set_content_encoding(self, value: str) -> 'BlobSasBuilder':
        self.content_encoding = value
        return self

    def set_content_language(self, value: str) -> 'BlobSasBuilder':
        self.content_language = value
        return self

    def set_content_type(self, value: str) -> 'BlobSasBuilder':
        self.content_type = value
        return self

    def set_encryption_scope(self, value: str) -> 'BlobSasBuilder':
        self.encryption_scope = value
        return self

    def build(self, credential: 'StorageSharedKeyCredential') -> str:
        """
        Sign the accumulated constraints.

        Args:
            credential: Shared key credential of the storage account

        Returns:
            str: SAS query string without leading "?"

        Raises:
            MissingAuthorizationConstraint: If neither permissions nor
                identifier is set
        """
        from .signer import BlobSasSigner

        return BlobSasSigner().build(self, credential)

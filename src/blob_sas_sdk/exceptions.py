"""
Exception classes for Blob SAS Python SDK
"""

from typing import Optional, Dict, Any


class BlobSasSDKError(Exception):
    """Base exception for all Blob SAS SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(BlobSasSDKError):
    """Exception raised for validation failures"""
    pass


class CredentialError(BlobSasSDKError):
    """Exception raised for malformed account keys or connection strings"""
    pass


class UnsupportedPlatformError(BlobSasSDKError):
    """Exception raised when platform features are not supported"""
    pass


class ConfigurationError(BlobSasSDKError):
    """Exception raised for configuration loading and validation errors"""
    pass

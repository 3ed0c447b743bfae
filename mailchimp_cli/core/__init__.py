"""
Core layer - Raw types and HTTP client.

This layer provides:
- Credential parsing and request construction
- Low-level HTTP client with auth and error handling
- Typed dataclasses for File Manager and campaign responses
"""

from mailchimp_cli.core.client import (
    APIClient,
    CLIError,
    ConfigError,
    DecodeError,
    NotFoundError,
    TransportError,
    ValidationError,
    build_request,
    derive_server_prefix,
)
from mailchimp_cli.core.types import Campaign, FileRecord, PaginatedResponse, PreparedRequest

__all__ = [
    "APIClient",
    "CLIError",
    "Campaign",
    "ConfigError",
    "DecodeError",
    "FileRecord",
    "NotFoundError",
    "PaginatedResponse",
    "PreparedRequest",
    "TransportError",
    "ValidationError",
    "build_request",
    "derive_server_prefix",
]

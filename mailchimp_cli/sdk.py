"""
Mailchimp SDK - High-level client with nice ergonomics.

This layer provides a clean interface for the supported Mailchimp operations.
Built on top of the core APIClient.
"""

import base64
from pathlib import Path
from typing import Any

from mailchimp_cli.core.client import APIClient, NotFoundError, ValidationError

FILES_PATH = "file-manager/files"
CAMPAIGNS_PATH = "campaigns"


def _check_page_args(count: int, offset: int) -> None:
    for name, value in (("count", count), ("offset", offset)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"{name} must be a non-negative integer", details={name: value})


class MailchimpClient:
    """
    High-level Mailchimp API client.

    Example:
        client = MailchimpClient()  # reads MAILCHIMP_API_KEY

        uploaded = client.files.upload("banner.png")
        recent = client.files.list(count=20)
        campaigns = client.campaigns.list()

    All methods return the decoded JSON response unchanged. Mailchimp error
    documents (``{"status": 404, "title": ...}``) are returned, not raised.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the Mailchimp client.

        Args:
            api_key: Mailchimp API key (or MAILCHIMP_API_KEY env var)
            timeout: Request timeout in seconds (or MAILCHIMP_TIMEOUT env var)

        """
        self._client = APIClient(api_key=api_key, timeout=timeout)

        # Sub-clients for different domains
        self.files = FileManagerOperations(self._client)
        self.campaigns = CampaignOperations(self._client)

    @property
    def server_prefix(self) -> str:
        """Get the data center prefix of the configured key."""
        return self._client.server_prefix


# =============================================================================
# File Manager Operations
# =============================================================================


class FileManagerOperations:
    """Operations on the File Manager content store."""

    def __init__(self, client: APIClient):
        self._client = client

    def upload(self, file_path: str | Path, name: str | None = None) -> Any:
        """
        Upload a local file to the File Manager.

        Args:
            file_path: Path to the file on disk
            name: Stored file name (defaults to the file's basename)

        Returns:
            Decoded response, normally the stored file's metadata (id, full_size_url, ...)

        Raises:
            NotFoundError: If the file does not exist

        """
        path = Path(file_path)
        if not path.is_file():
            raise NotFoundError(f"File not found: {file_path}", details={"path": str(file_path)})

        file_data = base64.b64encode(path.read_bytes()).decode("ascii")
        return self._client.post(FILES_PATH, {"name": name or path.name, "file_data": file_data})

    def list(self, count: int = 100, offset: int = 0) -> Any:
        """
        List files, most recently added first.

        Args:
            count: Maximum number of results
            offset: Pagination offset

        Returns:
            Decoded response, normally {"files": [...], "total_items": N}

        """
        _check_page_args(count, offset)
        return self._client.get(
            FILES_PATH,
            {"count": count, "sort_field": "added_date", "sort_dir": "DESC", "offset": offset},
        )


# =============================================================================
# Campaign Operations
# =============================================================================


class CampaignOperations:
    """Operations on email campaigns."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self, count: int = 10, offset: int = 0) -> Any:
        """
        List campaigns, most recently created first.

        Args:
            count: Maximum number of results
            offset: Pagination offset

        Returns:
            Decoded response, normally {"campaigns": [...], "total_items": N}

        """
        _check_page_args(count, offset)
        return self._client.get(
            CAMPAIGNS_PATH,
            {"count": count, "sort_field": "create_time", "sort_dir": "DESC", "offset": offset},
        )

"""
Core HTTP client for the Mailchimp Marketing API.

Handles credential parsing, request construction, dispatch and response decoding.
"""

import base64
import http.client
import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from mailchimp_cli.core.types import PreparedRequest

# Configuration
API_URL_TEMPLATE = "https://{server_prefix}.api.mailchimp.com/3.0/"
DEFAULT_TIMEOUT = 60
SUPPORTED_METHODS = ("GET", "POST")

# Mailchimp ignores the username half of the basic auth pair
AUTH_USERNAME = "anystring"

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """Base error class for CLI errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigError(CLIError):
    """Missing or malformed credential."""


class NotFoundError(CLIError):
    """A local file could not be found."""


class TransportError(CLIError):
    """Network, TLS or timeout failure before a response was received."""


class DecodeError(CLIError):
    """Response body is not valid JSON."""


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


# =============================================================================
# Request building
# =============================================================================


def derive_server_prefix(credential: str | None) -> str:
    """
    Extract the data center prefix from a ``<key>-<server-prefix>`` credential.

    Raises:
        ConfigError: If the credential is empty or not exactly two hyphen-delimited parts

    """
    if not credential:
        raise ConfigError("credential not set")
    parts = credential.split("-")
    if len(parts) != 2 or not all(parts):
        raise ConfigError("invalid credential format")
    return parts[1]


def build_url(path: str, credential: str | None) -> str:
    """Build full URL from path."""
    if urllib.parse.urlsplit(path).scheme.lower() == "https":
        return path
    base_url = API_URL_TEMPLATE.format(server_prefix=derive_server_prefix(credential))
    return f"{base_url}{path.lstrip('/')}"


def build_auth_header(credential: str) -> str:
    """Basic auth header value carrying the credential as the password."""
    token = base64.b64encode(f"{AUTH_USERNAME}:{credential}".encode()).decode("ascii")
    return f"Basic {token}"


def encode_body(body: Any) -> bytes | None:
    """Encode a request body: strings pass through, empty bodies are dropped, the rest is JSON."""
    if isinstance(body, bytes):
        return body or None
    if isinstance(body, str):
        return body.encode("utf-8") if body else None
    if body is None or body == {} or body == []:
        return None
    return json.dumps(body).encode("utf-8")


def build_request(
    path: str,
    method: str = "GET",
    body: Any = None,
    credential: str | None = None,
) -> PreparedRequest:
    """
    Turn a (path, method, body) triple into an authenticated request.

    Args:
        path: Endpoint relative to /3.0/ (e.g. file-manager/files) or an absolute https URL
        method: HTTP method (GET or POST)
        body: Request payload (str, bytes, or anything JSON serializable)
        credential: Mailchimp API key in ``<key>-<server-prefix>`` form

    Returns:
        PreparedRequest ready to send

    Raises:
        ConfigError: On a missing or malformed credential
        ValidationError: On an unsupported method

    """
    if not credential:
        raise ConfigError("credential not set")

    method = method.upper()
    if method not in SUPPORTED_METHODS:
        raise ValidationError(
            f"Unsupported HTTP method: {method}",
            details={"supported": list(SUPPORTED_METHODS)},
        )

    return PreparedRequest(
        url=build_url(path, credential),
        method=method,
        headers={
            "Authorization": build_auth_header(credential),
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        payload=encode_body(body),
    )


def decode_response(raw: bytes) -> Any:
    """Parse a response body as JSON."""
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(
            f"Invalid JSON response: {e}",
            details={"body": raw[:200].decode("utf-8", "replace")},
        ) from e


# =============================================================================
# Client
# =============================================================================


class APIClient:
    """
    Low-level HTTP client for the Mailchimp Marketing API.

    Handles:
    - Authentication via API key (basic auth)
    - Host routing from the key's server prefix
    - GET and POST requests with JSON bodies
    - Response decoding

    Non-2xx responses are not treated as errors: the JSON error document
    Mailchimp returns is handed back to the caller like any other response.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the API client.

        Args:
            api_key: Mailchimp API key (or MAILCHIMP_API_KEY env var)
            timeout: Request timeout in seconds (or MAILCHIMP_TIMEOUT env var)

        """
        self.api_key = api_key or os.environ.get("MAILCHIMP_API_KEY")
        if timeout is None:
            env_timeout = os.environ.get("MAILCHIMP_TIMEOUT") or DEFAULT_TIMEOUT
            try:
                timeout = float(env_timeout)
            except ValueError:
                raise ConfigError(f"Invalid MAILCHIMP_TIMEOUT: {env_timeout!r}")
        self.timeout = timeout

    def _ensure_api_key(self) -> str:
        """Ensure API key is configured."""
        if not self.api_key:
            raise ConfigError("credential not set")
        return self.api_key

    @property
    def server_prefix(self) -> str:
        """Data center the configured key routes to (e.g. us18)."""
        return derive_server_prefix(self._ensure_api_key())

    def build_request(self, path: str, method: str = "GET", body: Any = None) -> PreparedRequest:
        """Build an authenticated request using the configured key."""
        return build_request(path, method, body, self._ensure_api_key())

    def send(self, request: PreparedRequest) -> Any:
        """
        Send a prepared request and decode the JSON response.

        Args:
            request: Request built by build_request()

        Returns:
            Parsed JSON response, whatever the HTTP status

        Raises:
            TransportError: On connection, TLS or timeout failures
            DecodeError: On a missing, truncated or non-JSON body

        """
        req = urllib.request.Request(
            request.url,
            data=request.payload,
            headers=request.headers,
            method=request.method,
        )
        logger.debug("%s %s", request.method, request.url)

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                status = response.status
                raw = response.read()

        except urllib.error.HTTPError as e:
            # Mailchimp reports API errors as JSON documents; pass them through
            status = e.code
            try:
                raw = e.read()
            except http.client.IncompleteRead as read_error:
                raise DecodeError(f"Truncated response body: {read_error}") from read_error
            except (http.client.HTTPException, OSError) as read_error:
                raise TransportError(
                    f"Connection error while reading error response: {read_error}",
                    details={"url": request.url, "status": status},
                ) from read_error
            finally:
                e.close()

        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}", details={"url": request.url}) from e

        except TimeoutError as e:
            raise TransportError(
                f"Request timed out after {self.timeout} seconds",
                details={"url": request.url},
            ) from e

        except http.client.IncompleteRead as e:
            raise DecodeError(f"Truncated response body: {e}") from e

        except (http.client.HTTPException, OSError) as e:
            raise TransportError(f"Connection error: {e}", details={"url": request.url}) from e

        logger.debug("%s %s -> %s (%d bytes)", request.method, request.url, status, len(raw))
        return decode_response(raw)

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def request(self, path: str, method: str = "GET", body: Any = None) -> Any:
        """Build and send a request in one step."""
        return self.send(self.build_request(path, method, body))

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request."""
        if params:
            # Filter out None values and URL-encode
            filtered_params = {k: v for k, v in params.items() if v is not None}
            if filtered_params:
                query_string = urllib.parse.urlencode(filtered_params)
                separator = "&" if "?" in path else "?"
                path = f"{path}{separator}{query_string}"
        return self.request(path, "GET")

    def post(self, path: str, body: Any = None) -> Any:
        """Make a POST request."""
        return self.request(path, "POST", body)

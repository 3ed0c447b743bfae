"""Tests for the high-level MailchimpClient operations."""

import base64
import json
import os
import urllib.parse

import pytest

from mailchimp_cli import MailchimpClient
from mailchimp_cli.core.client import ConfigError, NotFoundError, TransportError, ValidationError


def query_of(url: str) -> dict[str, str]:
    return dict(urllib.parse.parse_qsl(urllib.parse.urlsplit(url).query))


# =============================================================================
# Upload
# =============================================================================


class TestUpload:
    """File Manager uploads."""

    def test_upload_posts_base64_content(self, api_key, transport, tmp_path):
        path = tmp_path / "banner.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
        transport.respond({"id": 1234, "name": "banner.png", "full_size_url": "https://cdn.example/banner.png"})

        result = MailchimpClient().files.upload(path)

        assert result["id"] == 1234
        req = transport.last
        assert req.full_url == "https://us18.api.mailchimp.com/3.0/file-manager/files"
        assert req.get_method() == "POST"
        body = json.loads(req.data)
        assert body == {"name": "banner.png", "file_data": base64.b64encode(b"\x89PNG\r\n\x1a\nfake").decode()}

    def test_upload_accepts_str_path_and_name_override(self, api_key, transport, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        transport.respond({"id": 1})

        MailchimpClient().files.upload(str(path), name="renamed.txt")

        assert json.loads(transport.last.data)["name"] == "renamed.txt"

    def test_upload_empty_file(self, api_key, transport, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_bytes(b"")
        transport.respond({"id": 2})

        MailchimpClient().files.upload(path)

        assert json.loads(transport.last.data) == {"name": "empty.txt", "file_data": ""}

    def test_missing_file_fails_before_network(self, api_key, transport, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            MailchimpClient().files.upload(tmp_path / "nope.png")
        assert transport.requests == []
        assert exc_info.value.details["path"].endswith("nope.png")

    def test_missing_file_checked_before_credential(self, no_api_key, transport, tmp_path):
        with pytest.raises(NotFoundError):
            MailchimpClient().files.upload(tmp_path / "nope.png")

    def test_directory_is_not_a_file(self, api_key, transport, tmp_path):
        with pytest.raises(NotFoundError):
            MailchimpClient().files.upload(tmp_path)
        assert transport.requests == []

    def test_upload_without_credential(self, no_api_key, transport, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("a")
        with pytest.raises(ConfigError):
            MailchimpClient().files.upload(path)
        assert transport.requests == []


# =============================================================================
# Listing
# =============================================================================


class TestListFiles:
    def test_defaults(self, api_key, transport):
        transport.respond({"files": [], "total_items": 0})

        assert MailchimpClient().files.list() == {"files": [], "total_items": 0}

        url = transport.last.full_url
        assert url == (
            "https://us18.api.mailchimp.com/3.0/file-manager/files"
            "?count=100&sort_field=added_date&sort_dir=DESC&offset=0"
        )
        assert transport.last.get_method() == "GET"

    def test_count_and_offset(self, api_key, transport):
        transport.respond({"files": [], "total_items": 0})
        MailchimpClient().files.list(count=5, offset=20)
        assert query_of(transport.last.full_url) == {
            "count": "5",
            "sort_field": "added_date",
            "sort_dir": "DESC",
            "offset": "20",
        }

    @pytest.mark.parametrize("kwargs", [{"count": -1}, {"offset": -5}, {"count": "10"}, {"count": True}])
    def test_invalid_page_args(self, api_key, transport, kwargs):
        with pytest.raises(ValidationError):
            MailchimpClient().files.list(**kwargs)
        assert transport.requests == []


class TestListCampaigns:
    def test_defaults(self, api_key, transport):
        transport.respond({"campaigns": [], "total_items": 0})

        MailchimpClient().campaigns.list()

        assert transport.last.full_url == (
            "https://us18.api.mailchimp.com/3.0/campaigns?count=10&sort_field=create_time&sort_dir=DESC&offset=0"
        )

    def test_zero_count_allowed(self, api_key, transport):
        transport.respond({"campaigns": [], "total_items": 12})
        MailchimpClient().campaigns.list(count=0, offset=3)
        assert query_of(transport.last.full_url)["count"] == "0"
        assert query_of(transport.last.full_url)["offset"] == "3"

    def test_api_error_is_returned(self, api_key, transport):
        problem = {"title": "API Key Invalid", "status": 401, "detail": "Your API key may be invalid."}
        transport.respond(problem, status=401)
        assert MailchimpClient().campaigns.list() == problem

    def test_transport_error_propagates(self, api_key, transport):
        transport.fail(ConnectionRefusedError(111, "Connection refused"))
        with pytest.raises(TransportError):
            MailchimpClient().campaigns.list()


class TestClientConfig:
    def test_explicit_key(self, no_api_key):
        assert MailchimpClient(api_key="abc-us7").server_prefix == "us7"

    def test_server_prefix_without_key(self, no_api_key):
        with pytest.raises(ConfigError):
            MailchimpClient().server_prefix


# =============================================================================
# Live API (optional)
# =============================================================================


@pytest.mark.skipif(not os.environ.get("MAILCHIMP_API_KEY"), reason="MAILCHIMP_API_KEY required")
class TestLiveAPI:
    """Read-only smoke tests against the real API."""

    def test_list_files(self):
        result = MailchimpClient().files.list(count=1)
        assert "files" in result or "status" in result

    def test_list_campaigns(self):
        result = MailchimpClient().campaigns.list(count=1)
        assert "campaigns" in result or "status" in result

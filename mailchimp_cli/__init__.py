"""
Mailchimp CLI - Three-layer architecture for the Mailchimp Marketing API.

Layers:
- core: Request construction, HTTP client and error types
- sdk: High-level MailchimpClient with nice ergonomics
- cli: Opinionated command-line interface
"""

from mailchimp_cli.sdk import MailchimpClient

__version__ = "0.1.0"
__all__ = ["MailchimpClient"]

"""
Mailchimp CLI - Opinionated command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- Interactive file prompts
- TTY detection for human vs machine output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import find_dotenv, load_dotenv

from mailchimp_cli.core.client import CLIError, ValidationError
from mailchimp_cli.core.types import Campaign, FileRecord, PaginatedResponse
from mailchimp_cli.sdk import MailchimpClient

# =============================================================================
# Output Helpers
# =============================================================================


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (LLM/machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: CLIError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    # Header
    header_line = "  ".join(h.ljust(w) if i < len(widths) else h for i, (h, w) in enumerate(zip(headers, widths)))
    print(header_line)
    print("-" * len(header_line))

    # Rows
    for row in rows:
        row_line = "  ".join(
            str(v)[:w].ljust(w) if i < len(widths) else str(v) for i, (v, w) in enumerate(zip(row, widths))
        )
        print(row_line)


def is_api_error(result: Any) -> bool:
    """Check for a Mailchimp problem document, e.g. {"status": 401, "title": "API Key Invalid"}."""
    if not isinstance(result, dict):
        return False
    status = result.get("status")
    return isinstance(status, int) and status >= 400 and "title" in result


def api_error_output(result: dict[str, Any]) -> None:
    """Print a Mailchimp error document and exit."""
    if is_tty():
        print(f"Error {result['status']}: {result.get('title')}", file=sys.stderr)
        if result.get("detail"):
            print(result["detail"], file=sys.stderr)
    else:
        json_output(result)
    sys.exit(1)


# =============================================================================
# CLI Commands
# =============================================================================


def prompt_for_path() -> str:
    """Ask for a file path on an interactive terminal."""
    if not sys.stdin.isatty():
        raise ValidationError("File path required (no terminal to prompt on)")
    path = input("File to upload: ").strip()
    if not path:
        raise ValidationError("File path required")
    return path


def cmd_files_upload(client: MailchimpClient, args: argparse.Namespace) -> None:
    """Upload a file to the File Manager."""
    try:
        path = args.path or prompt_for_path()
        result = client.files.upload(path, name=args.name)
        if is_api_error(result):
            api_error_output(result)

        if is_tty():
            print(f"Uploaded: {result.get('name')}")
            print(f"ID: {result.get('id')}")
            print(f"URL: {result.get('full_size_url')}")
        else:
            success_output(result)
    except CLIError as e:
        error_output(e)


def cmd_files_list(client: MailchimpClient, args: argparse.Namespace) -> None:
    """List recently added files."""
    try:
        result = client.files.list(count=args.count, offset=args.offset)
        if is_api_error(result):
            api_error_output(result)

        if is_tty():
            page = PaginatedResponse.from_response(result, "files", FileRecord.from_dict, offset=args.offset)
            if not page.items:
                print("No files found.")
                return

            table_output(
                ["ID", "Name", "Type", "Size", "Added"],
                [
                    [
                        str(f.id),
                        f.name[:40],
                        f.type or "",
                        str(f.size or ""),
                        (f.created_at or "")[:19],
                    ]
                    for f in page.items
                ],
                [12, 40, 8, 10, 19],
            )

            if page.has_more:
                print(f"\nShowing {len(page.items)} of {page.total_items} files")
        else:
            success_output(result)
    except CLIError as e:
        error_output(e)


def cmd_campaigns_list(client: MailchimpClient, args: argparse.Namespace) -> None:
    """List recently created campaigns."""
    try:
        result = client.campaigns.list(count=args.count, offset=args.offset)
        if is_api_error(result):
            api_error_output(result)

        if is_tty():
            page = PaginatedResponse.from_response(result, "campaigns", Campaign.from_dict, offset=args.offset)
            if not page.items:
                print("No campaigns found.")
                return

            table_output(
                ["ID", "Title", "Status", "Sent", "Created"],
                [
                    [
                        c.id,
                        (c.title or "(untitled)")[:40],
                        c.status or "",
                        str(c.emails_sent),
                        (c.create_time or "")[:19],
                    ]
                    for c in page.items
                ],
                [10, 40, 10, 8, 19],
            )

            if page.has_more:
                print(f"\nShowing {len(page.items)} of {page.total_items} campaigns")
        else:
            success_output(result)
    except CLIError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def non_negative_int(value: str) -> int:
    """argparse type for count/offset."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mc",
        description="Mailchimp CLI - Command-line interface for the Mailchimp Marketing API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration:
  MAILCHIMP_API_KEY   API key in <key>-<server-prefix> form (e.g. abc123-us18)
  MAILCHIMP_TIMEOUT   Request timeout in seconds (default 60)
  A .env file in the working directory is loaded automatically.

Output Modes:
  TTY (human):  Pretty tables
  Pipe (LLM):   Raw JSON response

Examples:
  mc files upload banner.png
  mc files list --count 20 | jq '.files[].full_size_url'
  mc campaigns list --offset 10
""",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Files ==========
    files = subparsers.add_parser("files", help="Manage File Manager files")
    files.set_defaults(func=lambda _c, _a: files.print_help())
    files_sub = files.add_subparsers(dest="subcommand")

    f_upload = files_sub.add_parser("upload", help="Upload a file")
    f_upload.add_argument("path", nargs="?", help="File to upload (prompted for when omitted)")
    f_upload.add_argument("--name", "-n", help="Stored file name (defaults to the basename)")
    f_upload.set_defaults(func=cmd_files_upload)

    f_list = files_sub.add_parser("list", help="List recently added files")
    f_list.add_argument("--count", "-c", type=non_negative_int, default=100, help="Max results (default 100)")
    f_list.add_argument("--offset", "-o", type=non_negative_int, default=0, help="Offset for pagination")
    f_list.set_defaults(func=cmd_files_list)

    # ========== Campaigns ==========
    campaigns = subparsers.add_parser("campaigns", help="Browse campaigns")
    campaigns.set_defaults(func=lambda _c, _a: campaigns.print_help())
    campaigns_sub = campaigns.add_subparsers(dest="subcommand")

    c_list = campaigns_sub.add_parser("list", help="List recently created campaigns")
    c_list.add_argument("--count", "-c", type=non_negative_int, default=10, help="Max results (default 10)")
    c_list.add_argument("--offset", "-o", type=non_negative_int, default=0, help="Offset for pagination")
    c_list.set_defaults(func=cmd_campaigns_list)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # stdout is reserved for command output
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    # basicConfig is a no-op when the root logger is already configured
    logging.getLogger("mailchimp_cli").setLevel(level)

    try:
        client = MailchimpClient()
    except CLIError as e:
        error_output(e)

    # Run command (all subparsers have default funcs that print help)
    args.func(client, args)


if __name__ == "__main__":
    main()

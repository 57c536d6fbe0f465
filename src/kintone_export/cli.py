"""
Command-line entry point.

Exports the records of one kintone app as CSV or JSON to stdout, a file,
or an S3 bucket.
"""

import argparse
import io
import logging
import sys
from getpass import getpass
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from kintone_export import __version__
from kintone_export.core.config import ExportConfig, Settings
from kintone_export.core.exceptions import KintoneExportError
from kintone_export.core.logging import setup_logging
from kintone_export.services.encoding import ENCODINGS
from kintone_export.services.export_service import ExportService
from kintone_export.services.kintone_client import KintoneClient
from kintone_export.services.storage_service import StorageConfig, StorageService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Options left off the command line are absent from the parsed namespace,
    so environment values apply only where no flag was given.
    """
    parser = argparse.ArgumentParser(
        prog="kintone-export",
        description="Export kintone app records as CSV or JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        argument_default=argparse.SUPPRESS,
        epilog="""
Examples:
  # Export every field as CSV using an API token
  kintone-export -d example -a 12 -t $TOKEN > records.csv

  # Export selected fields as Shift_JIS, saving attachments
  kintone-export -d example -a 12 -u admin -c "name,files" -e sjis -b ./files

  # Export raw records as JSON
  kintone-export -d example -a 12 -t $TOKEN -o json -q 'status in ("open")'

Environment:
  KINTONE_DOMAIN, KINTONE_APP_ID, KINTONE_API_TOKEN, KINTONE_LOGIN,
  KINTONE_PASSWORD, KINTONE_BASIC_AUTH_USER, KINTONE_BASIC_AUTH_PASSWORD,
  KINTONE_GUEST_SPACE_ID. Set KINTONE_TO_S3_BUCKETNAME to upload the
  export to S3 instead of writing it out.
        """,
    )

    # Connection
    parser.add_argument("-d", dest="domain", help="Domain name, e.g. example.cybozu.com")
    parser.add_argument("-a", dest="app_id", type=int, help="App ID")
    parser.add_argument("-g", dest="guest_space_id", type=int, help="Guest space ID")

    # Authentication
    parser.add_argument("-t", dest="api_token", help="API token")
    parser.add_argument("-u", dest="login", help="Login name")
    parser.add_argument("-p", dest="password", help="Password")
    parser.add_argument("-U", dest="basic_auth_user", help="Basic authentication user")
    parser.add_argument("-P", dest="basic_auth_password", help="Basic authentication password")

    # Export
    parser.add_argument(
        "-o", dest="output_format", choices=("csv", "json"), help="Output format (default: csv)"
    )
    parser.add_argument("-q", dest="query", help="Query string")
    parser.add_argument("-c", dest="fields", help="Field codes, comma separated")
    parser.add_argument(
        "-e", dest="encoding", choices=tuple(ENCODINGS), help="Character encoding (default: utf-8)"
    )
    parser.add_argument("-b", dest="attachment_dir", help="Attachment download directory")

    # Output
    parser.add_argument("--output", help="Write the export to this file instead of stdout")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default: INFO)")
    parser.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit JSON logs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def prompt_passwords(settings: Settings) -> Settings:
    """Ask for passwords that are needed but were not given."""
    updates: dict[str, Any] = {}
    if not settings.api_token and settings.login and settings.password is None:
        updates["password"] = getpass("Password: ")
    if settings.basic_auth_user and settings.basic_auth_password is None:
        updates["basic_auth_password"] = getpass("Basic authentication password: ")
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def run_export(settings: Settings, config: ExportConfig, output: Optional[str]) -> int:
    """
    Run one export and deliver the result.

    Returns:
        Number of records exported

    Raises:
        KintoneExportError: If the export or the upload fails
        OSError: If the output file cannot be written
    """
    with KintoneClient.from_settings(settings) as client:
        service = ExportService(client, config)

        if settings.upload_enabled:
            buffer = io.BytesIO()
            count = service.export(buffer)
            storage = StorageService(StorageConfig.from_settings(settings))
            storage.upload_bytes(buffer.getvalue(), settings.s3_object_key)
        elif output:
            with open(output, "wb") as fo:
                count = service.export(fo)
        else:
            count = service.export(sys.stdout.buffer)

    return count


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point; returns the process exit status."""
    parser = build_parser()
    args = vars(parser.parse_args(argv))
    output = args.pop("output", None)

    try:
        settings = Settings(**args)
    except ValidationError as e:
        parser.print_usage(sys.stderr)
        print(f"kintone-export: invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    if not settings.domain or not settings.app_id or not settings.has_credentials:
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    settings = prompt_passwords(settings)

    try:
        config = ExportConfig.from_settings(settings)
        run_export(settings, config, output)
    except ValidationError as e:
        logger.error(f"Invalid export configuration: {e}")
        return EXIT_USAGE
    except KintoneExportError as e:
        logger.error(f"Export failed: {e.message}", extra=e.to_dict())
        return EXIT_FAILURE
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

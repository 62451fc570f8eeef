"""
Command-line interface for Blob SAS Python SDK
Generates container and blob shared access signatures from the shell
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote

from . import initialize_sdk, __version__
from .config import SasConfig
from .crypto.shared_key import StorageSharedKeyCredential
from .exceptions import BlobSasSDKError
from .sas import (
    STRING_TO_SIGN_FIELDS,
    BlobSasBuilder,
    BlobSasSigner,
    SasGenerationError,
    SasIpRange,
    SasProtocol,
    append_sas_to_url,
    split_string_to_sign,
)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='blob-sas',
        description='Generate shared access signatures for blob storage containers and blobs'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Blob SAS Python SDK {__version__}'
    )

    parser.add_argument(
        '--check-compatibility',
        action='store_true',
        help='Check platform compatibility and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_generate_parser(subparsers)

    return parser


def setup_generate_parser(subparsers):
    """Setup SAS generation subcommand."""
    generate_parser = subparsers.add_parser('generate', help='Generate a container or blob SAS')

    credential_group = generate_parser.add_argument_group('credential')
    credential_group.add_argument(
        '--account-name',
        help='Storage account name (default: BLOB_SAS_ACCOUNT_NAME)'
    )
    credential_group.add_argument(
        '--account-key',
        help='Base64 account key (default: BLOB_SAS_ACCOUNT_KEY)'
    )
    credential_group.add_argument(
        '--connection-string',
        help='Storage connection string (default: BLOB_SAS_CONNECTION_STRING)'
    )

    generate_parser.add_argument('--container', required=True, help='Container name')
    generate_parser.add_argument('--blob', help='Blob name (issues a blob SAS instead of a container SAS)')
    generate_parser.add_argument('--permissions', help='Permission letters, e.g. "r" or "racwdl"')
    generate_parser.add_argument('--identifier', help='Stored access policy identifier')

    expiry_group = generate_parser.add_mutually_exclusive_group()
    expiry_group.add_argument('--expiry', help='Expiry time (ISO 8601)')
    expiry_group.add_argument(
        '--expires-in',
        type=int,
        help='Lifetime in seconds from now (default: configured TTL)'
    )

    generate_parser.add_argument('--start', help='Start time (ISO 8601)')
    generate_parser.add_argument('--ip', help='Allowed IP address or range "start-end"')
    generate_parser.add_argument(
        '--protocol',
        choices=[p.value for p in SasProtocol],
        help='Allowed protocol(s)'
    )
    generate_parser.add_argument('--sas-version', help='Signed service version')
    generate_parser.add_argument('--snapshot', help='Snapshot time (ISO 8601)')
    generate_parser.add_argument('--cache-control', help='Cache-Control response override')
    generate_parser.add_argument('--content-disposition', help='Content-Disposition response override')
    generate_parser.add_argument('--content-encoding', help='Content-Encoding response override')
    generate_parser.add_argument('--content-language', help='Content-Language response override')
    generate_parser.add_argument('--content-type', help='Content-Type response override')
    generate_parser.add_argument('--encryption-scope', help='Encryption scope')

    generate_parser.add_argument('--config', help='JSON configuration file (default: environment)')
    generate_parser.add_argument(
        '--url',
        action='store_true',
        help='Print the full resource URL instead of the query string'
    )
    generate_parser.add_argument(
        '--endpoint',
        help='Blob service endpoint (default: https://<account>.blob.core.windows.net)'
    )
    generate_parser.add_argument(
        '--show-string-to-sign',
        action='store_true',
        help='Print the signed fields to stderr'
    )


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, accepting a trailing "Z".

    Raises:
        argparse.ArgumentTypeError: If the value cannot be parsed
    """
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 timestamp: {value!r}")


def load_credential(args) -> StorageSharedKeyCredential:
    """Resolve the credential from arguments, falling back to the environment."""
    if args.connection_string:
        return StorageSharedKeyCredential.from_connection_string(args.connection_string)
    if args.account_name and args.account_key:
        return StorageSharedKeyCredential(args.account_name, args.account_key)
    return StorageSharedKeyCredential.from_env()


def build_resource_url(account_name: str, container: str, blob: Optional[str],
                       endpoint: Optional[str] = None) -> str:
    """Build the container or blob URL a SAS applies to."""
    base = (endpoint or f"https://{account_name}.blob.core.windows.net").rstrip('/')
    url = f"{base}/{quote(container)}"
    if blob:
        url += f"/{quote(blob)}"
    return url


def populate_builder(args, config: SasConfig) -> BlobSasBuilder:
    """Translate generate arguments into a SAS builder."""
    builder = BlobSasBuilder.new().set_container_name(args.container)

    if args.expiry:
        builder.set_expires_on(parse_datetime(args.expiry))
    else:
        ttl = args.expires_in if args.expires_in is not None else config.default_ttl_seconds
        if ttl <= 0:
            raise argparse.ArgumentTypeError(f"--expires-in must be a positive number of seconds, got {ttl}")
        builder.set_expires_on(datetime.now(timezone.utc) + timedelta(seconds=ttl))

    optional_setters = [
        (args.blob, builder.set_blob_name),
        (args.permissions, builder.set_permissions),
        (args.identifier, builder.set_identifier),
        (args.sas_version, builder.set_version),
        (args.cache_control, builder.set_cache_control),
        (args.content_disposition, builder.set_content_disposition),
        (args.content_encoding, builder.set_content_encoding),
        (args.content_language, builder.set_content_language),
        (args.content_type, builder.set_content_type),
        (args.encryption_scope, builder.set_encryption_scope),
    ]
    for value, setter in optional_setters:
        if value is not None:
            setter(value)

    if args.start:
        builder.set_starts_on(parse_datetime(args.start))
    if args.snapshot:
        builder.set_snapshot_time(parse_datetime(args.snapshot))
    if args.ip:
        builder.set_ip_range(SasIpRange.parse(args.ip))
    if args.protocol:
        builder.set_protocol(SasProtocol(args.protocol))

    return builder


def handle_generate_command(args) -> int:
    """Handle SAS generation."""
    try:
        config = SasConfig.from_file(args.config) if args.config else SasConfig.from_env()
        credential = load_credential(args)
        builder = populate_builder(args, config)

        result = BlobSasSigner(config).sign(builder, credential)

        if args.show_string_to_sign:
            values = split_string_to_sign(result.string_to_sign)
            for name, value in zip(STRING_TO_SIGN_FIELDS, values):
                print(f"  {name}: {value}", file=sys.stderr)

        if args.url:
            url = build_resource_url(credential.account_name, args.container, args.blob, args.endpoint)
            print(append_sas_to_url(url, result.query_string))
        else:
            print(result.query_string)

        return 0

    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except SasGenerationError as e:
        print(f"SAS generation error: {e}", file=sys.stderr)
        return 1
    except BlobSasSDKError as e:
        print(f"Error [{e.error_code}]: {e}", file=sys.stderr)
        return 1


def main(argv=None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        if args.check_compatibility:
            result = initialize_sdk()
            if result['compatible']:
                print("✓ Platform is compatible with Blob SAS SDK")
                return 0
            else:
                print("✗ Platform is not compatible with Blob SAS SDK")
                for warning in result['warnings']:
                    print(f"  Error: {warning}")
                return 1

        if args.command == 'generate':
            return handle_generate_command(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())

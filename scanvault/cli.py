"""Command-line interface for running and administering ScanVault.

Subcommands:
    serve         run the HTTP API
    create-user   register an account
    scan          ingest a local scan file for a user and print the document
"""

import argparse
import getpass
import json
import mimetypes
import sys
from pathlib import Path

from scanvault.errors import MissingFile, NotFound, ScanVaultError
from scanvault.pipeline.ingestion import UploadedFile
from scanvault.services import build_services
from scanvault.storage.repositories import Document
from scanvault.utils.config import load_config
from scanvault.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def create_user(username: str, password: str, config_path: Path | None = None) -> None:
    """Register ``username`` in the configured database."""
    services = build_services(load_config(config_path))
    try:
        services.sessions.register(username, password)
    finally:
        services.database.dispose()


def scan_file(
    file_path: Path,
    username: str,
    title: str | None = None,
    config_path: Path | None = None,
) -> Document:
    """Run the ingestion pipeline on a local file on behalf of ``username``.

    Args:
        file_path: Scan image or PDF to ingest.
        username: Owner of the new document; must be a registered user.
        title: Document title; defaults to the file name.
        config_path: Alternative configuration file.

    Returns:
        The stored document.
    """
    logger.info("Ingesting %s for %s", file_path, username)
    services = build_services(load_config(config_path))
    try:
        if services.sessions.credentials.users.get(username) is None:
            raise NotFound(f"Unknown user: {username}")
        try:
            data = file_path.read_bytes()
        except OSError as exc:
            raise MissingFile(f"Cannot read {file_path}: {exc.strerror}") from exc
        content_type, _ = mimetypes.guess_type(file_path.name)
        upload = UploadedFile(
            filename=file_path.name, data=data, content_type=content_type
        )
        return services.pipeline.scan(username, upload, title)
    finally:
        services.database.dispose()


def _document_json(document: Document) -> str:
    return json.dumps(
        {
            "id": document.id,
            "owner": document.owner,
            "title": document.title,
            "content": document.content,
            "fileRef": document.file_ref,
        },
        indent=2,
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="ScanVault document service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="Path to config YAML")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    user_parser = subparsers.add_parser("create-user", help="Register a user")
    user_parser.add_argument("username")
    user_parser.add_argument(
        "--password", help="Password (prompted for when omitted)"
    )

    scan_parser = subparsers.add_parser("scan", help="Ingest a local scan file")
    scan_parser.add_argument("file", type=Path, help="Image or PDF to ingest")
    scan_parser.add_argument("-u", "--user", required=True, help="Owner username")
    scan_parser.add_argument("-t", "--title", help="Document title")

    args = parser.parse_args(argv)

    setup_logging(load_config(args.config).log_level)

    if args.command == "serve":
        from scanvault.main import main as serve

        serve(host=args.host, port=args.port, config_path=args.config)
    elif args.command == "create-user":
        password = args.password or getpass.getpass("Password: ")
        if not password:
            print("Error: password must not be empty", file=sys.stderr)
            sys.exit(1)
        try:
            create_user(args.username, password, args.config)
        except ScanVaultError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        print(f"User {args.username} registered")
    elif args.command == "scan":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            document = scan_file(args.file, args.user, args.title, args.config)
        except ScanVaultError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        print(_document_json(document))
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()

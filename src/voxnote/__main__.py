"""voxnote command-line entry point.

Usage:
    python -m voxnote [OPTIONS] COMMAND

Commands:
    list [--refresh]   Show notes
    save TEXT...       Save a note (reads stdin when TEXT is omitted)
    delete ID          Delete a note
    sync               Push locally saved notes to the server
    ping               Check whether the notes API is reachable
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from . import __version__
from .app import NotesApp, create_app
from .config import VoxnoteConfig
from .config.loader import load_config
from .notes import Note, NoteEvent, ValidationError, resolve_owner


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="voxnote",
        description="voxnote - offline-resilient voice notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m voxnote list
  python -m voxnote --owner me@example.com save "buy milk"
  python -m voxnote --local-backend sync

Environment:
  VOXNOTE_BASE_URL, VOXNOTE_OWNER, VOXNOTE_MONGO_URI, VOXNOTE_LOG_LEVEL
""",
    )

    parser.add_argument("--config", type=Path, metavar="PATH", help="Path to YAML config file")
    parser.add_argument("--profile", help="Configuration profile to use (dev, prod)")
    parser.add_argument("--owner", help="Signed-in identity (defaults to anonymous)")
    parser.add_argument("--base-url", help="Notes API base URL")
    parser.add_argument(
        "--local-backend",
        action="store_true",
        help="Serve the notes API in-process from MongoDB instead of calling a server",
    )
    parser.add_argument("--mongo-uri", help="MongoDB URI for --local-backend")
    parser.add_argument("--log-level", help="Logging level override")
    parser.add_argument(
        "--version",
        action="version",
        version=f"voxnote v{__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="Show notes")
    list_cmd.add_argument("--refresh", action="store_true", help="Bypass the cache")

    save_cmd = commands.add_parser("save", help="Save a note")
    save_cmd.add_argument("text", nargs="*", help="Note text (stdin when omitted)")

    delete_cmd = commands.add_parser("delete", help="Delete a note")
    delete_cmd.add_argument("id", help="Note identifier")

    commands.add_parser("sync", help="Push locally saved notes to the server")
    commands.add_parser("ping", help="Check whether the notes API is reachable")

    return parser.parse_args(argv)


def format_note(note: Note) -> str:
    """Render a note as a single line."""
    marker = " (pending)" if note.is_local else ""
    stamp = note.created_at.strftime("%Y-%m-%d %H:%M")
    return f"{note.id}  {stamp}  {note.content}{marker}"


def print_event(event: NoteEvent) -> None:
    """Show user-facing notifications on stderr."""
    if event.message:
        print(event.message, file=sys.stderr)


def run_command(args: argparse.Namespace, app: NotesApp, owner: str) -> int:
    """Run the selected command.

    Returns:
        Exit code
    """
    logger = logging.getLogger("voxnote")

    if args.command == "ping":
        reachable = app.remote.probe_reachability()
        print("online" if reachable else "offline")
        return 0

    if args.command == "sync":
        report = app.sync.sync(owner)
        if not report.attempted:
            print("No local notes to sync")
        return 0

    if args.command == "list":
        for note in app.facade.get_all(owner, force_refresh=args.refresh):
            print(format_note(note))
        return 0

    if args.command == "save":
        text = " ".join(args.text) if args.text else sys.stdin.read()
        try:
            note = app.facade.save(owner, text)
        except ValidationError as e:
            logger.error("%s", e)
            return 1
        print(format_note(note))
        return 0

    if args.command == "delete":
        app.facade.delete(owner, args.id)
        print(f"Deleted {args.id}")
        return 0

    logger.error("Unknown command: %s", args.command)
    return 1


def _apply_cli_overrides(config: VoxnoteConfig, args: argparse.Namespace) -> None:
    if args.owner:
        config.owner = args.owner
    if args.base_url:
        config.remote.base_url = args.base_url
    if args.mongo_uri:
        config.backend.mongo_uri = args.mongo_uri
    if args.log_level:
        config.logging.level = args.log_level


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    load_dotenv()
    args = parse_args(argv)

    try:
        config = load_config(path=args.config, profile=args.profile)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    _apply_cli_overrides(config, args)

    setup_logging(config.logging.level)
    logger = logging.getLogger("voxnote")
    owner = resolve_owner(config.owner)

    storage = None
    transport = None
    if args.local_backend:
        from .api import NotesApi
        from .storage import MongoStorageClient

        storage = MongoStorageClient(
            uri=config.backend.mongo_uri,
            database_name=config.backend.database,
            server_selection_timeout_ms=config.backend.server_selection_timeout_ms,
        )
        try:
            storage.connect()
        except PyMongoError as e:
            logger.error("Cannot start local backend: %s", e)
            return 1
        transport = NotesApi(storage.notes).transport()
        config.remote.base_url = "http://voxnote.local"

    try:
        with create_app(config, transport=transport) as app:
            app.events.subscribe(print_event)
            if config.sync.on_startup and args.command not in ("sync", "ping"):
                app.sync.handle_session(owner)
            return run_command(args, app, owner)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        if storage is not None:
            storage.disconnect()


if __name__ == "__main__":
    sys.exit(main())

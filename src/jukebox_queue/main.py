#!/usr/bin/env python3
"""Command-line entry point for the jukebox queue.

Each subcommand reads one JSON request (from a file, or ``-`` for stdin),
runs it against the configured queue and store, and prints the JSON reply.
Background work (enqueues, store links, credential refreshes) is drained
before the process exits.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jukebox_queue.domain.shared.exceptions import DomainError
from jukebox_queue.domain.shared.messages import LogTemplates
from jukebox_queue.utils.logging import setup_logging

if TYPE_CHECKING:
    from jukebox_queue.config.container import Container
    from jukebox_queue.config.settings import Settings

logger = logging.getLogger(__name__)

SUBMISSION_COMMANDS = ("queue-songs", "submit-playlist")
CATALOG_COMMANDS = ("search", "playlists", "devices")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jukebox-queue",
        description="Submit songs to vote-ordered project queues.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s queue-songs songs.json        # Queue songs from a request file
  %(prog)s submit-playlist - < req.json  # Import a playlist, request on stdin
  %(prog)s devices devices.json          # List playback devices
  %(prog)s pending "Friday Mix"          # Count jobs waiting on a topic
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="override LOG_LEVEL from the environment",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("queue-songs", "queue individually submitted songs"),
        ("submit-playlist", "import a catalog playlist as a new project"),
        ("search", "search the catalog"),
        ("playlists", "list a user's playlists"),
        ("devices", "list playback devices"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("request", help="JSON request file, or - for stdin")

    pending = subparsers.add_parser("pending", help="count pending jobs on a topic")
    pending.add_argument("topic", help="project name")

    return parser


def read_request(source: str) -> Any:
    """Load a JSON request body. Raises ``ValueError`` on unparseable input."""
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")
    return json.loads(text)


async def dispatch(container: Container, args: argparse.Namespace) -> tuple[dict[str, Any], bool]:
    """Run one subcommand. Returns the reply and whether it succeeded."""
    if args.command == "pending":
        count = await container.job_queue.pending_count(args.topic)
        return {"topic": args.topic, "pending": count}, True

    request = read_request(args.request)

    if args.command in SUBMISSION_COMMANDS:
        orchestrator = container.submission_orchestrator
        if args.command == "queue-songs":
            result = await orchestrator.queue_songs(request)
        else:
            result = await orchestrator.submit_playlist(request)
        return result.to_payload(), result.is_success

    catalog = container.catalog_service
    if args.command == "search":
        reply = await catalog.search(request)
    elif args.command == "playlists":
        reply = await catalog.user_playlists(request)
    else:
        reply = await catalog.list_devices(request)
    return reply, "msg" not in reply


async def run(settings: Settings, args: argparse.Namespace) -> int:
    from jukebox_queue.config.container import create_container

    container = create_container(settings)
    await container.initialize()
    try:
        reply, ok = await dispatch(container, args)
    finally:
        await container.shutdown()

    print(json.dumps(reply, indent=2, ensure_ascii=False))
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    from jukebox_queue.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    logger.debug(LogTemplates.APP_STARTING.format(environment=settings.environment))

    try:
        return asyncio.run(run(settings, args))
    except KeyboardInterrupt:
        return 130
    except (OSError, ValueError) as e:
        logger.error(LogTemplates.FATAL_ERROR, e)
        return 2
    except DomainError as e:
        logger.error(LogTemplates.FATAL_ERROR, e.message)
        return 1
    except Exception as e:
        logger.exception(LogTemplates.FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover

"""
Application Commands

Request models for the submission and catalog operations. Each is parsed
from a raw JSON body with ``parse_command`` before any I/O.
"""

from jukebox_queue.application.commands.base import parse_command
from jukebox_queue.application.commands.catalog import (
    ListDevicesCommand,
    SearchCommand,
    UserPlaylistsCommand,
)
from jukebox_queue.application.commands.queue_songs import QueueSongsCommand
from jukebox_queue.application.commands.submit_playlist import SubmitPlaylistCommand

__all__ = [
    "parse_command",
    # Submission
    "QueueSongsCommand",
    "SubmitPlaylistCommand",
    # Catalog
    "SearchCommand",
    "UserPlaylistsCommand",
    "ListDevicesCommand",
]

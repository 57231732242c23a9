"""
Tests for main.py - Command-line Entry Point

Tests for:
- Argument parsing
- Request loading from files and stdin
- Dispatch to the orchestrator and catalog proxy
- Exit codes and error handling
"""

import io
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jukebox_queue.config.settings import QueueSettings, Settings
from jukebox_queue.domain.shared.exceptions import QueueError
from jukebox_queue.main import build_parser, dispatch, main, read_request


@pytest.fixture
def inline_settings():
    return Settings(queue=QueueSettings(mode="inline"))


@pytest.fixture
def _no_logging_setup():
    with patch("jukebox_queue.main.setup_logging"):
        yield


class TestParser:
    def test_subcommands(self):
        args = build_parser().parse_args(["queue-songs", "req.json"])
        assert args.command == "queue-songs"
        assert args.request == "req.json"

    def test_pending_takes_topic(self):
        args = build_parser().parse_args(["pending", "Friday Mix"])
        assert args.topic == "Friday Mix"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestReadRequest:
    def test_from_file(self, tmp_path):
        path = tmp_path / "req.json"
        path.write_text(json.dumps({"songs": []}), encoding="utf-8")

        assert read_request(str(path)) == {"songs": []}

    def test_from_stdin(self):
        with patch("sys.stdin", io.StringIO('{"search": "x"}')):
            assert read_request("-") == {"search": "x"}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "req.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError):
            read_request(str(path))


class TestDispatch:
    @pytest.mark.asyncio
    async def test_pending(self):
        container = MagicMock()
        container.job_queue.pending_count = AsyncMock(return_value=3)
        args = build_parser().parse_args(["pending", "Friday Mix"])

        reply, ok = await dispatch(container, args)

        assert reply == {"topic": "Friday Mix", "pending": 3}
        assert ok is True

    @pytest.mark.asyncio
    async def test_devices_error_is_not_ok(self, tmp_path):
        path = tmp_path / "req.json"
        path.write_text("{}", encoding="utf-8")
        container = MagicMock()
        container.catalog_service.list_devices = AsyncMock(
            return_value={"msg": "access_token undefined"}
        )
        args = build_parser().parse_args(["devices", str(path)])

        reply, ok = await dispatch(container, args)

        assert reply == {"msg": "access_token undefined"}
        assert ok is False


@pytest.mark.usefixtures("_no_logging_setup")
class TestMain:
    def test_queue_songs_end_to_end(
        self, inline_settings, tmp_path, capsys, make_track, friday_mix
    ):
        path = tmp_path / "req.json"
        path.write_text(
            json.dumps({"songs": [{**make_track("A", 1), "project": friday_mix}]}),
            encoding="utf-8",
        )

        with patch("jukebox_queue.config.settings.get_settings", return_value=inline_settings):
            code = main(["queue-songs", str(path)])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"status": "accepted", "issued": 1}

    def test_rejected_request_exit_code(self, inline_settings, tmp_path, capsys):
        path = tmp_path / "req.json"
        path.write_text(json.dumps({"device": "d"}), encoding="utf-8")

        with patch("jukebox_queue.config.settings.get_settings", return_value=inline_settings):
            code = main(["queue-songs", str(path)])

        assert code == 1
        assert "msg" in json.loads(capsys.readouterr().out)

    def test_missing_request_file(self, inline_settings, tmp_path):
        with patch("jukebox_queue.config.settings.get_settings", return_value=inline_settings):
            code = main(["queue-songs", str(tmp_path / "missing.json")])

        assert code == 2

    def test_domain_error_exit_code(self, inline_settings):
        with (
            patch("jukebox_queue.config.settings.get_settings", return_value=inline_settings),
            patch(
                "jukebox_queue.main.run",
                new=AsyncMock(side_effect=QueueError("Queue unavailable: refused")),
            ),
        ):
            code = main(["pending", "P"])

        assert code == 1

    def test_unexpected_error_exit_code(self, inline_settings):
        with (
            patch("jukebox_queue.config.settings.get_settings", return_value=inline_settings),
            patch("jukebox_queue.main.run", new=AsyncMock(side_effect=RuntimeError("boom"))),
        ):
            code = main(["pending", "P"])

        assert code == 1

    def test_log_level_override(self, inline_settings):
        with (
            patch("jukebox_queue.config.settings.get_settings", return_value=inline_settings),
            patch("jukebox_queue.main.setup_logging") as mock_setup,
            patch("jukebox_queue.main.run", new=AsyncMock(return_value=0)),
        ):
            main(["--log-level", "DEBUG", "pending", "P"])

        mock_setup.assert_called_once_with("DEBUG")

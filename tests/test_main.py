import asyncio
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from reportcord import main
from reportcord.cog.commands.report_cmds import ReportCommandsCog
from reportcord.cog.listener.decision_listener import DecisionListenerCog
from reportcord.cog.listener.events_listener import EventsListenerCog
from reportcord.cog.listener.reaction_listener import ReactionListenerCog


class FakeBot:
    def __init__(self, start_error: BaseException | None = None) -> None:
        self._start = AsyncMock(side_effect=start_error)
        self._close = AsyncMock()
        self._closed = False

    async def start(self, token: str) -> None:
        await self._start(token)

    def is_closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        self._closed = True
        await self._close()


def test_resolve_base_dir_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("REPORTCORD_HOME", str(tmp_path))

    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_compiled(tmp_path, monkeypatch):
    monkeypatch.delenv("REPORTCORD_HOME", raising=False)
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "reportcord.exe")])

    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_source(monkeypatch):
    monkeypatch.delenv("REPORTCORD_HOME", raising=False)
    monkeypatch.setattr(sys, "frozen", False, raising=False)
    monkeypatch.setattr(sys, "compiled", False, raising=False)

    assert main.resolve_base_dir() == main.Path(main.__file__).resolve().parents[2]


def test_load_environment_requires_token(monkeypatch):
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        main.load_environment()

    assert exc_info.value.code == 1


def test_load_environment_returns_token(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "secret")

    assert main.load_environment() == "secret"


def test_build_intents_enables_content_and_reactions():
    intents = main.build_intents()

    assert intents.message_content is True
    assert intents.reactions is True
    assert intents.guilds is True


def test_build_report_services_share_one_store(report_settings):
    services = main.build_report_services(SimpleNamespace(), report_settings)

    assert services.lifecycle.store is services.store
    assert services.decisions.store is services.store
    assert services.lifecycle.snapshotter.timeout_seconds == report_settings.attachment_timeout_seconds
    assert len(services.deduplicator) == 0


def test_load_cogs_registers_every_cog(report_settings):
    bot = SimpleNamespace(add_cog=MagicMock(), user=None)
    services = main.build_report_services(bot, report_settings)

    main.load_cogs(bot, services, report_settings)

    registered = {type(call.args[0]) for call in bot.add_cog.call_args_list}
    assert registered == {EventsListenerCog, ReportCommandsCog, ReactionListenerCog, DecisionListenerCog}


@pytest.mark.asyncio
async def test_async_main_clean_shutdown(monkeypatch):
    bot = FakeBot(start_error=asyncio.CancelledError())
    monkeypatch.setattr(main, "load_environment", lambda: "token")
    monkeypatch.setattr(main, "create_bot", lambda settings: bot)

    assert await main.async_main() == 0

    bot._start.assert_awaited_once_with("token")
    bot._close.assert_awaited_once()


@pytest.mark.asyncio
async def test_async_main_rejected_token(monkeypatch):
    bot = FakeBot(start_error=discord.LoginFailure("Improper token has been passed."))
    monkeypatch.setattr(main, "load_environment", lambda: "token")
    monkeypatch.setattr(main, "create_bot", lambda settings: bot)

    assert await main.async_main() == 1
    bot._close.assert_awaited_once()


@pytest.mark.asyncio
async def test_async_main_initialization_failure(monkeypatch):
    monkeypatch.setattr(main, "load_environment", lambda: "token")
    monkeypatch.setattr(main, "create_bot", MagicMock(side_effect=RuntimeError("no bot")))

    assert await main.async_main() == 1


def test_main_maps_system_exit_to_code(monkeypatch):
    def fake_run(coro):
        coro.close()
        raise SystemExit(1)

    monkeypatch.setattr(main.asyncio, "run", fake_run)

    assert main.main() == 1


def test_main_handles_keyboard_interrupt(monkeypatch):
    def fake_run(coro):
        coro.close()
        raise KeyboardInterrupt

    monkeypatch.setattr(main.asyncio, "run", fake_run)

    assert main.main() == 0

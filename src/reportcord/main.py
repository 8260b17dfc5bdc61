"""
Reportcord
==========

A Discord bot that lets members report messages to the moderation team through
a message command or a report reaction, and lets moderators restore or remove
the reported message.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.
    Resolution order:
    1. REPORTCORD_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("REPORTCORD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
from dataclasses import dataclass

import discord
from dotenv import load_dotenv

# Load .env before the configuration module reads environment overrides
load_dotenv(dotenv_path=BASE_DIR / ".env")

from reportcord.configuration.app_configuration import app_config
from reportcord.configuration.report_settings import ReportSettings
from reportcord.reports.attachment_snapshotter import AttachmentSnapshotter
from reportcord.reports.decision_handler import DecisionHandler
from reportcord.reports.report_lifecycle import ReportLifecycleManager
from reportcord.reports.report_store import ReportStore
from reportcord.reports.trigger_deduplicator import TriggerDeduplicator
from reportcord.util.logger import get_logger, handle_exception


logger = get_logger("main")


@dataclass
class ReportServices:
    """Report workflow objects shared by the cogs for the lifetime of the process."""

    store: ReportStore
    deduplicator: TriggerDeduplicator
    lifecycle: ReportLifecycleManager
    decisions: DecisionHandler


def load_environment() -> str:
    """Return the Discord bot token from the environment.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Construct the Discord intents the report workflow needs.

    Message content is required to snapshot reported messages; reactions drive
    the reaction trigger.
    """
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.messages = True
    intents.reactions = True
    return intents


def build_report_services(bot: discord.Bot, settings: ReportSettings) -> ReportServices:
    """Construct the store, deduplicator and workflow objects for one bot instance."""
    store = ReportStore()
    snapshotter = AttachmentSnapshotter(timeout_seconds=settings.attachment_timeout_seconds)
    return ReportServices(
        store=store,
        deduplicator=TriggerDeduplicator(),
        lifecycle=ReportLifecycleManager(bot, store, snapshotter, settings),
        decisions=DecisionHandler(bot, store, settings),
    )


def load_cogs(bot: discord.Bot, services: ReportServices, settings: ReportSettings) -> None:
    """Register all cogs with the provided Discord bot instance."""
    from reportcord.cog.commands import report_cmds
    from reportcord.cog.listener import decision_listener, events_listener, reaction_listener

    events_listener.setup(bot, settings)
    report_cmds.setup(bot, services.lifecycle)
    reaction_listener.setup(bot, services.lifecycle, services.deduplicator, settings)
    decision_listener.setup(bot, services.decisions)

    logger.info("All cogs loaded successfully.")


def create_bot(settings: ReportSettings) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs.

    When ``command_guild_ids`` is configured the report command is registered
    only in those guilds, which makes it available immediately; otherwise it is
    registered globally.
    """
    debug_guilds = settings.command_guild_ids or None
    bot = discord.Bot(intents=build_intents(), debug_guilds=debug_guilds)
    load_cogs(bot, build_report_services(bot, settings), settings)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def async_main() -> int:
    """Bootstrap the bot and run it until disconnect, returning an exit code."""
    token = load_environment()
    settings = app_config.reports

    try:
        bot = create_bot(settings)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the bot token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        if not bot.is_closed():
            await bot.close()
        logger.info("Shutdown complete.")

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Reportcord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())

"""
Wardcord
========
A Discord bot that mutes and unmutes members on moderator command, checks
role seniority before acting and echoes every action to the server's
feedback channels.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. WARDCORD_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("WARDCORD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio

import discord
from dotenv import load_dotenv

from wardcord.configuration.app_configuration import app_config
from wardcord.database.db_connection import db_connection
from wardcord.moderation.audit_logger import AuditLogger
from wardcord.moderation.moderation_pipeline import ModerationPipeline
from wardcord.settings.guild_settings_manager import guild_settings_manager
from wardcord.util.logger import get_logger, handle_exception

logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Guild and member intents; member lookups rely on the member cache."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot) -> ModerationPipeline:
    """Register every cog and return the pipeline the moderation cog uses."""
    from wardcord.bot.cogs import events_listener, guild_settings_cmds, moderation_cmds

    pipeline = moderation_cmds.create_pipeline(discord_bot_instance)
    moderation_cmds.setup(discord_bot_instance, pipeline)
    guild_settings_cmds.setup(discord_bot_instance)
    events_listener.setup(discord_bot_instance)
    logger.info("All cogs loaded successfully.")
    return pipeline


def create_bot() -> tuple[discord.Bot, AuditLogger]:
    """Instantiate the Discord bot, register all cogs and return the audit logger to drain on exit."""
    bot = discord.Bot(intents=build_intents())
    pipeline = load_cogs(bot)
    return bot, pipeline.audit_logger


async def start_bot(bot: discord.Bot, token: str) -> None:
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None = None, audit_logger: AuditLogger | None = None) -> None:
    """Close the bot, flush queued audit records and settings writes, then close the database."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord client: %s", exc)

    if audit_logger is not None:
        await audit_logger.drain()

    try:
        await guild_settings_manager.shutdown()
    except Exception as exc:
        logger.exception("Error during guild settings shutdown: %s", exc)

    await db_connection.close()
    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap the database and the bot, returning an exit code."""
    token = load_environment()

    try:
        logger.info("Initializing database and loading guild settings...")
        await guild_settings_manager.async_init(app_config.database_path)
    except Exception as exc:
        logger.critical("Failed to initialize database: %s", exc)
        return 1

    try:
        bot, audit_logger = create_bot()
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        await shutdown_runtime()
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, audit_logger)
    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Wardcord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc, exc_info=exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())

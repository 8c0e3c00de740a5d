"""The Ping Manager bot.

Lowers a CRCON server's max ping autokick threshold on a schedule and restores
it afterwards, with a Discord status message for operators.
"""

from __future__ import annotations

import logging

import aiohttp

from .api import CRCONClient
from .bot import PingManagerBot, async_login_with_retry
from .coordinator import PingManagerCoordinator
from .dispatcher import CommandDispatcher
from .exceptions import StartupError
from .settings import Settings
from .storage import PingConfigStore

_LOGGER = logging.getLogger(__name__)


async def async_run(settings: Settings) -> None:
    """Run the bot until the Discord connection closes.

    Raises:
        StartupError: If login fails or the startup sequence aborts.
    """
    async with aiohttp.ClientSession() as session:
        client = CRCONClient(session, settings.crcon_server, settings.crcon_api_key)
        store = PingConfigStore(settings.config_file)
        bot = PingManagerBot(settings.channel_id)
        coordinator = PingManagerCoordinator(client, store, bot)
        bot.attach(coordinator, CommandDispatcher(coordinator))

        try:
            await async_login_with_retry(bot, settings.discord_token)
            await bot.connect()
        finally:
            await coordinator.async_shutdown()
            if not bot.is_closed():
                await bot.close()

    if bot.startup_error is not None:
        if isinstance(bot.startup_error, StartupError):
            raise bot.startup_error
        error = bot.startup_error
        raise StartupError(f"Startup failed: {error}") from error

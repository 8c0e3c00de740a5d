"""Discord presentation layer for the Ping Manager bot."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
from typing import TYPE_CHECKING, Any

import aiohttp
import discord

from .const import (
    CHANNEL_HISTORY_LIMIT,
    COLOR_RUNNING,
    COLOR_STOPPED,
    COMMAND_AUTO,
    COMMAND_DURATION,
    COMMAND_INTERVAL,
    COMMAND_START,
    COMMAND_STOP,
    COMMAND_TARGET,
    LOGIN_RETRIES,
    LOGIN_RETRY_DELAY,
    NAME,
)
from .exceptions import StartupError, ValidationError
from .models import Affordances, PingConfig

if TYPE_CHECKING:
    from .coordinator import PingManagerCoordinator
    from .dispatcher import CommandDispatcher

_LOGGER = logging.getLogger(__name__)

# command -> (modal title, input label)
MODAL_PROMPTS: dict[str, tuple[str, str]] = {
    COMMAND_INTERVAL: ("Set Interval", "Interval in minutes (e.g., 15)"),
    COMMAND_DURATION: ("Set Duration", "Duration in seconds (e.g., 5)"),
    COMMAND_TARGET: ("Set Target Ping", "Target ping in ms (e.g., 180)"),
}


def build_status_embed(config: PingConfig) -> discord.Embed:
    """Return the status embed for a configuration."""
    embed = discord.Embed(
        title=NAME,
        color=COLOR_RUNNING if config.is_running else COLOR_STOPPED,
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(
        name="Status", value="Running" if config.is_running else "Stopped", inline=False
    )
    embed.add_field(
        name="Interval", value=f"{config.interval_minutes} minutes", inline=False
    )
    embed.add_field(
        name="Duration", value=f"{config.duration_seconds} seconds", inline=False
    )
    embed.add_field(
        name="Target Ping", value=f"{config.target_threshold}ms", inline=False
    )
    embed.add_field(
        name="Auto Mode",
        value="Enabled" if config.auto_mode else "Disabled",
        inline=False,
    )
    return embed


async def async_send_command_reply(
    interaction: discord.Interaction,
    dispatcher: CommandDispatcher,
    command: str,
    payload: Any = None,
) -> None:
    """Run a command and answer the operator privately."""
    await interaction.response.defer(ephemeral=True, thinking=True)
    try:
        reply = await dispatcher.async_handle(command, payload)
    except ValidationError as err:
        reply = str(err)
    except Exception as err:
        _LOGGER.exception("Error handling command %s", command)
        reply = f"Error: {err}. Please try again later."
    await interaction.followup.send(reply, ephemeral=True)


class PingValueModal(discord.ui.Modal):
    """Single-field form for the numeric settings."""

    def __init__(self, dispatcher: CommandDispatcher, command: str) -> None:
        """Initialize the modal."""
        title, label = MODAL_PROMPTS[command]
        super().__init__(title=title, custom_id=f"{command}_modal")
        self.dispatcher = dispatcher
        self.command = command
        self.value_input: discord.ui.TextInput[PingValueModal] = discord.ui.TextInput(
            label=label,
            custom_id=f"{command}_input",
            style=discord.TextStyle.short,
            required=True,
        )
        self.add_item(self.value_input)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        """Hand the entered text to the dispatcher."""
        await async_send_command_reply(
            interaction, self.dispatcher, self.command, self.value_input.value
        )


class StatusView(discord.ui.View):
    """Buttons under the status message."""

    def __init__(
        self,
        bot: PingManagerBot,
        config: PingConfig,
        affordances: Affordances,
    ) -> None:
        """Initialize the view with the buttons enabled per the affordances."""
        super().__init__(timeout=None)
        self.bot = bot

        self.start_button.disabled = not affordances.start
        self.stop_button.disabled = not affordances.stop
        self.auto_button.disabled = not affordances.auto
        self.interval_button.disabled = not affordances.interval
        self.duration_button.disabled = not affordances.duration
        self.target_button.disabled = not affordances.target

        self.auto_button.label = "AUTO: ON" if config.auto_mode else "AUTO: OFF"
        self.auto_button.style = (
            discord.ButtonStyle.success
            if config.auto_mode
            else discord.ButtonStyle.secondary
        )

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        """Only handle clicks on the bound status message."""
        message = interaction.message
        return message is not None and message.id == self.bot.message_id

    async def on_error(
        self,
        interaction: discord.Interaction,
        error: Exception,
        item: discord.ui.Item[Any],
    ) -> None:
        """Log the failure and tell the operator if nothing was sent yet."""
        _LOGGER.error(
            "Error handling button %s: %s", getattr(item, "custom_id", item), error
        )
        if not interaction.response.is_done():
            await interaction.response.send_message(
                f"Error: {error}. Please try again later.", ephemeral=True
            )

    async def _async_show_modal(
        self, interaction: discord.Interaction, command: str
    ) -> None:
        try:
            await interaction.response.send_modal(
                PingValueModal(self.bot.dispatcher, command)
            )
        except discord.HTTPException as err:
            _LOGGER.error("Error showing %s modal: %s", command, err)
            if not interaction.response.is_done():
                await interaction.response.send_message(
                    "Failed to show modal. Discord API may be unavailable. "
                    "Please try again later.",
                    ephemeral=True,
                )

    @discord.ui.button(
        label="START", style=discord.ButtonStyle.success, custom_id=COMMAND_START, row=0
    )
    async def start_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[StatusView]
    ) -> None:
        await async_send_command_reply(interaction, self.bot.dispatcher, COMMAND_START)

    @discord.ui.button(
        label="STOP", style=discord.ButtonStyle.danger, custom_id=COMMAND_STOP, row=0
    )
    async def stop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[StatusView]
    ) -> None:
        await async_send_command_reply(interaction, self.bot.dispatcher, COMMAND_STOP)

    @discord.ui.button(
        label="AUTO: ON",
        style=discord.ButtonStyle.success,
        custom_id=COMMAND_AUTO,
        row=0,
    )
    async def auto_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[StatusView]
    ) -> None:
        await async_send_command_reply(interaction, self.bot.dispatcher, COMMAND_AUTO)

    @discord.ui.button(
        label="INTERVAL",
        style=discord.ButtonStyle.primary,
        custom_id=COMMAND_INTERVAL,
        row=1,
    )
    async def interval_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[StatusView]
    ) -> None:
        await self._async_show_modal(interaction, COMMAND_INTERVAL)

    @discord.ui.button(
        label="DURATION",
        style=discord.ButtonStyle.primary,
        custom_id=COMMAND_DURATION,
        row=1,
    )
    async def duration_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[StatusView]
    ) -> None:
        await self._async_show_modal(interaction, COMMAND_DURATION)

    @discord.ui.button(
        label="PING", style=discord.ButtonStyle.primary, custom_id=COMMAND_TARGET, row=1
    )
    async def target_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[StatusView]
    ) -> None:
        await self._async_show_modal(interaction, COMMAND_TARGET)


class PingManagerBot(discord.Client):
    """Discord client that shows and edits the ping manager status message."""

    def __init__(
        self, channel_id: int, *, intents: discord.Intents | None = None
    ) -> None:
        """Initialize the bot."""
        super().__init__(intents=intents or discord.Intents.default())
        self.channel_id = channel_id
        self.message_id: int | None = None
        self.coordinator: PingManagerCoordinator | None = None
        self._dispatcher: CommandDispatcher | None = None
        self.startup_error: BaseException | None = None
        self._ready_handled = False

    def attach(
        self, coordinator: PingManagerCoordinator, dispatcher: CommandDispatcher
    ) -> None:
        """Connect the bot to the core it presents."""
        self.coordinator = coordinator
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> CommandDispatcher:
        """Return the command dispatcher."""
        if self._dispatcher is None:
            raise RuntimeError("Bot is not attached to a dispatcher")
        return self._dispatcher

    async def async_get_channel(self) -> discord.TextChannel:
        """Return the status channel.

        Raises:
            StartupError: If the channel is not a text channel.
        """
        channel = self.get_channel(self.channel_id)
        if channel is None:
            channel = await self.fetch_channel(self.channel_id)
        if not isinstance(channel, discord.TextChannel):
            raise StartupError(f"Channel {self.channel_id} is not a text channel")
        return channel

    async def async_prepare_channel(self) -> discord.TextChannel:
        """Check the status channel and clear its recent messages."""
        channel = await self.async_get_channel()
        try:
            deleted = await channel.purge(limit=CHANNEL_HISTORY_LIMIT)
        except discord.HTTPException as err:
            _LOGGER.warning("Could not clear channel %s: %s", self.channel_id, err)
        else:
            _LOGGER.info("Channel cleared (%d messages)", len(deleted))
        return channel

    async def async_render(self, config: PingConfig, affordances: Affordances) -> None:
        """Create the status message, or edit it in place."""
        channel = await self.async_get_channel()
        embed = build_status_embed(config)
        view = StatusView(self, config, affordances)

        if self.message_id is not None:
            message = channel.get_partial_message(self.message_id)
            try:
                await message.edit(embed=embed, view=view)
            except discord.NotFound:
                _LOGGER.warning(
                    "Status message %s is gone, sending a new one", self.message_id
                )
                self.message_id = None
            else:
                _LOGGER.debug("Status message updated")
                return

        sent = await channel.send(embed=embed, view=view)
        self.message_id = sent.id
        _LOGGER.debug("Status message %s sent", sent.id)

    async def on_ready(self) -> None:
        """Run the startup sequence on the first ready event."""
        if self._ready_handled:
            return
        self._ready_handled = True
        _LOGGER.info("Logged in as %s", self.user)

        if self.coordinator is None:
            raise RuntimeError("Bot is not attached to a coordinator")
        try:
            await self.async_prepare_channel()
            await self.coordinator.async_setup()
        except (StartupError, discord.HTTPException) as err:
            _LOGGER.error("Error during startup: %s", err)
            self.startup_error = err
            await self.close()
        except Exception as err:
            _LOGGER.exception("Unexpected error during startup")
            self.startup_error = err
            await self.close()


async def async_login_with_retry(
    client: discord.Client,
    token: str,
    retries: int = LOGIN_RETRIES,
    delay: float = LOGIN_RETRY_DELAY,
) -> None:
    """Log in, retrying a fixed number of times.

    Raises:
        StartupError: If every attempt failed.
    """
    last_error: Exception | None = None
    for attempt in range(1, retries + 1):
        _LOGGER.info("Login attempt %d", attempt)
        try:
            await client.login(token)
        except (
            discord.LoginFailure,
            discord.HTTPException,
            aiohttp.ClientError,
        ) as err:
            last_error = err
            _LOGGER.error("Login attempt %d failed: %s", attempt, err)
            if attempt < retries:
                await asyncio.sleep(delay)
        else:
            _LOGGER.info("Login successful")
            return
    raise StartupError(
        f"Failed to login to Discord after {retries} attempts: {last_error}"
    ) from last_error

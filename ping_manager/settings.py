"""Process settings read from the environment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .const import (
    CONF_CHANNEL_ID,
    CONF_CONFIG_FILE,
    CONF_CRCON_API_KEY,
    CONF_CRCON_SERVER,
    CONF_DISCORD_TOKEN,
    CONF_LOG_LEVEL,
    DEFAULT_CONFIG_FILE,
    DEFAULT_LOG_LEVEL,
    REQUIRED_ENV,
)
from .exceptions import StartupError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Credentials and paths the bot needs to start."""

    crcon_server: str
    crcon_api_key: str
    discord_token: str
    channel_id: int
    config_file: Path = Path(DEFAULT_CONFIG_FILE)
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> Settings:
        """Build settings from environment variables.

        Raises:
            StartupError: If a required variable is missing or empty, or the
                channel id is not an integer.
        """
        missing = [key for key in REQUIRED_ENV if not environ.get(key, "").strip()]
        if missing:
            raise StartupError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        raw_channel_id = environ[CONF_CHANNEL_ID].strip()
        try:
            channel_id = int(raw_channel_id)
        except ValueError as err:
            raise StartupError(
                f"{CONF_CHANNEL_ID} must be an integer, got {raw_channel_id!r}"
            ) from err

        log_level = (environ.get(CONF_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise StartupError(f"{CONF_LOG_LEVEL} is not a logging level: {log_level}")

        return cls(
            crcon_server=environ[CONF_CRCON_SERVER].strip(),
            crcon_api_key=environ[CONF_CRCON_API_KEY].strip(),
            discord_token=environ[CONF_DISCORD_TOKEN].strip(),
            channel_id=channel_id,
            config_file=Path(environ.get(CONF_CONFIG_FILE) or DEFAULT_CONFIG_FILE),
            log_level=log_level,
        )


def load_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    """Load a ``.env`` file into the environment and read the settings."""
    if load_dotenv(env_file):
        _LOGGER.debug("Loaded environment from %s", env_file or ".env")
    return Settings.from_env(os.environ)

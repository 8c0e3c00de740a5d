"""Constants for the Ping Manager bot."""

from __future__ import annotations

from datetime import timedelta
from typing import Final

DOMAIN: Final = "ping_manager"
NAME: Final = "Ping Manager"
VERSION: Final = "1.0.0"

# Environment configuration
CONF_CRCON_SERVER: Final = "CRCON_SERVER"
CONF_CRCON_API_KEY: Final = "CRCON_API_KEY"
CONF_DISCORD_TOKEN: Final = "DISCORD_TOKEN"
CONF_CHANNEL_ID: Final = "CHANNEL_ID"
CONF_CONFIG_FILE: Final = "PING_MANAGER_CONFIG_FILE"
CONF_LOG_LEVEL: Final = "LOG_LEVEL"

REQUIRED_ENV: Final[tuple[str, ...]] = (
    CONF_CRCON_SERVER,
    CONF_CRCON_API_KEY,
    CONF_DISCORD_TOKEN,
    CONF_CHANNEL_ID,
)

# Persisted configuration keys
CONF_IS_RUNNING: Final = "isRunning"
CONF_INTERVAL_MINUTES: Final = "intervalMinutes"
CONF_DURATION_SECONDS: Final = "durationSeconds"
CONF_TARGET_THRESHOLD: Final = "targetThreshold"
CONF_DEFAULT_THRESHOLD: Final = "defaultThreshold"
CONF_AUTO_MODE: Final = "autoMode"

# Keys written by earlier releases, mapped to their current names
LEGACY_KEYS: Final[dict[str, str]] = {
    "targetPing": CONF_TARGET_THRESHOLD,
    "defaultPing": CONF_DEFAULT_THRESHOLD,
}

# Default values
DEFAULT_IS_RUNNING: Final = True
DEFAULT_INTERVAL_MINUTES: Final = 15
DEFAULT_DURATION_SECONDS: Final = 5
DEFAULT_TARGET_THRESHOLD: Final = 180  # ms
DEFAULT_DEFAULT_THRESHOLD: Final = 2000  # ms
DEFAULT_AUTO_MODE: Final = True
DEFAULT_CONFIG_FILE: Final = "config.json"
DEFAULT_LOG_LEVEL: Final = "INFO"

# Upper bounds for operator-set values
MAX_INTERVAL_MINUTES: Final = 1440  # one day
MAX_DURATION_SECONDS: Final = 300
MAX_THRESHOLD: Final = 100_000  # ms

# CRCON API
API_GET_MAX_PING: Final = "get_max_ping_autokick"
API_SET_MAX_PING: Final = "set_max_ping_autokick"
API_GET_GAMESTATE: Final = "get_gamestate"
REQUEST_TIMEOUT: Final = 10  # seconds

# Occupancy watchdog
OCCUPANCY_THRESHOLD: Final = 95
OCCUPANCY_POLL_INTERVAL: Final = timedelta(seconds=10)

# Discord
LOGIN_RETRIES: Final = 3
LOGIN_RETRY_DELAY: Final = 5  # seconds
CHANNEL_HISTORY_LIMIT: Final = 100
COLOR_RUNNING: Final = 0x00FF00
COLOR_STOPPED: Final = 0xFF0000

# Operator commands (also used as button custom ids)
COMMAND_START: Final = "start"
COMMAND_STOP: Final = "stop"
COMMAND_INTERVAL: Final = "interval"
COMMAND_DURATION: Final = "duration"
COMMAND_TARGET: Final = "ping"
COMMAND_AUTO: Final = "auto"

MSG_INVALID_NUMBER: Final = "Invalid input. Please enter a positive number."
MSG_OUT_OF_RANGE: Final = "Invalid input. Please enter a number from 1 to {maximum}."

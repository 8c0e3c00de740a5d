"""Data models for the Ping Manager bot."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import timedelta
import logging
from typing import Any

import voluptuous as vol

from .const import (
    CONF_AUTO_MODE,
    CONF_DEFAULT_THRESHOLD,
    CONF_DURATION_SECONDS,
    CONF_INTERVAL_MINUTES,
    CONF_IS_RUNNING,
    CONF_TARGET_THRESHOLD,
    DEFAULT_AUTO_MODE,
    DEFAULT_DEFAULT_THRESHOLD,
    DEFAULT_DURATION_SECONDS,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_IS_RUNNING,
    DEFAULT_TARGET_THRESHOLD,
    LEGACY_KEYS,
)
from .validation_helpers import DURATION_SECONDS, INTERVAL_MINUTES, THRESHOLD_MS

_LOGGER = logging.getLogger(__name__)

# Persisted key -> (attribute name, validator)
_FIELD_MAP: dict[str, tuple[str, Any]] = {
    CONF_IS_RUNNING: ("is_running", vol.Schema(bool)),
    CONF_INTERVAL_MINUTES: ("interval_minutes", INTERVAL_MINUTES),
    CONF_DURATION_SECONDS: ("duration_seconds", DURATION_SECONDS),
    CONF_TARGET_THRESHOLD: ("target_threshold", THRESHOLD_MS),
    CONF_DEFAULT_THRESHOLD: ("default_threshold", THRESHOLD_MS),
    CONF_AUTO_MODE: ("auto_mode", vol.Schema(bool)),
}


@dataclass
class PingConfig:
    """The shared ping manager configuration."""

    is_running: bool = DEFAULT_IS_RUNNING
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    duration_seconds: int = DEFAULT_DURATION_SECONDS
    target_threshold: int = DEFAULT_TARGET_THRESHOLD
    default_threshold: int = DEFAULT_DEFAULT_THRESHOLD
    auto_mode: bool = DEFAULT_AUTO_MODE

    @property
    def interval(self) -> timedelta:
        """Return the period between cycle starts."""
        return timedelta(minutes=self.interval_minutes)

    @property
    def duration(self) -> timedelta:
        """Return how long the lowered threshold is held."""
        return timedelta(seconds=self.duration_seconds)

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted representation."""
        return {key: getattr(self, attr) for key, (attr, _) in _FIELD_MAP.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PingConfig:
        """Create a config from persisted data, merged onto the defaults.

        Unknown keys are ignored. Missing keys, and keys whose value does not
        validate, keep their default.
        """
        config = cls()
        merged = {
            LEGACY_KEYS[key]: value for key, value in data.items() if key in LEGACY_KEYS
        }
        merged.update({key: value for key, value in data.items() if key in _FIELD_MAP})

        for key, value in merged.items():
            attr, validator = _FIELD_MAP[key]
            try:
                setattr(config, attr, validator(value))
            except vol.Invalid:
                _LOGGER.warning(
                    "Ignoring invalid value %r for %s, keeping default %r",
                    value,
                    key,
                    getattr(config, attr),
                )
        return config

    @staticmethod
    def has_legacy_keys(data: dict[str, Any]) -> bool:
        """Return True if the data was written with pre-rename keys."""
        return any(key in data for key in LEGACY_KEYS)

    @classmethod
    def attribute_names(cls) -> set[str]:
        """Return the names of the mutable config attributes."""
        return {field.name for field in fields(cls)}


@dataclass(frozen=True)
class Occupancy:
    """Live player counts on the monitored server."""

    allied: int
    axis: int

    @property
    def total(self) -> int:
        """Return the combined player count."""
        return self.allied + self.axis


@dataclass(frozen=True)
class Affordances:
    """Which operator commands are currently available."""

    start: bool
    stop: bool
    interval: bool
    duration: bool
    target: bool
    auto: bool = True

    @classmethod
    def from_config(cls, config: PingConfig) -> Affordances:
        """Derive the enabled commands from the running flag."""
        running = config.is_running
        return cls(
            start=not running,
            stop=running,
            interval=not running,
            duration=not running,
            target=not running,
        )

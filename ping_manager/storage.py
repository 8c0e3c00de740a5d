"""Storage provider for the Ping Manager configuration file."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from .exceptions import StorageLoadError, StorageSaveError
from .models import PingConfig

_LOGGER = logging.getLogger(__name__)


class PingConfigStore:
    """Manages the persisted ping configuration."""

    def __init__(self, file_path: str | os.PathLike[str]) -> None:
        """Initialize the storage provider."""
        self._file_path = Path(file_path)
        self._write_lock = asyncio.Lock()

    @property
    def file_path(self) -> Path:
        """Return the path of the configuration file."""
        return self._file_path

    async def async_load(self) -> PingConfig:
        """Load the stored configuration merged onto the defaults.

        A missing file is created from the defaults. A file that cannot be
        read or parsed is logged and replaced by the defaults.
        """
        async with self._write_lock:
            try:
                raw_data = await asyncio.to_thread(self._read)
            except StorageLoadError as err:
                _LOGGER.error("Error loading config: %s", err)
                raw_data = None

        if raw_data is None:
            config = PingConfig()
            await self._async_save_defaults(config)
            return config

        config = PingConfig.from_dict(raw_data)
        _LOGGER.info("Loaded configuration from %s", self._file_path)

        if PingConfig.has_legacy_keys(raw_data):
            _LOGGER.info("Rewriting %s with current key names", self._file_path)
            await self._async_save_defaults(config)
        return config

    async def async_save(self, config: PingConfig) -> None:
        """Persist the configuration.

        Raises:
            StorageSaveError: If the file could not be written.
        """
        data = config.to_dict()
        async with self._write_lock:
            try:
                await asyncio.to_thread(self._write, data)
            except (OSError, TypeError, ValueError) as err:
                _LOGGER.error("Error saving config: %s", err)
                raise StorageSaveError(
                    f"Failed to save configuration to {self._file_path}"
                ) from err
        _LOGGER.debug("Saved configuration to %s", self._file_path)

    async def _async_save_defaults(self, config: PingConfig) -> None:
        try:
            await self.async_save(config)
        except StorageSaveError:
            _LOGGER.warning(
                "Continuing with in-memory configuration; %s could not be written",
                self._file_path,
            )

    def _read(self) -> dict[str, Any] | None:
        """Read the raw file; None when it does not exist."""
        if not self._file_path.exists():
            _LOGGER.info("No configuration at %s, using defaults", self._file_path)
            return None
        try:
            with open(self._file_path, encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, ValueError) as err:
            raise StorageLoadError(f"{self._file_path}: {err}") from err

        if not isinstance(data, dict):
            raise StorageLoadError(
                f"{self._file_path}: expected a JSON object, got {type(data).__name__}"
            )
        return data

    def _write(self, data: dict[str, Any]) -> None:
        """Write to a temporary file, then move it over the target."""
        temp_file = self._file_path.with_name(f"{self._file_path.name}.tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as file:
                json.dump(data, file, indent=2)
            os.replace(temp_file, self._file_path)
        finally:
            if temp_file.exists():
                temp_file.unlink()

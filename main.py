"""Entry point for running the Ping Manager bot."""

import asyncio
import logging
import sys

from ping_manager import async_run
from ping_manager.exceptions import StartupError
from ping_manager.settings import load_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LOGGER = logging.getLogger("ping_manager.main")


def main() -> int:
    """Load settings, run the bot and return the exit status."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    try:
        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level)
        asyncio.run(async_run(settings))
    except StartupError as err:
        _LOGGER.error("%s", err)
        return 1
    except KeyboardInterrupt:
        _LOGGER.info("Interrupted, exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Standalone launcher for the static asset server."""

import logging
import signal
import time

from app_config import (
    AppConfigurationError,
    apply_environment_overrides,
    load_app_config,
    load_environment_overrides,
)
from asset_server import ServerConfigurationError, StaticAssetServer, StaticServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("asset_server")


def main() -> int:
    """Run the static asset server until interrupted."""
    logger = setup_logging()

    try:
        app_config = apply_environment_overrides(
            load_app_config(),
            load_environment_overrides(),
        )
        config = StaticServerConfig.from_settings(app_config.server)
    except (AppConfigurationError, ServerConfigurationError) as error:
        logger.error("Static server configuration error: %s", error)
        return 1

    server = StaticAssetServer(config=config, logger=logger)

    try:
        server.start()
    except (ServerConfigurationError, RuntimeError) as error:
        # MissingIndexError lands here: never serve without the default document.
        logger.error("Static server startup failed: %s", error)
        return 1

    try:
        logger.info("Press Ctrl+C to stop.")

        shutdown = False

        def handle_signal(signum, frame) -> None:
            del frame
            nonlocal shutdown
            logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
            shutdown = True

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

        while not shutdown and server.is_running:
            time.sleep(0.2)

    except KeyboardInterrupt:
        logger.info("Stopping by user request.")
    finally:
        server.stop()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

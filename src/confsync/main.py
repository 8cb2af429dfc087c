"""
confsync Application Entry Point

Wires settings, logging, the AWS AppConfig provider, the sync engine and
the HTTP front-end together.
"""

import asyncio
import sys

import uvicorn
from fastapi import FastAPI

from confsync.api.app import create_app
from confsync.config.settings import get_config
from confsync.providers.appconfig import AppConfigProvider
from confsync.sync.engine import ConfigurationSyncEngine
from confsync.sync.events import (
    DebugEvent,
    ErrorEvent,
    EventType,
    ProfileDeletedEvent,
    ReadyEvent,
    UpdateEvent,
)
from confsync.utils.exceptions import ConfSyncError
from confsync.utils.logging import SyncEventLogger, get_logger, setup_logging

logger = get_logger(__name__)


class ConfSyncApplication:
    """Main application class for confsync."""

    def __init__(self):
        self.config = get_config()
        self.running = False

        self.provider: AppConfigProvider | None = None
        self.engine: ConfigurationSyncEngine | None = None
        self.event_logger = SyncEventLogger()

        # FastAPI app
        self.app: FastAPI | None = None

    async def initialize(self) -> None:
        """Initialize all application components."""
        await self.config.initialize()

        setup_logging(
            log_level=self.config.get("app.log_level", "INFO"),
            environment=self.config.environment,
            enable_json=bool(self.config.get("app.log_json", False)),
        )
        logger.info("Initializing confsync application...")

        try:
            self.provider = AppConfigProvider(
                self.config.get("appconfig.region"),
                connect_timeout=self.config.get("appconfig.connect_timeout_seconds", 5),
                read_timeout=self.config.get("appconfig.read_timeout_seconds", 30),
                max_attempts=self.config.get("appconfig.max_attempts", 3),
            )
            self.engine = ConfigurationSyncEngine.from_settings(self.provider, self.config)
            self._register_event_logging(self.engine)

            self.app = create_app(self.engine)

            logger.info("confsync application initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize application: {e}")
            if self.provider:
                await self.provider.close()
            raise

    def _register_event_logging(self, engine: ConfigurationSyncEngine) -> None:
        """Turn engine notifications into log lines."""
        events = self.event_logger

        def on_ready(event: ReadyEvent) -> None:
            events.log_ready(event.profile_names)

        def on_update(event: UpdateEvent) -> None:
            events.log_update(event.profile_name, event.entry.version, event.entry.content_type)

        def on_error(event: ErrorEvent) -> None:
            events.log_error(event.source, event.error)

        def on_deleted(event: ProfileDeletedEvent) -> None:
            events.log_profile_deleted(event.profile_name)

        def on_debug(event: DebugEvent) -> None:
            events.log_debug(event.message)

        engine.subscribe(EventType.READY, on_ready)
        engine.subscribe(EventType.UPDATE, on_update)
        engine.subscribe(EventType.ERROR, on_error)
        engine.subscribe(EventType.PROFILE_DELETED, on_deleted)
        engine.subscribe(EventType.DEBUG, on_debug)

    async def start(self) -> None:
        """Start the sync engine and serve the API until stopped."""
        if not self.app or not self.engine:
            raise RuntimeError("Application not initialized")

        logger.info("Starting confsync application...")
        self.running = True

        try:
            await self.engine.start()

            config = uvicorn.Config(
                app=self.app,
                host=self.config.get("api.host", "127.0.0.1"),
                port=int(self.config.get("api.port", 3000)),
                log_level=str(self.config.get("app.log_level", "info")).lower(),
                access_log=bool(self.config.get("app.debug", False)),
            )
            server = uvicorn.Server(config)
            await server.serve()

        except Exception as e:
            logger.error(f"Application startup failed: {e}")
            raise
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Graceful shutdown of the application."""
        if not self.running:
            return

        logger.info("Shutting down confsync application...")
        self.running = False

        try:
            if self.engine:
                await self.engine.close()
            if self.provider:
                await self.provider.close()

            logger.info("confsync application shutdown complete")

        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


async def main() -> None:
    """Main application entry point."""
    try:
        app = ConfSyncApplication()
        await app.initialize()
        await app.start()
    except ConfSyncError as e:
        logger.error(f"Application failed: {e}")
        sys.exit(1)


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    run()

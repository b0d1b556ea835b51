import asyncio
import logging
import signal
from typing import Optional

from cortex_tracker.config.logging_config import setup_logging
from cortex_tracker.config.settings import settings
from cortex_tracker.services.desktop import (
    AppleScriptForegroundSampler,
    AppleScriptVisibilityController,
    ChromeTabInspector,
)
from cortex_tracker.services.errors import RunnerError
from cortex_tracker.services.session_manager import SessionManager

logger = logging.getLogger(__name__)

class ServiceRunner:
    """Runs a tracking session until a shutdown signal arrives"""

    def __init__(self, manager: Optional[SessionManager] = None, save_on_exit: Optional[bool] = None):
        self.running = False
        self.shutdown_event = asyncio.Event()
        self.manager = manager or SessionManager(
            sampler=AppleScriptForegroundSampler(),
            tab_inspector=ChromeTabInspector(),
            visibility=AppleScriptVisibilityController()
        )
        self.save_on_exit = settings.SAVE_ON_EXIT if save_on_exit is None else save_on_exit

    def _setup_signal_handlers(self):
        """Set up handlers for system signals"""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, lambda s=sig: self.request_shutdown(s))
            except NotImplementedError:
                # Windows event loops have no signal handler support
                logger.debug(f"Signal handler for {sig.name} not supported")

    def request_shutdown(self, sig: Optional[signal.Signals] = None):
        if sig:
            logger.info(f"Received exit signal {sig.name}...")
        self.shutdown_event.set()

    async def shutdown(self):
        """Stop polling and save the session"""
        logger.info("Initiating graceful shutdown...")
        self.running = False
        await self.manager.stop_polling()

        if self.save_on_exit and self.manager.get_session_data() is not None:
            try:
                path = self.manager.save_session()
                logger.info(f"Final session written to {path}")
            except Exception as e:
                logger.error(f"Failed to save session on exit: {e}")
                raise ShutdownError(f"Session save failed: {e}") from e

    async def run(self):
        """Run the service"""
        logger.info("Starting Cortex tracker service...")
        self._setup_signal_handlers()
        self.running = True
        self.manager.start_session()

        try:
            await self.shutdown_event.wait()
        finally:
            await self.shutdown()
            logger.info("Cortex tracker stopped")

class ShutdownError(RunnerError):
    """Exception raised when service shutdown fails"""
    pass

def run_service(debug: bool = False):
    """Entry point for running the service"""
    settings.validate_paths()
    setup_logging(debug=debug)
    runner = ServiceRunner()
    asyncio.run(runner.run())

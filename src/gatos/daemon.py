"""Server process.

Usage: python -m gatos serve

Manages:
- Record store startup (id counter seeded from the table)
- HTTP site lifecycle
- Graceful shutdown (SIGTERM/SIGINT)
"""

from __future__ import annotations

import asyncio
import logging
import signal

from aiohttp import web

from gatos.api import create_app
from gatos.config import GatosConfig, load_config
from gatos.store import RecordStore

logger = logging.getLogger(__name__)


class GatosDaemon:
    """Serves the cats API until signalled."""

    def __init__(self, config: GatosConfig | None = None) -> None:
        self.config = config or load_config()
        self.store: RecordStore | None = None
        self._shutdown_event = asyncio.Event()

    # ── Signal handling ──────────────────────────────────────

    _SIGNALS = (signal.SIGTERM, signal.SIGINT)

    def _setup_signals(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self._SIGNALS:
            loop.add_signal_handler(sig, self._handle_signal, sig)

    def _remove_signals(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self._SIGNALS:
            loop.remove_signal_handler(sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down...", sig.name)
        self._shutdown_event.set()

    def stop(self) -> None:
        self._shutdown_event.set()

    # ── Build components ─────────────────────────────────────

    def _build_store(self) -> RecordStore:
        store = RecordStore(self.config.table_path)
        store.initialize()
        return store

    # ── Main run loop ────────────────────────────────────────

    async def run(self) -> None:
        self.store = await asyncio.to_thread(self._build_store)
        runner = web.AppRunner(create_app(self.store))
        await runner.setup()
        site = web.TCPSite(runner, self.config.server.host, self.config.server.port)

        self._setup_signals()
        try:
            await site.start()
            logger.info(
                "Gatos API listening on http://%s:%d", self.config.server.host, self.config.server.port
            )
            await self._shutdown_event.wait()
        finally:
            self._remove_signals()
            await runner.cleanup()
            logger.info("Gatos server stopped.")

"""Application bootstrap for the standalone REST runner.

Wires the components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → notifications → relay → REST

Used when the relay runs as a container behind an EventBridge API
destination instead of as a Lambda function.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from ecsrelay.config import load_config
from ecsrelay.models.config import RelayConfig
from ecsrelay.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from ecsrelay.pipeline.relay import AlertRelay

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class RelayApp:
    """Application root. Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self) -> None:
        self.config: RelayConfig | None = None
        self._relay: AlertRelay | None = None
        self._rest_server: object | None = None
        self._rest_task: asyncio.Task[None] | None = None
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        # --- 1. Configuration -------------------------------------------
        self.config = load_config()

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("ecsrelay starting", version=_ecsrelay_version())

        # --- 3. Notifications + relay -----------------------------------
        self._start_relay()

        # --- 4. REST API ------------------------------------------------
        await self._start_rest()

        self._running = True
        self._log.info(
            "ecsrelay started",
            port=self.config.api.port,
        )

    def _start_relay(self) -> None:
        assert self._log is not None
        assert self.config is not None
        try:
            from ecsrelay.notifications import build_notification_dispatcher
            from ecsrelay.pipeline.relay import AlertRelay

            dispatcher = build_notification_dispatcher(self.config.notifications)
            self._relay = AlertRelay(config=self.config, dispatcher=dispatcher)
            self._log.info("relay started", channels=dispatcher.channel_names)
        except Exception as exc:
            raise _ComponentError("relay", exc) from exc

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        assert self._relay is not None
        try:
            import uvicorn

            from ecsrelay.api import build_app

            fastapi_app = build_app(relay=self._relay, config=self.config)
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            self._rest_task = asyncio.create_task(server.serve(), name="rest-server")
            self._rest_server = server
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run_until_stopped(self, poll_interval: float = 1.0) -> None:
        """Block until ``stop()`` is called.

        Raises _ComponentError if the REST server exits while the app is
        still meant to be running, e.g. when the port cannot be bound.
        """
        while self._running:
            task = self._rest_task
            if task is not None and task.done():
                raise _ComponentError("rest", _task_failure(task))
            await asyncio.sleep(poll_interval)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop the REST server and wait for in-flight requests to finish."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("ecsrelay shutting down")
        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True  # type: ignore[attr-defined]
        if self._rest_task is not None and not self._rest_task.done():
            try:
                await asyncio.wait_for(self._rest_task, timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("rest server stop timed out", timeout=_SHUTDOWN_GRACE_SECONDS)
                self._rest_task.cancel()
        self._rest_task = None
        self._rest_server = None
        self._relay = None

        log.info("ecsrelay stopped")


def _task_failure(task: asyncio.Task[None]) -> Exception:
    if task.cancelled():
        return RuntimeError("rest server task was cancelled")
    exc = task.exception()
    if isinstance(exc, Exception):
        return exc
    if exc is not None:
        return RuntimeError(f"rest server exited: {exc!r}")
    return RuntimeError("rest server exited unexpectedly")


def _ecsrelay_version() -> str:
    from ecsrelay import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = RelayApp()
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        await app.run_until_stopped()
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal component error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())

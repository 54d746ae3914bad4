"""
Session Lifecycle Monitor

The server is a local companion to one browser tab. The tab sends a
heartbeat every few seconds; when the heartbeats stop for longer than
the configured timeout, the process shuts itself down (a dead man's
switch).

    DISARMED --heartbeat (enabled)--> ARMED --timeout--> EXPIRED
       ^                               |
       +----heartbeat (disabled)-------+

EXPIRED is terminal: the process is expected to be relaunched.
"""

import asyncio
import signal
from enum import Enum
from typing import Callable, Optional

from hawkward.diagnostics import DiagnosticsLogger


class MonitorState(str, Enum):
    ARMED = "armed"
    DISARMED = "disarmed"
    EXPIRED = "expired"


def terminate_process() -> None:
    """Ask the server for a graceful shutdown, as Ctrl+C would."""
    signal.raise_signal(signal.SIGINT)


class SessionMonitor:
    """
    Heartbeat-driven countdown that terminates the process on expiry.

    The countdown handle is owned by this instance; the only mutators
    are ``on_heartbeat``, ``on_config_change``, ``on_tab_closed`` and
    ``disarm``. Countdowns are scheduled on the running event loop, so
    the mutators must be called from within it.
    """

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        enabled: bool = True,
        suppressed: bool = False,
        terminate: Optional[Callable[[], None]] = None,
        logger: Optional[DiagnosticsLogger] = None,
    ):
        """
        Args:
            timeout_seconds: Countdown length after each heartbeat
            enabled: Whether auto-shutdown is active
            suppressed: Non-interactive run; the monitor never arms
            terminate: Called once when the countdown expires
            logger: Diagnostics logger
        """
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._timeout_seconds = float(timeout_seconds)
        self._enabled = enabled
        self._suppressed = suppressed
        self._terminate = terminate or terminate_process
        self._logger = logger or DiagnosticsLogger()

        self._handle: Optional[asyncio.TimerHandle] = None
        self._state = MonitorState.DISARMED

        if suppressed:
            self._logger.log_monitor_suppressed()

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def suppressed(self) -> bool:
        return self._suppressed

    def on_heartbeat(self) -> MonitorState:
        """Restart the countdown, or stay disarmed if auto-shutdown is off."""
        if self._state == MonitorState.EXPIRED:
            return self._state

        self._cancel()
        if self._enabled and not self._suppressed:
            loop = asyncio.get_running_loop()
            self._handle = loop.call_later(self._timeout_seconds, self._expire)
            self._state = MonitorState.ARMED
        else:
            self._state = MonitorState.DISARMED

        self._logger.log_heartbeat(self._state == MonitorState.ARMED)
        return self._state

    def on_config_change(
        self,
        timeout_seconds: Optional[float] = None,
        enabled: Optional[bool] = None,
    ) -> tuple[float, bool]:
        """
        Update the configuration and re-arm under it immediately.

        Returns:
            (timeout_seconds, enabled) now in effect
        """
        if timeout_seconds is not None:
            if timeout_seconds <= 0:
                raise ValueError("timeout_seconds must be positive")
            self._timeout_seconds = float(timeout_seconds)
        if enabled is not None:
            self._enabled = enabled

        self._logger.log_monitor_config_changed(self._timeout_seconds, self._enabled)
        self.on_heartbeat()
        return self._timeout_seconds, self._enabled

    def on_tab_closed(self) -> None:
        """Informational only; the countdown already running decides."""
        self._logger.log_tab_closed(self._timeout_seconds)

    def disarm(self) -> None:
        """Cancel any pending countdown without terminating."""
        if self._state == MonitorState.EXPIRED:
            return
        self._cancel()
        self._state = MonitorState.DISARMED

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self) -> None:
        self._handle = None
        if self._state != MonitorState.ARMED:
            return
        self._state = MonitorState.EXPIRED
        self._logger.log_shutdown_triggered(self._timeout_seconds)
        self._terminate()

"""Session lifecycle package."""

from hawkward.lifecycle.monitor import MonitorState, SessionMonitor, terminate_process

__all__ = ["MonitorState", "SessionMonitor", "terminate_process"]

"""Side-channel collaborators: anonymous telemetry and the event log."""

from .event_logs import EventLogs
from .telemetry import Telemetry

__all__ = ["EventLogs", "Telemetry"]

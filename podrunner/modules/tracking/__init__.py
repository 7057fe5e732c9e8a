"""
Tracking Module - Black Box Interface

Purpose: Report execution lifecycle to the process tracking service
Interface: TrackingClient.create(), TrackingClient.update()
Hidden: HTTP payloads, severity mapping, message truncation

Provides graceful degradation - an unreachable or unconfigured tracking
service never blocks script execution.
"""

from .tracking import (
    MAX_MESSAGE_LENGTH,
    TRUNCATION_MARKER,
    MessageLevel,
    TrackingClient,
    TrackingRecord,
    TrackingStatus,
    message_level,
    truncate_message,
)

__all__ = [
    "MAX_MESSAGE_LENGTH",
    "TRUNCATION_MARKER",
    "MessageLevel",
    "TrackingClient",
    "TrackingRecord",
    "TrackingStatus",
    "message_level",
    "truncate_message",
]

"""
Data Models Package

Pydantic models for the persisted document, the timeline projection and
the diagnostic events.
"""

from hawkward.models.document import (
    Account,
    Document,
    StoreName,
    empty_document,
)
from hawkward.models.events import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    EventSeverity,
    EventType,
)
from hawkward.models.timeline import (
    MonthEntry,
    ProjectedMonth,
    TimelineData,
    TimelineProjection,
    project_balances,
)

__all__ = [
    # Document models
    "Account",
    "Document",
    "StoreName",
    "empty_document",
    # Timeline
    "MonthEntry",
    "ProjectedMonth",
    "TimelineData",
    "TimelineProjection",
    "project_balances",
    # Diagnostic events
    "DiagnosticEvent",
    "DiagnosticEventBuilder",
    "EventSeverity",
    "EventType",
]

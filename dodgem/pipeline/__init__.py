"""The bump cycle: discover active trades, bump them, report.

Components, leaf-first:
- ActionExecutor bumps one trade and never raises
- Discoverer logs in and lists the trades to bump
- CycleRunner drives one cycle as a state machine
"""

from dodgem.pipeline.discoverer import Discoverer, select_items
from dodgem.pipeline.events import Event, EventBus, EventType, get_event_bus, reset_event_bus
from dodgem.pipeline.executor import ActionExecutor
from dodgem.pipeline.models import (
    ActionableItem,
    CycleReport,
    CycleState,
    ItemOutcome,
    OutcomeStatus,
    RunConfiguration,
    SelectionMode,
    Session,
)
from dodgem.pipeline.runner import CycleRunner

__all__ = [
    # Components
    "ActionExecutor",
    "CycleRunner",
    "Discoverer",
    "select_items",
    # Events
    "Event",
    "EventBus",
    "EventType",
    "get_event_bus",
    "reset_event_bus",
    # Models
    "ActionableItem",
    "CycleReport",
    "CycleState",
    "ItemOutcome",
    "OutcomeStatus",
    "RunConfiguration",
    "SelectionMode",
    "Session",
]

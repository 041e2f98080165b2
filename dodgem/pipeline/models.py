"""Data types passed between the stages of a bump cycle.

A cycle turns a ``RunConfiguration`` into a ``CycleReport``:
Session → ActionableItem sequence → one ItemOutcome per item → CycleReport.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, auto
from typing import Optional, Tuple
from uuid import UUID

from dodgem.browser.driver import PageDriver
from dodgem.credentials import CredentialStore


class SelectionMode(str, Enum):
    """Which of the discovered trades get bumped each cycle."""

    ALL = "all"        # Every active trade, with a cooldown between edit and save
    OLDEST = "oldest"  # Only the oldest active trade

    @property
    def description(self) -> str:
        return "the oldest trade" if self is SelectionMode.OLDEST else "all trades"


@dataclass(frozen=True)
class RunConfiguration:
    """Per-process settings for the scheduler, fixed at startup.

    Attributes:
        selection_mode: Which trades to bump
        interval_minutes: Minutes between cycles (positive)
        credentials: Store the login identity is read from
        cooldown_seconds: Wait between edit and save when bumping all trades
        fixed_cadence: Sleep until the nominal next run rather than a full interval
    """

    selection_mode: SelectionMode
    interval_minutes: int
    credentials: CredentialStore
    cooldown_seconds: float = 10.0
    fixed_cadence: bool = False

    def __post_init__(self) -> None:
        # bool is an int subclass
        if isinstance(self.interval_minutes, bool) or not isinstance(self.interval_minutes, int):
            raise ValueError(f"interval_minutes must be a whole number of minutes, got {self.interval_minutes!r}")
        if self.interval_minutes < 1:
            raise ValueError(f"interval_minutes must be positive, got {self.interval_minutes}")
        if self.cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds cannot be negative, got {self.cooldown_seconds}")

    @property
    def interval(self) -> timedelta:
        return timedelta(minutes=self.interval_minutes)


@dataclass
class Session:
    """An authenticated browser page, owned by exactly one cycle.

    Attributes:
        driver: Page driver logged in as ``identity``
        identity: Email address used to log in
        opened_at: When the login completed
        cycle_id: Correlation ID of the cycle that owns the session
    """

    driver: PageDriver
    identity: str
    opened_at: datetime = field(default_factory=datetime.now)
    cycle_id: Optional[UUID] = None


@dataclass(frozen=True)
class ActionableItem:
    """One active trade eligible for bumping.

    Attributes:
        url: Absolute URL of the trade page
        position: Index in the site's listing (0 is the newest)
    """

    url: str
    position: int = 0


class OutcomeStatus(Enum):
    """Result of bumping a single trade."""

    SUCCEEDED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class ItemOutcome:
    """Outcome of one bump attempt.

    Attributes:
        item: The trade that was bumped
        status: Whether the bump succeeded
        elapsed: Wall-clock seconds spent on the item
        cause: Human-readable failure reason (failures only)
        error_type: Exception class name behind the failure
    """

    item: ActionableItem
    status: OutcomeStatus
    elapsed: float
    cause: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    @classmethod
    def ok(cls, item: ActionableItem, elapsed: float) -> "ItemOutcome":
        """Create a successful outcome."""
        return cls(item=item, status=OutcomeStatus.SUCCEEDED, elapsed=elapsed)

    @classmethod
    def fail(cls, item: ActionableItem, elapsed: float, error: BaseException) -> "ItemOutcome":
        """Create a failed outcome from the exception that stopped the bump."""
        return cls(
            item=item,
            status=OutcomeStatus.FAILED,
            elapsed=elapsed,
            cause=str(error) or type(error).__name__,
            error_type=type(error).__name__,
        )


class CycleState(Enum):
    """States of one cycle.

    IDLE → DISCOVERING → ACTING → REPORTING → DONE, plus
    DISCOVERING → REPORTING when discovery fails.
    """

    IDLE = auto()
    DISCOVERING = auto()
    ACTING = auto()
    REPORTING = auto()
    DONE = auto()


@dataclass(frozen=True)
class CycleReport:
    """Everything that happened in one cycle.

    Attributes:
        cycle_number: 1-based count of cycles run by this process
        selection_mode: Selection mode the cycle ran with
        started_at: When the cycle started
        completed_at: When the cycle finished acting
        outcomes: One outcome per discovered item, in discovery order
        error: Cycle-level failure reason, if discovery failed
        error_kind: Machine-readable kind of the cycle-level failure
    """

    cycle_number: int
    selection_mode: SelectionMode
    started_at: datetime
    completed_at: datetime
    outcomes: Tuple[ItemOutcome, ...] = ()
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def item_count(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def cycle_failed(self) -> bool:
        return self.error is not None

    @property
    def elapsed(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

"""One bump cycle as an explicit state machine.

    IDLE → DISCOVERING → ACTING → REPORTING → DONE
                 └──────────────────┘ (discovery failed, zero items)

Discovery failures end the cycle early but are reported, not raised. Item
failures are folded into their outcomes and never stop the iteration.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, List, Optional
from uuid import UUID, uuid4

from dodgem.exceptions import DiscoveryError
from dodgem.pipeline.discoverer import Discoverer
from dodgem.pipeline.events import Event, EventBus, EventType, get_event_bus
from dodgem.pipeline.executor import ActionExecutor
from dodgem.pipeline.models import (
    ActionableItem,
    CycleReport,
    CycleState,
    ItemOutcome,
    SelectionMode,
    Session,
)

logger = logging.getLogger(__name__)

_TRANSITIONS: Dict[CycleState, FrozenSet[CycleState]] = {
    CycleState.IDLE: frozenset({CycleState.DISCOVERING}),
    CycleState.DISCOVERING: frozenset({CycleState.ACTING, CycleState.REPORTING}),
    CycleState.ACTING: frozenset({CycleState.REPORTING}),
    CycleState.REPORTING: frozenset({CycleState.DONE}),
    CycleState.DONE: frozenset({CycleState.IDLE}),
}


class CycleRunner:
    """Drives one full cycle: discover, bump each trade in order, report.

    The runner can be invoked repeatedly; each ``run()`` starts from IDLE,
    uses its own session and returns its own report.

    Example:
        runner = CycleRunner(discoverer, executor, SelectionMode.ALL)
        report = await runner.run()
    """

    def __init__(
        self,
        discoverer: Discoverer,
        executor: ActionExecutor,
        selection_mode: SelectionMode,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._discoverer = discoverer
        self._executor = executor
        self._selection_mode = selection_mode
        self._event_bus = event_bus or get_event_bus()
        self._clock = clock
        self._state = CycleState.IDLE
        self._cycle_count = 0

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def cycle_count(self) -> int:
        """Number of cycles started by this runner."""
        return self._cycle_count

    def _transition(self, new_state: CycleState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal cycle transition {self._state.name} → {new_state.name}")
        logger.debug(f"Cycle state {self._state.name} → {new_state.name}")
        self._state = new_state

    async def run(self) -> CycleReport:
        """Run one cycle to completion.

        Returns:
            The cycle report; ``cycle_failed`` is set when discovery failed
        """
        if self._state is CycleState.DONE:
            self._transition(CycleState.IDLE)
        elif self._state is not CycleState.IDLE:
            raise RuntimeError(f"Cycle already in progress ({self._state.name})")

        try:
            return await self._run_cycle()
        except BaseException:
            # Aborted mid-cycle (cancelled or a bug); the next run starts clean
            self._state = CycleState.IDLE
            raise

    async def _run_cycle(self) -> CycleReport:
        self._cycle_count += 1
        cycle_number = self._cycle_count
        cycle_id = uuid4()
        started_at = self._clock()

        logger.info(f"Starting cycle {cycle_number} ({self._selection_mode.value})")
        await self._emit(
            EventType.CYCLE_STARTED,
            cycle_id,
            cycle_number=cycle_number,
            selection_mode=self._selection_mode.value,
            started_at=started_at,
        )

        outcomes: List[ItemOutcome] = []
        error: Optional[DiscoveryError] = None

        self._transition(CycleState.DISCOVERING)
        try:
            async with self._discoverer.open_session(cycle_id) as session:
                items = await self._discoverer.discover(session, self._selection_mode)
                self._transition(CycleState.ACTING)
                outcomes = await self._act(session, items)
        except DiscoveryError as exc:
            logger.warning(f"Cycle {cycle_number} failed during discovery: {exc}")
            error = exc

        self._transition(CycleState.REPORTING)
        report = CycleReport(
            cycle_number=cycle_number,
            selection_mode=self._selection_mode,
            started_at=started_at,
            completed_at=self._clock(),
            outcomes=tuple(outcomes),
            error=str(error) if error else None,
            error_kind=error.kind if error else None,
        )
        logger.info(
            f"Cycle {cycle_number} finished: {report.succeeded} bumped, "
            f"{report.failed} failed, {report.elapsed:.1f}s"
        )
        await self._emit(EventType.CYCLE_COMPLETE, cycle_id, report=report)

        self._transition(CycleState.DONE)
        return report

    async def _act(self, session: Session, items: List[ActionableItem]) -> List[ItemOutcome]:
        """Bump items strictly one after another, in discovery order."""
        outcomes: List[ItemOutcome] = []
        total = len(items)

        for index, item in enumerate(items, start=1):
            await self._emit(
                EventType.ITEM_STARTED,
                session.cycle_id,
                index=index,
                total=total,
                url=item.url,
                selection_mode=self._selection_mode.value,
            )

            outcome = await self._executor.execute(session, item, self._selection_mode)
            outcomes.append(outcome)

            await self._emit(
                EventType.ITEM_SUCCEEDED if outcome.succeeded else EventType.ITEM_FAILED,
                session.cycle_id,
                index=index,
                total=total,
                outcome=outcome,
                selection_mode=self._selection_mode.value,
            )

        return outcomes

    async def _emit(self, event_type: EventType, cycle_id: UUID, **payload: Any) -> None:
        await self._event_bus.publish(Event(
            event_type=event_type,
            payload=payload,
            correlation_id=cycle_id,
            source="cycle_runner",
        ))

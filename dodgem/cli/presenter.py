"""Console presentation of cycle progress.

The presenter only listens to the event bus. It keeps a spinner running
while a step is in flight and replaces it with a ✓/✗ line when the step
finishes, then prints a summary and the next run time after every cycle.
"""

import logging
from typing import Callable, List, Optional

from rich.console import Console
from rich.status import Status

from dodgem.cli.output import format_duration
from dodgem.pipeline.events import Event, EventBus, EventType
from dodgem.pipeline.models import CycleReport, ItemOutcome, SelectionMode

logger = logging.getLogger(__name__)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _item_label(index: int, total: int, selection_mode: str) -> str:
    if selection_mode == SelectionMode.OLDEST.value:
        return "oldest active trade"
    return f"trade {index}/{total}"


class ConsolePresenter:
    """Renders cycle events with rich.

    Example:
        presenter = ConsolePresenter()
        presenter.attach(event_bus)
        ...
        presenter.detach()
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._status: Optional[Status] = None
        self._unsubscribers: List[Callable[[], None]] = []

    def attach(self, event_bus: EventBus) -> "ConsolePresenter":
        """Subscribe to every event the cycle publishes."""
        handlers = {
            EventType.CYCLE_STARTED: self._on_cycle_started,
            EventType.LOGIN_STARTED: self._on_login_started,
            EventType.LOGIN_COMPLETE: self._on_login_complete,
            EventType.LOGIN_FAILED: self._on_login_failed,
            EventType.DISCOVERY_STARTED: self._on_discovery_started,
            EventType.ITEMS_DISCOVERED: self._on_items_discovered,
            EventType.DISCOVERY_FAILED: self._on_discovery_failed,
            EventType.ITEM_STARTED: self._on_item_started,
            EventType.ITEM_SUCCEEDED: self._on_item_finished,
            EventType.ITEM_FAILED: self._on_item_finished,
            EventType.CYCLE_COMPLETE: self._on_cycle_complete,
            EventType.NEXT_RUN_SCHEDULED: self._on_next_run,
        }
        for event_type, handler in handlers.items():
            self._unsubscribers.append(event_bus.subscribe(event_type, handler))
        return self

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._stop_spinner()

    # Spinner helpers

    def _start_spinner(self, message: str) -> None:
        if self._status is None:
            self._status = self.console.status(message)
            self._status.start()
        else:
            self._status.update(message)

    def _stop_spinner(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def _succeed(self, message: str) -> None:
        self._stop_spinner()
        self.console.print(f"[green]✓[/green] {message}")

    def _fail(self, message: str) -> None:
        self._stop_spinner()
        self.console.print(f"[red]✗[/red] {message}")

    def _info(self, message: str) -> None:
        self._stop_spinner()
        self.console.print(f"[blue]ℹ[/blue] {message}")

    # Event handlers

    async def _on_cycle_started(self, event: Event) -> None:
        started_at = event.payload.get("started_at")
        when = f" [dim]({started_at:%H:%M:%S})[/dim]" if started_at else ""
        self.console.print()
        self.console.rule(f"Cycle {event.payload.get('cycle_number', '?')}{when}", style="dim")

    async def _on_login_started(self, event: Event) -> None:
        self._start_spinner(f"Logging in as: [blue]{event.payload['identity']}[/blue]")

    async def _on_login_complete(self, event: Event) -> None:
        self._succeed(f"Logged in as: [blue]{event.payload['identity']}[/blue]")

    async def _on_login_failed(self, event: Event) -> None:
        self._fail(f"Login failed [dim]- {event.payload.get('error', 'unknown error')}[/dim]")

    async def _on_discovery_started(self, event: Event) -> None:
        self._start_spinner("Finding active trades")

    async def _on_items_discovered(self, event: Event) -> None:
        self._succeed(f"Found [blue]{_plural(event.payload['found'], 'active trade')}[/blue]")

    async def _on_discovery_failed(self, event: Event) -> None:
        self._fail(f"Could not find active trades [dim]- {event.payload.get('error', 'unknown error')}[/dim]")

    async def _on_item_started(self, event: Event) -> None:
        label = _item_label(event.payload["index"], event.payload["total"], event.payload["selection_mode"])
        self._start_spinner(f"Bumping {label}")

    async def _on_item_finished(self, event: Event) -> None:
        outcome: ItemOutcome = event.payload["outcome"]
        label = _item_label(event.payload["index"], event.payload["total"], event.payload["selection_mode"])
        elapsed = f"[dim]({outcome.elapsed:.0f} seconds)[/dim]"

        if outcome.succeeded:
            self._succeed(f"Bumped {label} {elapsed}")
        else:
            self._fail(f"Failed to bump {label} {elapsed}")
            if outcome.cause:
                self.console.print(f"  [dim]{outcome.cause}[/dim]")

    async def _on_cycle_complete(self, event: Event) -> None:
        report: CycleReport = event.payload["report"]
        self._stop_spinner()
        duration = format_duration(report.elapsed)

        if report.cycle_failed:
            self.console.print(f"[red]Cycle {report.cycle_number} failed[/red] [dim]after {duration}[/dim]")
        elif report.item_count == 0:
            self.console.print(f"[yellow]No trades to bump[/yellow] [dim]({duration})[/dim]")
        else:
            style = "green" if report.failed == 0 else "yellow"
            self.console.print(
                f"[{style}]Bumped {report.succeeded}/{report.item_count} trades[/{style}] "
                f"[dim]({duration})[/dim]"
            )

    async def _on_next_run(self, event: Event) -> None:
        self._info(f"Dodgem will run again at: [green]{event.payload['next_run']:%H:%M:%S}[/green]")

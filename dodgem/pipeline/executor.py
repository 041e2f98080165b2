"""Bump a single trade.

Bumping is: open the trade, click "edit", then save the edit page unchanged.
The site moves a saved trade to the top of the listing. When every trade is
bumped in one cycle the site needs a cooldown between the edit and the save.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from dodgem.exceptions import ActionFailed, AutomationError
from dodgem.garage import GarageSite
from dodgem.pipeline.models import ActionableItem, ItemOutcome, SelectionMode, Session

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 10.0


class ActionExecutor:
    """Runs the bump sequence for one trade and never raises.

    Every failure during navigation, edit or save is captured in the returned
    ``ItemOutcome``; nothing is retried within the cycle. Only task
    cancellation propagates.
    """

    def __init__(
        self,
        site: Optional[GarageSite] = None,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._site = site or GarageSite()
        self._cooldown_seconds = cooldown_seconds
        self._sleep = sleep
        self._clock = clock

    @property
    def cooldown_seconds(self) -> float:
        return self._cooldown_seconds

    async def execute(
        self,
        session: Session,
        item: ActionableItem,
        selection_mode: SelectionMode,
    ) -> ItemOutcome:
        """Bump one trade.

        Args:
            session: Authenticated session of the current cycle
            item: Trade to bump
            selection_mode: ALL adds the cooldown before saving

        Returns:
            SUCCEEDED or FAILED outcome with elapsed seconds
        """
        started = self._clock()
        try:
            await self._bump(session, item, selection_mode)
        except ActionFailed as exc:
            elapsed = self._clock() - started
            logger.warning(f"Failed to bump {item.url} after {elapsed:.1f}s: {exc}")
            return ItemOutcome.fail(item, elapsed, exc)
        except Exception as exc:
            elapsed = self._clock() - started
            logger.exception(f"Unexpected error bumping {item.url}")
            return ItemOutcome.fail(item, elapsed, exc)

        elapsed = self._clock() - started
        logger.info(f"Bumped {item.url} in {elapsed:.1f}s")
        return ItemOutcome.ok(item, elapsed)

    async def _bump(self, session: Session, item: ActionableItem, selection_mode: SelectionMode) -> None:
        driver = session.driver
        site = self._site

        try:
            await driver.navigate(item.url)
            await driver.click(site.edit_link, wait_for_navigation=True)

            if selection_mode is SelectionMode.ALL and self._cooldown_seconds > 0:
                logger.debug(f"Waiting {self._cooldown_seconds}s bump cooldown")
                await self._sleep(self._cooldown_seconds)

            await driver.click(site.save_button, wait_for_navigation=True)
        except AutomationError as exc:
            raise ActionFailed(str(exc), url=item.url, cause=exc) from exc

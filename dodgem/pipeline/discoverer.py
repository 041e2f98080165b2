"""Log in and find the account's active trades.

The Discoverer owns the start of every cycle: it reads the stored
credentials, opens a fresh browser session, logs in and then reads the
"my trades" listing. Either step failing is fatal to the current cycle only.
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Callable, List, Optional
from uuid import UUID

from dodgem.browser.driver import PageDriver
from dodgem.credentials import Credentials, CredentialStore
from dodgem.exceptions import (
    AuthenticationFailed,
    AutomationError,
    CredentialsMissingError,
    ListingUnavailable,
)
from dodgem.garage import TRADE_URL_EXTRACTOR, GarageSite
from dodgem.pipeline.events import Event, EventBus, EventType, get_event_bus
from dodgem.pipeline.models import ActionableItem, SelectionMode, Session

logger = logging.getLogger(__name__)

# Opens a browser for one cycle and yields its page driver
SessionFactory = Callable[[], AsyncContextManager[PageDriver]]


def select_items(items: List[ActionableItem], selection_mode: SelectionMode) -> List[ActionableItem]:
    """Apply the selection policy to a listing in native (newest-first) order.

    OLDEST keeps only the last entry; an empty listing stays empty.
    """
    if selection_mode is SelectionMode.OLDEST:
        return items[-1:]
    return list(items)


class Discoverer:
    """Authenticates a cycle's session and lists the trades to act on.

    Example:
        discoverer = Discoverer(store, lambda: PlaywrightBrowserSession(options))

        async with discoverer.open_session() as session:
            items = await discoverer.discover(session, SelectionMode.ALL)
    """

    def __init__(
        self,
        credentials: CredentialStore,
        session_factory: SessionFactory,
        site: Optional[GarageSite] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._credentials = credentials
        self._session_factory = session_factory
        self._site = site or GarageSite()
        self._event_bus = event_bus or get_event_bus()

    @property
    def site(self) -> GarageSite:
        return self._site

    @asynccontextmanager
    async def open_session(self, cycle_id: Optional[UUID] = None) -> AsyncIterator[Session]:
        """Open a browser, log in and yield the authenticated session.

        Credentials are read before anything is launched, so missing
        credentials never cost a browser start. The browser is closed when the
        context exits.

        Raises:
            AuthenticationFailed: If credentials are missing, the browser cannot
                be opened, or the login does not complete
        """
        try:
            credentials = self._credentials.get_credentials()
        except CredentialsMissingError as exc:
            await self._emit(EventType.LOGIN_FAILED, cycle_id, error=str(exc))
            raise AuthenticationFailed(str(exc)) from exc

        await self._emit(EventType.LOGIN_STARTED, cycle_id, identity=credentials.email)

        async with AsyncExitStack() as stack:
            try:
                driver = await stack.enter_async_context(self._session_factory())
            except AutomationError as exc:
                await self._emit(EventType.LOGIN_FAILED, cycle_id, identity=credentials.email, error=str(exc))
                raise AuthenticationFailed(f"Could not open browser: {exc}") from exc

            session = await self._login(driver, credentials, cycle_id)
            yield session

    async def _login(
        self,
        driver: PageDriver,
        credentials: Credentials,
        cycle_id: Optional[UUID],
    ) -> Session:
        site = self._site
        logger.info(f"Logging in as {credentials.email}")

        try:
            await driver.navigate(site.login_url)
            await driver.focus_and_type(site.email_input, credentials.email)
            await driver.focus_and_type(site.password_input, credentials.password)
            await driver.click(site.login_submit, wait_for_navigation=True)
        except AutomationError as exc:
            await self._emit(EventType.LOGIN_FAILED, cycle_id, identity=credentials.email, error=str(exc))
            raise AuthenticationFailed(f"Login did not complete: {exc}", url=driver.current_url) from exc

        # A rejected login re-renders the login form
        if driver.current_url.startswith(site.login_url):
            message = "Login was not accepted; still on the login page"
            await self._emit(EventType.LOGIN_FAILED, cycle_id, identity=credentials.email, error=message)
            raise AuthenticationFailed(message, url=driver.current_url)

        await self._emit(EventType.LOGIN_COMPLETE, cycle_id, identity=credentials.email)
        return Session(driver=driver, identity=credentials.email, cycle_id=cycle_id)

    async def discover(self, session: Session, selection_mode: SelectionMode) -> List[ActionableItem]:
        """Read the active trades listing and apply the selection policy.

        Args:
            session: Authenticated session of the current cycle
            selection_mode: Which trades to keep

        Returns:
            Trades to bump, in the site's order (newest first)

        Raises:
            ListingUnavailable: If the listing cannot be read
        """
        site = self._site
        driver = session.driver
        await self._emit(EventType.DISCOVERY_STARTED, session.cycle_id)

        try:
            await driver.navigate(site.trading_url)
            await driver.hover(site.user_menu)
            await driver.click(site.my_trades_link, wait_for_navigation=True)
            hrefs = await driver.evaluate(TRADE_URL_EXTRACTOR, site.trade_anchor)
        except AutomationError as exc:
            await self._emit(EventType.DISCOVERY_FAILED, session.cycle_id, error=str(exc))
            raise ListingUnavailable(f"Could not read active trades: {exc}", url=driver.current_url) from exc

        if not isinstance(hrefs, list) or not all(isinstance(href, str) for href in hrefs):
            message = f"Trade listing returned unexpected data: {type(hrefs).__name__}"
            await self._emit(EventType.DISCOVERY_FAILED, session.cycle_id, error=message)
            raise ListingUnavailable(message, url=driver.current_url)

        items = [ActionableItem(url=href, position=index) for index, href in enumerate(hrefs)]
        selected = select_items(items, selection_mode)

        logger.info(f"Found {len(items)} active trades, selected {len(selected)} ({selection_mode.value})")
        await self._emit(
            EventType.ITEMS_DISCOVERED,
            session.cycle_id,
            found=len(items),
            selected=len(selected),
            selection_mode=selection_mode.value,
        )
        return selected

    async def _emit(self, event_type: EventType, cycle_id: Optional[UUID], **payload: Any) -> None:
        await self._event_bus.publish(Event(
            event_type=event_type,
            payload=payload,
            correlation_id=cycle_id,
            source="discoverer",
        ))

"""Page driver protocol and its Playwright implementation.

The bump cycle only talks to a ``PageDriver``. Every driver call is awaited to
completion and any failure surfaces as ``AutomationError``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from playwright.async_api import Page

from dodgem.exceptions import AutomationError

logger = logging.getLogger(__name__)


class PageDriver(Protocol):
    """Capabilities the bump cycle needs from a browser page."""

    @property
    def current_url(self) -> str:
        """URL of the page currently loaded."""

    async def navigate(self, url: str) -> None:
        """Load a URL and wait for it to finish loading."""

    async def focus_and_type(self, selector: str, text: str) -> None:
        """Focus the element matching selector and type text into it."""

    async def click(self, selector: str, wait_for_navigation: bool = False) -> None:
        """Click an element, optionally waiting for the navigation it triggers."""

    async def hover(self, selector: str) -> None:
        """Move the pointer over an element."""

    async def wait_for_navigation(self) -> None:
        """Wait until the current page has finished loading."""

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Evaluate a JavaScript function in the page and return its result."""


class PlaywrightPageDriver:
    """PageDriver backed by a Playwright async ``Page``."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def page(self) -> Page:
        return self._page

    @property
    def current_url(self) -> str:
        return self._page.url

    async def navigate(self, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        try:
            await self._page.goto(url)
        except Exception as exc:
            raise AutomationError(str(exc), action="navigate", target=url) from exc

    async def focus_and_type(self, selector: str, text: str) -> None:
        try:
            await self._page.focus(selector)
            await self._page.keyboard.type(text)
        except Exception as exc:
            raise AutomationError(
                str(exc), action="type", target=selector, url=self.current_url
            ) from exc

    async def click(self, selector: str, wait_for_navigation: bool = False) -> None:
        logger.debug(f"Clicking {selector}")
        try:
            if wait_for_navigation:
                async with self._page.expect_navigation():
                    await self._page.click(selector)
            else:
                await self._page.click(selector)
        except Exception as exc:
            raise AutomationError(
                str(exc), action="click", target=selector, url=self.current_url
            ) from exc

    async def hover(self, selector: str) -> None:
        try:
            await self._page.hover(selector)
        except Exception as exc:
            raise AutomationError(
                str(exc), action="hover", target=selector, url=self.current_url
            ) from exc

    async def wait_for_navigation(self) -> None:
        try:
            await self._page.wait_for_load_state("load")
        except Exception as exc:
            raise AutomationError(
                str(exc), action="wait_for_navigation", url=self.current_url
            ) from exc

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        try:
            return await self._page.evaluate(expression, arg)
        except Exception as exc:
            raise AutomationError(
                str(exc), action="evaluate", url=self.current_url
            ) from exc

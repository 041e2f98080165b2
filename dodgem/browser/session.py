"""Browser session lifecycle for one bump cycle."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Any

from playwright.async_api import async_playwright

from dodgem.browser.driver import PageDriver, PlaywrightPageDriver
from dodgem.config import BrowserConfig
from dodgem.exceptions import AutomationError

logger = logging.getLogger(__name__)

PlaywrightFactory = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class BrowserSessionOptions:
    engine: str
    headless: bool
    navigation_timeout_ms: int
    action_timeout_ms: int
    locale: str

    @classmethod
    def from_config(cls, config: BrowserConfig, headless: bool | None = None) -> "BrowserSessionOptions":
        return cls(
            engine=config.engine,
            headless=config.headless if headless is None else headless,
            navigation_timeout_ms=int(config.navigation_timeout * 1000),
            action_timeout_ms=int(config.action_timeout * 1000),
            locale=config.locale,
        )


class PlaywrightBrowserSession:
    """Own one browser, context and page, with deterministic teardown.

    A fresh instance is used for every cycle so no cookies or page state leak
    from one cycle into the next.

    Example:
        async with PlaywrightBrowserSession(options) as driver:
            await driver.navigate("https://rocket-league.com/login")
    """

    def __init__(
        self,
        options: BrowserSessionOptions,
        playwright_factory: PlaywrightFactory | None = None,
    ) -> None:
        self.options = options
        self._playwright_factory = playwright_factory or _start_playwright
        self._playwright: Any | None = None
        self._browser: Any | None = None
        self._context: Any | None = None
        self._driver: PlaywrightPageDriver | None = None

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    async def open(self) -> PageDriver:
        """Launch the browser and return a driver for a new page.

        Raises:
            AutomationError: If the browser cannot be started
        """
        if self._driver is not None:
            return self._driver

        try:
            self._playwright = await self._playwright_factory()

            launcher = getattr(self._playwright, self.options.engine, None)
            if launcher is None:
                raise AutomationError(
                    f"Unsupported browser engine '{self.options.engine}'", action="launch"
                )

            self._browser = await launcher.launch(headless=self.options.headless)
            self._context = await self._browser.new_context(locale=self.options.locale)
            self._context.set_default_timeout(self.options.action_timeout_ms)
            self._context.set_default_navigation_timeout(self.options.navigation_timeout_ms)

            page = await self._context.new_page()
        except AutomationError:
            await self._teardown()
            raise
        except Exception as exc:
            await self._teardown()
            raise AutomationError(f"Failed to open browser session: {exc}", action="launch") from exc

        logger.debug(
            f"Opened {self.options.engine} session (headless={self.options.headless})"
        )
        self._driver = PlaywrightPageDriver(page)
        return self._driver

    async def close(self) -> None:
        """Close the page, browser and Playwright; errors are logged."""
        await self._teardown()

    async def __aenter__(self) -> PageDriver:
        return await self.open()

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> bool:
        await self.close()
        return False

    async def _teardown(self) -> None:
        self._driver = None

        if self._context is not None:
            try:
                await self._context.close()
            except Exception as exc:
                logger.warning(f"Browser context close failed: {exc}")
            finally:
                self._context = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:
                logger.warning(f"Browser close failed: {exc}")
            finally:
                self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:
                logger.warning(f"Playwright teardown failed: {exc}")
            finally:
                self._playwright = None


async def _start_playwright() -> Any:
    return await async_playwright().start()


async def check_browser(
    options: BrowserSessionOptions,
    playwright_factory: PlaywrightFactory | None = None,
) -> None:
    """Launch and close a headless session to prove the browser is installed.

    Raises:
        AutomationError: If the browser cannot be started
    """
    probe = replace(options, headless=True)
    async with PlaywrightBrowserSession(probe, playwright_factory):
        logger.debug(f"{options.engine} is available")

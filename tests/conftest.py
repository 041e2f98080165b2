"""Shared fixtures: a scripted page driver and credential stores."""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import pytest

from dodgem.credentials import Credentials, CredentialStore
from dodgem.garage import GarageSite
from dodgem.pipeline.events import EventBus

SITE = GarageSite()

TRADE_URLS = [
    "https://rocket-league.com/trade/newest",
    "https://rocket-league.com/trade/middle",
    "https://rocket-league.com/trade/oldest",
]


class FakeDriver:
    """In-memory PageDriver that records calls and fails on demand.

    ``failures`` maps a method name, or a (method, target) pair, to the
    exception that call should raise.
    """

    def __init__(self, trade_urls: Optional[List[str]] = None, site: GarageSite = SITE) -> None:
        self.site = site
        self.trade_urls = list(TRADE_URLS if trade_urls is None else trade_urls)
        self.current_url = "about:blank"
        self.calls: List[Tuple[str, Any]] = []
        self.failures: Dict[Any, BaseException] = {}
        self.login_accepted = True
        self.evaluate_result: Any = None
        self.navigation_clicks: List[str] = []

    def _check(self, method: str, target: Any) -> None:
        self.calls.append((method, target))
        exc = self.failures.get((method, target)) or self.failures.get(method)
        if exc is not None:
            raise exc

    async def navigate(self, url: str) -> None:
        self._check("navigate", url)
        self.current_url = url

    async def focus_and_type(self, selector: str, text: str) -> None:
        self._check("focus_and_type", selector)

    async def click(self, selector: str, wait_for_navigation: bool = False) -> None:
        self._check("click", selector)
        if wait_for_navigation:
            self.navigation_clicks.append(selector)
        if selector == self.site.login_submit and self.login_accepted:
            self.current_url = f"{self.site.base_url}/"

    async def hover(self, selector: str) -> None:
        self._check("hover", selector)

    async def wait_for_navigation(self) -> None:
        self._check("wait_for_navigation", None)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self._check("evaluate", arg)
        if self.evaluate_result is not None:
            return self.evaluate_result
        return list(self.trade_urls)

    def targets(self, method: str) -> List[Any]:
        return [target for name, target in self.calls if name == method]


class FakeSessionFactory:
    """Session factory yielding one FakeDriver, counting opens and closes."""

    def __init__(self, driver: FakeDriver, open_error: Optional[BaseException] = None) -> None:
        self.driver = driver
        self.open_error = open_error
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[FakeDriver]:
        if self.open_error is not None:
            raise self.open_error
        self.opened += 1
        try:
            yield self.driver
        finally:
            self.closed += 1

    def __call__(self) -> Any:
        return self._session()


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def session_factory(fake_driver: FakeDriver) -> FakeSessionFactory:
    return FakeSessionFactory(fake_driver)


@pytest.fixture
def event_bus() -> EventBus:
    bus = EventBus()
    bus.enable_history()
    return bus


@pytest.fixture
def credential_store(tmp_path) -> CredentialStore:
    """Store holding a valid login."""
    store = CredentialStore(tmp_path / "credentials.json")
    store.save(Credentials(email="driver@example.com", password="octane-123"))
    return store


@pytest.fixture
def empty_store(tmp_path) -> CredentialStore:
    return CredentialStore(tmp_path / "missing" / "credentials.json")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the user's DODGEM_* settings, cached globals and CLI logging setup out of tests."""
    import logging
    import os

    from dodgem.config import clear_config_cache
    from dodgem.pipeline.events import reset_event_bus

    for name in list(os.environ):
        if name.startswith("DODGEM_"):
            monkeypatch.delenv(name)

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    clear_config_cache()
    reset_event_bus()
    yield
    clear_config_cache()
    reset_event_bus()

    root.handlers[:] = handlers
    root.setLevel(level)

"""Tests for the Playwright page driver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from dodgem.browser.driver import PlaywrightPageDriver
from dodgem.exceptions import AutomationError


@pytest.fixture
def page() -> MagicMock:
    page = MagicMock()
    page.url = "https://rocket-league.com/trading"
    page.goto = AsyncMock()
    page.focus = AsyncMock()
    page.keyboard.type = AsyncMock()
    page.click = AsyncMock()
    page.hover = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.evaluate = AsyncMock(return_value=["https://rocket-league.com/trade/1"])
    page.expect_navigation = MagicMock(return_value=MagicMock())
    return page


@pytest.fixture
def driver(page) -> PlaywrightPageDriver:
    return PlaywrightPageDriver(page)


class TestPlaywrightPageDriver:
    """Calls are forwarded to the page and failures wrapped."""

    def test_current_url(self, driver):
        assert driver.current_url == "https://rocket-league.com/trading"

    @pytest.mark.asyncio
    async def test_navigate(self, driver, page):
        await driver.navigate("https://rocket-league.com/login")
        page.goto.assert_awaited_once_with("https://rocket-league.com/login")

    @pytest.mark.asyncio
    async def test_focus_and_type(self, driver, page):
        await driver.focus_and_type("#email", "driver@example.com")

        page.focus.assert_awaited_once_with("#email")
        page.keyboard.type.assert_awaited_once_with("driver@example.com")

    @pytest.mark.asyncio
    async def test_click_without_navigation(self, driver, page):
        await driver.click("#save")

        page.click.assert_awaited_once_with("#save")
        page.expect_navigation.assert_not_called()

    @pytest.mark.asyncio
    async def test_click_waits_for_navigation(self, driver, page):
        await driver.click("#save", wait_for_navigation=True)

        page.expect_navigation.assert_called_once()
        page.click.assert_awaited_once_with("#save")

    @pytest.mark.asyncio
    async def test_wait_for_navigation(self, driver, page):
        await driver.wait_for_navigation()
        page.wait_for_load_state.assert_awaited_once_with("load")

    @pytest.mark.asyncio
    async def test_evaluate_returns_result(self, driver, page):
        result = await driver.evaluate("selector => []", ".trade")

        assert result == ["https://rocket-league.com/trade/1"]
        page.evaluate.assert_awaited_once_with("selector => []", ".trade")

    @pytest.mark.asyncio
    async def test_navigate_failure(self, driver, page):
        page.goto.side_effect = TimeoutError("Timeout 30000ms exceeded")

        with pytest.raises(AutomationError) as exc_info:
            await driver.navigate("https://rocket-league.com/trade/1")

        assert exc_info.value.action == "navigate"
        assert exc_info.value.target == "https://rocket-league.com/trade/1"
        assert "Timeout" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_click_failure_records_selector_and_url(self, driver, page):
        page.click.side_effect = RuntimeError("element not found")

        with pytest.raises(AutomationError) as exc_info:
            await driver.click("#edit", wait_for_navigation=True)

        assert exc_info.value.action == "click"
        assert exc_info.value.target == "#edit"
        assert exc_info.value.url == "https://rocket-league.com/trading"

    @pytest.mark.asyncio
    async def test_hover_failure(self, driver, page):
        page.hover.side_effect = RuntimeError("detached")

        with pytest.raises(AutomationError, match="hover"):
            await driver.hover(".menu")

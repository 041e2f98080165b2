"""Browser automation for Dodgem.

Wraps Playwright behind the small ``PageDriver`` interface the bump cycle
uses, and manages one browser session per cycle.
"""

from dodgem.browser.driver import PageDriver, PlaywrightPageDriver
from dodgem.browser.session import BrowserSessionOptions, PlaywrightBrowserSession, check_browser

__all__ = [
    "BrowserSessionOptions",
    "PageDriver",
    "PlaywrightBrowserSession",
    "PlaywrightPageDriver",
    "check_browser",
]

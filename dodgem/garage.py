"""Rocket League Garage page locations and selectors."""

from dataclasses import dataclass

DEFAULT_BASE_URL = "https://rocket-league.com"

# Returns the href of every trade header anchor matching the selector, in page order
TRADE_URL_EXTRACTOR = (
    "selector => Array.from(document.querySelectorAll(selector)).map(anchor => anchor.href)"
)


@dataclass(frozen=True)
class GarageSite:
    """Where things live on Rocket League Garage.

    Only ``base_url`` is configurable; the selectors track the site's markup.
    """

    base_url: str = DEFAULT_BASE_URL

    # Login form
    email_input: str = '.rlg-form .rlg-input[type="email"]'
    password_input: str = '.rlg-form .rlg-input[type="password"]'
    login_submit: str = '.rlg-form .rlg-btn-primary[type="submit"]'

    # Trading header and the user's own trades
    user_menu: str = ".rlg-header-main-welcome-user"
    my_trades_link: str = "[href^='/trades']"
    trade_anchor: str = ".rlg-trade-display-header > a"

    # Trade edit page
    edit_link: str = "[href^='/trade/edit']"
    save_button: str = '.rlg-btn-primary[type="submit"]'

    @property
    def login_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/login"

    @property
    def trading_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/trading"

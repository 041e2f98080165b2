"""Exceptions raised by the bump cycle and its collaborators."""


class DodgemError(Exception):
    """Base exception for bump cycle errors."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class AutomationError(DodgemError):
    """Raised when a page-automation call fails.

    Attributes:
        action: The driver action that failed (navigate, click, ...)
        target: Selector or URL the action was applied to
    """

    def __init__(
        self,
        message: str,
        action: str | None = None,
        target: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, url)
        self.action = action
        self.target = target

    def __str__(self) -> str:
        parts = [self.message]
        if self.action:
            parts.append(f"(action: {self.action})")
        if self.target:
            parts.append(f"(target: {self.target})")
        if self.url:
            parts.append(f"(url: {self.url})")
        return " ".join(parts)


class CredentialsMissingError(DodgemError):
    """Raised when no usable credentials are stored."""
    pass


class DiscoveryError(DodgemError):
    """Raised when a cycle cannot produce its list of trades.

    Fatal to the current cycle only.
    """

    kind = "discovery_error"


class AuthenticationFailed(DiscoveryError):
    """Raised when logging in does not complete."""

    kind = "authentication_failed"


class ListingUnavailable(DiscoveryError):
    """Raised when the active trades listing cannot be read."""

    kind = "listing_unavailable"


class ActionFailed(DodgemError):
    """Raised when bumping a single trade fails.

    Never escapes the action executor; it is folded into the item outcome.
    """

    def __init__(self, message: str, url: str | None = None, cause: BaseException | None = None) -> None:
        super().__init__(message, url)
        self.cause = cause

"""Custom exception hierarchy for pfproxy."""


class PfproxyError(Exception):
    """Base exception for all pfproxy errors."""


class InvalidInputError(PfproxyError):
    """Missing or malformed caller input (handle, tag or proxy URL)."""


class ResolveError(PfproxyError):
    """Profile resolution failed unexpectedly."""


class BrowserLaunchError(ResolveError):
    """The headless browser could not be started."""


class NavigationError(ResolveError):
    """Navigating to the profile page failed."""


class UpstreamFetchError(PfproxyError):
    """Image upstream returned a non-success status or was unreachable."""

    def __init__(self, status_code: int | None, message: str | None = None):
        self.status_code = status_code
        if message is None:
            message = f"proxy failed: {status_code if status_code is not None else 'unreachable'}"
        super().__init__(message)

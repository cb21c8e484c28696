"""Playwright page operations for profile pages."""

from urllib.parse import quote

from playwright.async_api import Page, Error as PlaywrightError

from pfproxy.exceptions import NavigationError
from pfproxy.logging import get_logger

# Selectors - centralized for easy updates when the page markup changes
SELECTORS = {
    "state_blob": "script#__UNIVERSAL_DATA_FOR_REHYDRATION__",
    "og_image": 'meta[property="og:image"]',
}

_log = get_logger("fetcher")


def build_profile_url(handle: str, template: str) -> str:
    """Insert the percent-encoded handle into the profile URL template."""
    return template.format(handle=quote(handle, safe=""))


async def open_profile(page: Page, url: str) -> int | None:
    """
    Navigate to a profile page and wait for the DOM.

    Args:
        page: Fresh page from the browser session
        url: Profile URL

    Returns:
        HTTP status of the main document, if any

    Raises:
        NavigationError: If navigation failed or timed out
    """
    try:
        response = await page.goto(url, wait_until="domcontentloaded")
    except PlaywrightError as e:
        raise NavigationError(f"Navigation to {url} failed: {e}") from e

    status = response.status if response is not None else None
    _log.debug("navigate", url=url, status=status)
    return status


async def read_state_text(page: Page) -> str | None:
    """Text of the embedded rehydration script, or None if absent or timed out."""
    try:
        return await page.locator(SELECTORS["state_blob"]).text_content()
    except PlaywrightError as e:
        _log.debug("state_blob_missing", error=str(e))
        return None


async def read_og_image(page: Page) -> str | None:
    """Content of the og:image meta tag, or None if absent or timed out."""
    try:
        return await page.locator(SELECTORS["og_image"]).get_attribute("content")
    except PlaywrightError as e:
        _log.debug("og_image_missing", error=str(e))
        return None

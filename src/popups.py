"""Marketing overlay dismissal.

Every page of the site may open an unrelated modal. A page module describes
its overlay through the PopupSource hooks and hands itself to these functions,
so unrelated page modules do not share a base class.
"""
from typing import Protocol

from playwright.async_api import Page

from element_helpers import ElementState, wait_for_state


class PopupSource(Protocol):
    def popup_selector(self) -> str: ...

    def close_button_selector(self) -> str: ...


async def is_popup_visible(page: Page, source: PopupSource) -> bool:
    """Non-throwing probe; any error counts as "not visible"."""
    try:
        return await page.locator(source.popup_selector()).is_visible()
    except Exception:
        return False


async def close_popup(page: Page, source: PopupSource, timeout_ms: int = 5000, verbose: bool = False) -> None:
    popup = page.locator(source.popup_selector())
    close_button = page.locator(source.close_button_selector())

    await wait_for_state(close_button, ElementState.VISIBLE, timeout_ms)
    await close_button.click()
    await wait_for_state(popup, ElementState.HIDDEN, timeout_ms)
    if verbose:
        print(f"✓ Popup closed: {source.popup_selector()}")


async def close_popup_if_present(page: Page, source: PopupSource, timeout_ms: int = 5000, verbose: bool = False) -> None:
    """Close the overlay when it shows; never raises."""
    try:
        if await is_popup_visible(page, source):
            await close_popup(page, source, timeout_ms=timeout_ms, verbose=verbose)
        elif verbose:
            print("→ No popup found or already closed")
    except Exception as e:
        if verbose:
            print(f"→ Popup dismissal skipped: {e}")

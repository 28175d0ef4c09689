"""Declarative navigation: one routine drives every link instead of one method per link."""
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from playwright.async_api import BrowserContext, Page

from action_errors import ActionError, NotFoundError, PreconditionError
from element_helpers import ElementState, wait_for_exact_url, wait_for_state
from popups import PopupSource, close_popup_if_present


NAVIGATION_TIMEOUT_MS = 10000


class MenuType(str, Enum):
    NAV = "nav"
    DROPDOWN = "dropdown"


class TransitionKind(str, Enum):
    CLICK = "click"  # trigger is a selector
    NAV_LINK = "nav_link"  # trigger is the visible text of a main nav link
    DROPDOWN_LINK = "dropdown_link"  # trigger is the visible text of a "More" menu link


@dataclass(frozen=True)
class ActionTarget:
    trigger: str
    expected_url: str
    close_popup: bool = False
    kind: TransitionKind = TransitionKind.CLICK


@dataclass(frozen=True)
class MenuSelectors:
    container: str
    link: str


async def click_menu_link_by_text(page: Page, link_text: str, menu: MenuSelectors, verbose: bool = False) -> int:
    """Click the first link whose trimmed text equals ``link_text``; return its index."""
    links = page.locator(menu.container).locator(menu.link)
    count = await links.count()
    for i in range(count):
        text = await links.nth(i).text_content()
        if text is not None and text.strip() == link_text:
            if verbose:
                print(f"→ Clicking menu link #{i} '{link_text}'")
            await links.nth(i).click()
            return i
    raise NotFoundError(f'Link with text "{link_text}" not found in selector: {menu.container}')


async def click_and_capture_new_page(context: BrowserContext, click: Callable[[], Awaitable]) -> Page:
    """Run ``click`` and return the page it opened in ``context``."""
    pages_before = len(context.pages)
    async with context.expect_page() as new_page_info:
        await click()
    await new_page_info.value
    return context.pages[pages_before]


async def perform_transition(
    page: Page,
    target: ActionTarget,
    popup: PopupSource | None = None,
    menus: dict[MenuType, MenuSelectors] | None = None,
    timeout_ms: int = NAVIGATION_TIMEOUT_MS,
    verbose: bool = False,
) -> None:
    """Trigger ``target`` and wait until the page lands exactly on its URL.

    Raises WaitTimeoutError when the location does not match within
    ``timeout_ms``; a transition never returns having landed elsewhere.
    """
    try:
        kind = TransitionKind(target.kind)
    except ValueError:
        raise ActionError(f"Unsupported transition kind: {target.kind!r}")

    if target.close_popup:
        if popup is None:
            raise PreconditionError(f"Transition to {target.expected_url} needs a popup source")
        await close_popup_if_present(page, popup, verbose=verbose)

    if kind is TransitionKind.CLICK:
        trigger = page.locator(target.trigger)
        await wait_for_state(trigger, ElementState.VISIBLE)
        await trigger.click()
    else:
        menu_type = MenuType.NAV if kind is TransitionKind.NAV_LINK else MenuType.DROPDOWN
        if not menus or menu_type not in menus:
            raise PreconditionError(f"No {menu_type.value} menu selectors given for '{target.trigger}'")
        await click_menu_link_by_text(page, target.trigger, menus[menu_type], verbose=verbose)

    await wait_for_exact_url(page, target.expected_url, timeout_ms)
    if verbose:
        print(f"✓ Landed on {target.expected_url}")

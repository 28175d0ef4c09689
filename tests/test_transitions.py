import asyncio
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from action_errors import ActionError, NotFoundError, PreconditionError, WaitTimeoutError  # noqa: E402
from transitions import (  # noqa: E402
    ActionTarget,
    MenuSelectors,
    MenuType,
    TransitionKind,
    click_and_capture_new_page,
    click_menu_link_by_text,
    perform_transition,
)


MENU = MenuSelectors(container="nav", link="a")


def _menu_page(texts: list[str | None]) -> tuple[MagicMock, list[MagicMock]]:
    items = []
    for text in texts:
        item = MagicMock()
        item.text_content = AsyncMock(return_value=text)
        item.click = AsyncMock()
        items.append(item)
    links = MagicMock()
    links.count = AsyncMock(return_value=len(items))
    links.nth.side_effect = lambda i: items[i]
    page = MagicMock()
    page.locator.return_value.locator.return_value = links
    return page, items


def _page_landing_on(url_after_click: str) -> tuple[MagicMock, MagicMock]:
    page = MagicMock()
    page.url = "https://www.candymapper.com/"
    trigger = MagicMock()
    trigger.wait_for = AsyncMock()

    async def click():
        page.url = url_after_click

    trigger.click = AsyncMock(side_effect=click)
    page.locator.return_value = trigger

    async def wait_for_url(predicate, timeout):
        if not predicate(page.url):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    page.wait_for_url = wait_for_url
    return page, trigger


def test_menu_link_matches_first_exact_trimmed_text() -> None:
    page, items = _menu_page([" Home ", None, "  More  ", "More"])

    index = asyncio.run(click_menu_link_by_text(page, "More", MENU))

    assert index == 2
    items[2].click.assert_awaited_once()
    items[3].click.assert_not_awaited()


def test_menu_link_missing_raises_not_found() -> None:
    page, items = _menu_page(["Home", "More options"])

    with pytest.raises(NotFoundError, match='Link with text "More" not found in selector: nav'):
        asyncio.run(click_menu_link_by_text(page, "More", MENU))
    for item in items:
        item.click.assert_not_awaited()


def test_click_transition_waits_for_exact_url() -> None:
    page, trigger = _page_landing_on("https://www.candymapper.com/join-us")
    target = ActionTarget(trigger="#join", expected_url="https://www.candymapper.com/join-us")

    asyncio.run(perform_transition(page, target, timeout_ms=100))

    trigger.click.assert_awaited_once()


def test_click_transition_landing_elsewhere_times_out() -> None:
    page, _ = _page_landing_on("https://www.candymapper.com/join-us/extra")
    target = ActionTarget(trigger="#join", expected_url="https://www.candymapper.com/join-us")

    with pytest.raises(WaitTimeoutError):
        asyncio.run(perform_transition(page, target, timeout_ms=100))


def test_unsupported_kind_is_rejected_before_touching_the_page() -> None:
    page = MagicMock()
    target = ActionTarget(trigger="#x", expected_url="https://x/", kind="hover")

    with pytest.raises(ActionError, match="Unsupported transition kind"):
        asyncio.run(perform_transition(page, target))
    page.locator.assert_not_called()


def test_popup_closing_target_needs_a_popup_source() -> None:
    target = ActionTarget(trigger="#x", expected_url="https://x/", close_popup=True)

    with pytest.raises(PreconditionError):
        asyncio.run(perform_transition(MagicMock(), target))


def test_menu_target_needs_menu_selectors() -> None:
    target = ActionTarget(trigger="Halloween Party", expected_url="https://x/", kind=TransitionKind.DROPDOWN_LINK)

    with pytest.raises(PreconditionError):
        asyncio.run(perform_transition(MagicMock(), target, menus={MenuType.NAV: MENU}))


class FakeContext:
    def __init__(self, pages: list):
        self.pages = pages

    @asynccontextmanager
    async def expect_page(self):
        info = MagicMock()
        info.value = asyncio.get_running_loop().create_future()
        yield info
        info.value.set_result(self.pages[-1])


def test_click_and_capture_new_page_returns_the_opened_tab() -> None:
    opener = MagicMock(name="opener")
    new_tab = MagicMock(name="new_tab")
    context = FakeContext([opener])
    click = AsyncMock(side_effect=lambda: context.pages.append(new_tab))

    captured = asyncio.run(click_and_capture_new_page(context, click))

    assert captured is new_tab
    click.assert_awaited_once()

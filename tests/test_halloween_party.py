import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from action_errors import ValueMismatchError  # noqa: E402
from fixture_data import PartyData  # noqa: E402
from halloween_party_page import HalloweenPartyActions  # noqa: E402


def _actions_with_dropdown(value_after_select: str) -> tuple[HalloweenPartyActions, MagicMock]:
    dropdown = MagicMock()
    dropdown.wait_for = AsyncMock()
    dropdown.select_option = AsyncMock()
    dropdown.evaluate = AsyncMock(return_value=value_after_select)
    frame = MagicMock()
    frame.locator.return_value = dropdown

    actions = HalloweenPartyActions(MagicMock())
    actions.frames.resolve = AsyncMock(return_value=frame)
    return actions, dropdown


def test_select_number_of_guests_reads_the_value_back() -> None:
    actions, dropdown = _actions_with_dropdown("2")

    asyncio.run(actions.select_number_of_guests(2))

    dropdown.select_option.assert_awaited_once_with("2")
    dropdown.evaluate.assert_awaited_once()


def test_select_number_of_guests_rejects_an_ignored_selection() -> None:
    actions, _ = _actions_with_dropdown("0")

    with pytest.raises(ValueMismatchError) as exc_info:
        asyncio.run(actions.select_number_of_guests(2))

    assert str(exc_info.value) == 'Guests input value mismatch. Expected: "2", got: "0"'


def _actions_with_confirmation(wait_error: Exception | None = None) -> tuple[HalloweenPartyActions, MagicMock]:
    message = MagicMock()
    message.wait_for = AsyncMock(side_effect=wait_error)
    page = MagicMock()
    page.locator.return_value = message
    return HalloweenPartyActions(page), message


def test_confirmation_check_is_true_when_the_message_shows() -> None:
    actions, message = _actions_with_confirmation()

    assert asyncio.run(actions.is_confirmation_message_visible()) is True
    message.wait_for.assert_awaited_once_with(state="visible", timeout=5000)


def test_confirmation_check_falls_back_to_false_after_its_timeout() -> None:
    actions, _ = _actions_with_confirmation(PlaywrightTimeoutError("Timeout 5000ms exceeded."))

    assert asyncio.run(actions.is_confirmation_message_visible()) is False


def test_complete_party_registration_selects_then_types_then_submits() -> None:
    actions = HalloweenPartyActions(MagicMock())
    calls = []

    def step(name):
        async def run(*args):
            calls.append((name,) + args)
        return run

    actions.select_number_of_guests = step("select_number_of_guests")
    actions.enter_email = step("enter_email")
    actions.submit_form = step("submit_form")

    asyncio.run(actions.complete_party_registration(PartyData(email="guest@example.com", guests=1)))

    assert calls == [
        ("select_number_of_guests", 1),
        ("enter_email", "guest@example.com"),
        ("submit_form",),
    ]

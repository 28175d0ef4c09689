import asyncio
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from action_errors import NotFoundError, PreconditionError  # noqa: E402
from fixture_data import INVALID_CODE, TwoFactorAuthData  # noqa: E402
from two_factor_auth_page import TwoFactorAuthActions, extract_demo_code  # noqa: E402


def test_extract_demo_code_reads_six_digits() -> None:
    assert extract_demo_code("Code sent! (Demo code: 482913)") == "482913"


@pytest.mark.parametrize("message", [None, "", "Code sent!", "(Demo code: 12345)", "Demo code: 1234567"])
def test_extract_demo_code_rejects_messages_without_a_code(message) -> None:
    with pytest.raises(NotFoundError, match="Could not extract verification code from message"):
        extract_demo_code(message)


def test_operations_before_navigation_fail_fast() -> None:
    actions = TwoFactorAuthActions(MagicMock())

    with pytest.raises(PreconditionError, match="navigate_to_two_factor_auth_page"):
        asyncio.run(actions.enter_email("someone@example.com"))
    with pytest.raises(PreconditionError):
        asyncio.run(actions.click_verify_code())


def _recording_actions(message: str = "Code sent! (Demo code: 654321)") -> tuple[TwoFactorAuthActions, list]:
    actions = TwoFactorAuthActions(MagicMock())
    calls = []

    def step(name, result=None):
        async def run(*args):
            calls.append((name,) + args)
            return result
        return run

    actions.close_popup_if_present = step("close_popup_if_present")
    actions.enter_email = step("enter_email")
    actions.click_send_code = step("click_send_code")
    actions.get_message_text = step("get_message_text", message)
    actions.enter_verification_code = step("enter_verification_code")
    actions.click_verify_code = step("click_verify_code")
    return actions, calls


def test_complete_flow_with_valid_code_uses_the_displayed_code() -> None:
    actions, calls = _recording_actions()
    data = TwoFactorAuthData(email="someone@example.com", invalid_code=INVALID_CODE)

    code = asyncio.run(actions.complete_two_factor_auth(data, use_valid_code=True))

    assert code == "654321"
    assert calls == [
        ("close_popup_if_present",),
        ("enter_email", "someone@example.com"),
        ("click_send_code",),
        ("get_message_text",),
        ("enter_verification_code", "654321"),
        ("click_verify_code",),
    ]


def test_complete_flow_with_invalid_code_skips_extraction() -> None:
    actions, calls = _recording_actions()
    data = TwoFactorAuthData(email="someone@example.com", invalid_code=INVALID_CODE)

    code = asyncio.run(actions.complete_two_factor_auth(data, use_valid_code=False))

    assert code == "123456"
    assert ("get_message_text",) not in calls
    assert ("enter_verification_code", "123456") in calls


def test_complete_flow_without_invalid_code_touches_nothing() -> None:
    actions, calls = _recording_actions()
    data = TwoFactorAuthData(email="someone@example.com")

    with pytest.raises(PreconditionError, match="Invalid code not provided in test data"):
        asyncio.run(actions.complete_two_factor_auth(data, use_valid_code=False))
    assert calls == []

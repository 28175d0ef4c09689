import re

from playwright.async_api import expect

import fixture_data
from scenarios import ScenarioSession, scenario
from two_factor_auth_page import TWO_FACTOR_AUTH_DATA, TwoFactorAuthActions


GROUP = "two-factor-auth"
DATA = TWO_FACTOR_AUTH_DATA


async def _open(session: ScenarioSession) -> TwoFactorAuthActions:
    actions = TwoFactorAuthActions(session.page, verbose=session.verbose)
    await actions.navigate_to_two_factor_auth_page()
    await actions.close_popup()
    return actions


@scenario(GROUP, "2FA page shows its URL")
async def page_url(session: ScenarioSession):
    await _open(session)
    await expect(session.page).to_have_url(DATA["url"], timeout=DATA["timeouts"]["navigation"])


@scenario(GROUP, "2FA page has the expected title")
async def page_title(session: ScenarioSession):
    await _open(session)
    await expect(session.page).to_have_title(DATA["expected_title"])


@scenario(GROUP, "2FA page embeds the form iframe")
async def page_iframe(session: ScenarioSession):
    actions = await _open(session)
    await expect(session.page.locator(actions.components.iframe)).to_be_visible()


@scenario(GROUP, "2FA page shows the simulation heading")
async def page_heading(session: ScenarioSession):
    actions = await _open(session)

    heading = await actions.get_heading_text()

    assert heading == DATA["expected_heading"], f"Unexpected heading: {heading!r}"


@scenario(GROUP, "sending a code reveals the verification section")
async def send_code(session: ScenarioSession):
    actions = await _open(session)
    data = fixture_data.two_factor_auth_data()

    await actions.enter_email(data.email)
    await actions.click_send_code()

    assert await actions.is_verification_section_visible()


@scenario(GROUP, "correct code verifies successfully")
async def correct_code(session: ScenarioSession):
    actions = await _open(session)

    await actions.complete_two_factor_auth(fixture_data.two_factor_auth_data(), use_valid_code=True)

    assert await actions.is_success_message_visible()
    message = await actions.get_message_text() or ""
    assert DATA["verification_success_message"] in message, f"Unexpected message: {message!r}"


@scenario(GROUP, "wrong code is rejected")
async def wrong_code(session: ScenarioSession):
    actions = await _open(session)

    code = await actions.complete_two_factor_auth(fixture_data.two_factor_auth_data(), use_valid_code=False)

    assert code == fixture_data.INVALID_CODE
    assert await actions.is_error_message_visible()
    message = await actions.get_message_text() or ""
    assert DATA["verification_failure_message"] in message, f"Unexpected message: {message!r}"


@scenario(GROUP, "extracted code is six digits and verifies")
async def extracted_code(session: ScenarioSession):
    actions = await _open(session)
    data = fixture_data.two_factor_auth_data()

    await actions.enter_email(data.email)
    await actions.click_send_code()
    code = await actions.extract_code_from_message()
    await actions.enter_verification_code(code)
    await actions.click_verify_code()

    assert re.fullmatch(r"\d{6}", code), f"Code is not six digits: {code!r}"
    assert await actions.is_success_message_visible()


@scenario(GROUP, "invalid email format shows an error")
async def invalid_email(session: ScenarioSession):
    actions = await _open(session)

    await actions.enter_email(fixture_data.INVALID_EMAIL)
    await actions.click_send_code()

    assert await actions.is_error_message_visible()
    message = await actions.get_message_text() or ""
    assert DATA["invalid_email_message"] in message, f"Unexpected message: {message!r}"

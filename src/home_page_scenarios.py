from playwright.async_api import expect

import fixture_data
from home_page import HOME_PAGE_DATA, HomePageActions
from scenarios import ScenarioSession, scenario
from site_urls import URLS


GROUP = "home-page"


async def _open(session: ScenarioSession) -> HomePageActions:
    actions = HomePageActions(session.page, verbose=session.verbose)
    await actions.navigate_to_home_page()
    return actions


@scenario(GROUP, "navigating to the home page shows the home page URL")
async def home_page_url(session: ScenarioSession):
    await _open(session)
    await expect(session.page).to_have_url(URLS["home_page"], timeout=HOME_PAGE_DATA["timeouts"]["navigation"])


@scenario(GROUP, "home page has the expected title")
async def home_page_title(session: ScenarioSession):
    await _open(session)
    await expect(session.page).to_have_title(HOME_PAGE_DATA["expected_title"])


@scenario(GROUP, "closing the popup reveals the main heading")
async def main_heading_after_popup(session: ScenarioSession):
    actions = await _open(session)
    await actions.close_popup()

    heading = await actions.get_main_heading_text()

    assert heading and heading.strip(), "Main heading is empty"


@scenario(GROUP, "closing the popup hides it")
async def popup_closes(session: ScenarioSession):
    actions = await _open(session)
    visible_before = await actions.is_popup_visible()

    await actions.close_popup()
    visible_after = await actions.is_popup_visible()

    assert visible_before, "Popup was not visible on load"
    assert not visible_after, "Popup still visible after closing"


@scenario(GROUP, "submitting the contact form shows the success message")
async def contact_form_success(session: ScenarioSession):
    actions = await _open(session)
    await actions.close_popup()
    form = fixture_data.contact_form()["with_email"]

    await actions.fill_contact_form(form)
    await actions.submit_contact_form()

    assert await actions.is_success_message_visible()
    text = await actions.get_success_message_text() or ""
    assert HOME_PAGE_DATA["expected_success_text"] in text, f"Unexpected success text: {text!r}"


@scenario(GROUP, "submitting the contact form without email shows a validation error")
async def contact_form_missing_email(session: ScenarioSession):
    actions = await _open(session)
    await actions.close_popup()
    form = fixture_data.contact_form()["without_email"]

    await actions.fill_contact_form(form)
    await actions.submit_contact_form()

    assert await actions.is_email_error_visible(), "Email error not visible"
    text = await actions.get_email_error_text() or ""
    assert HOME_PAGE_DATA["expected_email_error_text"] in text, f"Unexpected email error: {text!r}"

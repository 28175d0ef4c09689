from playwright.async_api import expect

import fixture_data
from fixture_data import PartyData
from halloween_party_page import HALLOWEEN_PARTY_DATA, PARTY_ACTION_TARGETS, HalloweenPartyActions
from scenarios import ScenarioSession, scenario


GROUP = "halloween-party"
HEADINGS = HALLOWEEN_PARTY_DATA["headings"]
MESSAGES = HALLOWEEN_PARTY_DATA["messages"]


async def _open(session: ScenarioSession, *path: str) -> HalloweenPartyActions:
    """Open the party page, then follow the named action targets in order."""
    actions = HalloweenPartyActions(session.page, verbose=session.verbose)
    await actions.navigate_to_halloween_party_page()
    await actions.close_popup_if_present()
    for key in path:
        await actions.click_party_action_target(PARTY_ACTION_TARGETS[key])
    return actions


async def _assert_heading(actions: HalloweenPartyActions, expected: str, html_section: bool = False):
    text = await (actions.get_html_section_text() if html_section else actions.get_main_heading_text())
    assert (text or "").strip() == expected, f"Expected heading {expected!r}, got {text!r}"


async def _assert_guest_selection(actions: HalloweenPartyActions):
    for guests in range(3):
        await actions.select_number_of_guests(guests)
        assert await actions.is_selected_option_value(str(guests)), f"{guests} guests not selected"


async def _assert_confirmation(actions: HalloweenPartyActions):
    await actions.complete_party_registration(fixture_data.party_data())
    assert await actions.is_confirmation_message_visible(), "Confirmation message not visible"
    text = await actions.get_confirmation_message_text() or ""
    assert MESSAGES["confirmation_success"] in text, f"Unexpected confirmation: {text!r}"


async def _assert_email_error(actions: HalloweenPartyActions):
    assert await actions.is_email_error_visible()
    text = await actions.get_email_error_text() or ""
    assert MESSAGES["email_error"] in text, f"Unexpected email error: {text!r}"


@scenario(GROUP, "party page shows the main and secondary headings")
async def page_headings(session: ScenarioSession):
    actions = await _open(session)

    main = await actions.get_main_heading_text()
    secondary = await actions.get_secondary_heading_text()

    assert (main or "").strip() == HEADINGS["main"]
    assert (secondary or "").strip() == HEADINGS["sub_heading"]


@scenario(GROUP, "host a party opens theme selection")
async def host_party(session: ScenarioSession):
    actions = await _open(session, "host_party")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["host_party"].expected_url)
    await _assert_heading(actions, HEADINGS["theme_heading"])


@scenario(GROUP, "zombies theme opens party location")
async def zombies_theme(session: ScenarioSession):
    actions = await _open(session, "host_party", "zombies_theme")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["zombies_theme"].expected_url)
    await _assert_heading(actions, HEADINGS["party_location"], html_section=True)


@scenario(GROUP, "ghosts theme opens party location")
async def ghosts_theme(session: ScenarioSession):
    actions = await _open(session, "host_party", "ghosts_theme")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["ghosts_theme"].expected_url)
    await _assert_heading(actions, HEADINGS["party_location"], html_section=True)


@scenario(GROUP, "hosted party form selects each guest count")
async def hosted_guest_count(session: ScenarioSession):
    actions = await _open(session, "host_party", "zombies_theme")
    await _assert_guest_selection(actions)


@scenario(GROUP, "hosted party form without email shows an email error")
async def hosted_missing_email(session: ScenarioSession):
    actions = await _open(session, "host_party", "zombies_theme")

    await actions.submit_form()

    await _assert_email_error(actions)


@scenario(GROUP, "hosted party form with invalid email shows an email error")
async def hosted_invalid_email(session: ScenarioSession):
    actions = await _open(session, "host_party", "zombies_theme")

    await actions.complete_party_registration(PartyData(email=fixture_data.INVALID_EMAIL, guests=1))

    await _assert_email_error(actions)


@scenario(GROUP, "hosted party form with valid email shows the confirmation")
async def hosted_valid_email(session: ScenarioSession):
    actions = await _open(session, "host_party", "zombies_theme")
    await _assert_confirmation(actions)


@scenario(GROUP, "attend a party opens location selection")
async def attend_party(session: ScenarioSession):
    actions = await _open(session, "attend_party")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["attend_party"].expected_url)
    await _assert_heading(actions, HEADINGS["attend_a_party"])


@scenario(GROUP, "Zombieton location opens party location")
async def zombieton_location(session: ScenarioSession):
    actions = await _open(session, "attend_party", "zombieton_location")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["zombieton_location"].expected_url)
    await _assert_heading(actions, HEADINGS["party_location"], html_section=True)


@scenario(GROUP, "Ghostville location opens party location")
async def ghostville_location(session: ScenarioSession):
    actions = await _open(session, "attend_party", "ghostville_location")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["ghostville_location"].expected_url)
    await _assert_heading(actions, HEADINGS["party_location"], html_section=True)


@scenario(GROUP, "go back from attend a party lands on the 404 page")
async def go_back(session: ScenarioSession):
    await _open(session, "attend_party", "go_back")

    await expect(session.page).to_have_url(PARTY_ACTION_TARGETS["go_back"].expected_url)


@scenario(GROUP, "Zombieton form selects each guest count")
async def zombieton_guest_count(session: ScenarioSession):
    actions = await _open(session, "attend_party", "zombieton_location")
    await _assert_guest_selection(actions)


@scenario(GROUP, "Zombieton form with valid email shows the confirmation")
async def zombieton_valid_email(session: ScenarioSession):
    actions = await _open(session, "attend_party", "zombieton_location")
    await _assert_confirmation(actions)


@scenario(GROUP, "Ghostville form selects each guest count")
async def ghostville_guest_count(session: ScenarioSession):
    actions = await _open(session, "attend_party", "ghostville_location")
    await _assert_guest_selection(actions)


@scenario(GROUP, "Ghostville form with valid email shows the confirmation")
async def ghostville_valid_email(session: ScenarioSession):
    actions = await _open(session, "attend_party", "ghostville_location")
    await _assert_confirmation(actions)

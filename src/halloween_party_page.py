from playwright.async_api import Page

from action_errors import ValueMismatchError
from element_helpers import ElementState, enter_text_with_validation, wait_for_state
from fixture_data import PartyData
from frame_access import FrameAccess
from popups import close_popup, close_popup_if_present, is_popup_visible
from site_urls import URLS
from transitions import ActionTarget, perform_transition


class HalloweenPartyComponents:
    main_heading = '[data-aid="SECTION_TITLE_RENDERED"]'
    secondary_heading = '[data-aid="SECONDARY_TITLE_RENDERED"]'
    host_party_button = 'a[href="/host-a-party-1"]'
    attend_party_button = 'a[href="/attend-a-party"]'

    # theme page and location page share these two
    zombies_button = 'a[href="/party-location"]:nth-of-type(1)'
    ghosts_button = 'a[href="/party-location"]:nth-of-type(2)'

    go_back_button = 'a[href="/error-404"]'

    guest_dropdown = "select#guests"
    guest_options = "select#guests option"
    email_input = 'input[role="textbox"]'
    submit_button = 'button[data-aid="SUBSCRIBE_SUBMIT_BUTTON_REND"]'
    email_error = '[data-aid="SUBSCRIBE_EMAIL_ERR_REND"]'
    confirmation_message = '[data-aid="CONFIRM_TEXT_REND"]'
    html_section = '[data-aid="HTML_SECTION_TITLE_RENDERED"]'

    popup_container = "#popup-widget190016"
    popup_close_button = "#popup-widget190016-close-icon"

    iframe = 'div[data-ux="Element"] iframe'


HALLOWEEN_PARTY_DATA = {
    "expected_title": "Halloween Party",
    "headings": {
        "main": "Halloween Party",
        "attend_a_party": "Where Is The Party",
        "sub_heading": "A Few Questions And We Will Have A Party",
        "theme_heading": "Party Theme",
        "theme_sub_heading": "What Is The Party Theme?",
        "location_heading": "Party Location",
        "error_404_heading": "404: Page Not Found",
        "party_location": "Are you bringing any guests?",
    },
    "messages": {
        "email_error": "Please enter a valid email address.",
        "confirmation_success": "If you supplied a real email we just send a validation to it.",
    },
    "timeouts": {"navigation": 10000, "frame": 10000, "dropdown": 10000, "form": 5000},
}

_components = HalloweenPartyComponents()

PARTY_ACTION_TARGETS = {
    "host_party": ActionTarget(_components.host_party_button, URLS["host_party"], close_popup=True),
    "attend_party": ActionTarget(_components.attend_party_button, URLS["attend_party"], close_popup=True),
    "zombies_theme": ActionTarget(_components.zombies_button, URLS["party_location"]),
    "ghosts_theme": ActionTarget(_components.ghosts_button, URLS["party_location"]),
    "zombieton_location": ActionTarget(_components.zombies_button, URLS["party_location"]),
    "ghostville_location": ActionTarget(_components.ghosts_button, URLS["party_location"]),
    # The site really sends "go back" to its 404 page.
    "go_back": ActionTarget(_components.go_back_button, URLS["error_404"]),
}


class HalloweenPartyActions:
    def __init__(self, page: Page, verbose: bool = False):
        self.page = page
        self.components = HalloweenPartyComponents()
        self.verbose = verbose
        self.frames = FrameAccess(
            page, self.components.iframe, timeout_ms=HALLOWEEN_PARTY_DATA["timeouts"]["frame"], verbose=verbose
        )

    def popup_selector(self) -> str:
        return self.components.popup_container

    def close_button_selector(self) -> str:
        return self.components.popup_close_button

    async def is_popup_visible(self) -> bool:
        return await is_popup_visible(self.page, self)

    async def close_popup(self):
        await close_popup(self.page, self, verbose=self.verbose)

    async def close_popup_if_present(self):
        await close_popup_if_present(self.page, self, verbose=self.verbose)

    async def navigate_to_halloween_party_page(self):
        await self.page.goto(URLS["halloween_party"])
        await self.page.wait_for_selector(self.components.main_heading)
        self.frames.reset()

    async def click_party_action_target(self, target: ActionTarget):
        await perform_transition(
            self.page,
            target,
            popup=self,
            timeout_ms=HALLOWEEN_PARTY_DATA["timeouts"]["navigation"],
            verbose=self.verbose,
        )
        self.frames.reset()

    async def select_number_of_guests(self, guests: int):
        frame = await self.frames.resolve()
        dropdown = frame.locator(self.components.guest_dropdown)
        await wait_for_state(dropdown, ElementState.VISIBLE, HALLOWEEN_PARTY_DATA["timeouts"]["dropdown"])
        await dropdown.select_option(str(guests))

        selected = await dropdown.evaluate("select => select.value")
        if selected != str(guests):
            raise ValueMismatchError("Guests", str(guests), selected)

    async def is_selected_option_value(self, value: str) -> bool:
        frame = await self.frames.resolve()
        selected_option = frame.locator(f"{self.components.guest_options}[selected]")
        return await selected_option.get_attribute("value") == value

    async def enter_email(self, email: str):
        await enter_text_with_validation(self.page, self.components.email_input, email, "Email", verbose=self.verbose)

    async def submit_form(self):
        submit = self.page.locator(self.components.submit_button)
        await wait_for_state(submit, ElementState.VISIBLE)
        await submit.click()

    async def complete_party_registration(self, party: PartyData):
        await self.select_number_of_guests(party.guests)
        await self.enter_email(party.email)
        await self.submit_form()

    async def is_email_error_visible(self) -> bool:
        return await wait_for_state(self.page.locator(self.components.email_error).last, ElementState.VISIBLE)

    async def get_email_error_text(self) -> str | None:
        return await self.page.locator(self.components.email_error).last.text_content()

    async def is_confirmation_message_visible(self) -> bool:
        """Bounded probe: False when the message does not show within the form timeout."""
        message = self.page.locator(self.components.confirmation_message)
        try:
            return await wait_for_state(message, ElementState.VISIBLE, HALLOWEEN_PARTY_DATA["timeouts"]["form"])
        except Exception:
            return False

    async def get_confirmation_message_text(self) -> str | None:
        return await self.page.locator(self.components.confirmation_message).text_content()

    async def get_main_heading_text(self) -> str | None:
        return await self.page.locator(self.components.main_heading).text_content()

    async def get_secondary_heading_text(self) -> str | None:
        return await self.page.locator(self.components.secondary_heading).text_content()

    async def get_html_section_text(self) -> str | None:
        return await self.page.locator(self.components.html_section).text_content()

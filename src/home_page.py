from playwright.async_api import Page

from element_helpers import KEYSTROKE_DELAY_MS, ElementState, enter_text_with_validation, wait_for_exact_url, wait_for_state
from fixture_data import ContactFormData
from popups import close_popup, close_popup_if_present, is_popup_visible
from site_urls import URLS


class HomePageComponents:
    popup_container = "#popup-widget307423"
    popup_close_button = "#popup-widget307423-close-icon"
    first_name_input = 'input[data-aid="First Name"]'
    last_name_input = 'input[data-aid="Last Name"]'
    email_input = 'input[data-aid="CONTACT_FORM_EMAIL"]'
    phone_input = 'input[data-aid="By entering a Phone Number you agree to our SMS Terms of Service"]'
    message_textarea = 'textarea[data-aid="CONTACT_FORM_MESSAGE"]'
    submit_button = 'button[data-aid="CONTACT_SUBMIT_BUTTON_REND"]'
    email_error_message = '[data-aid="CONTACT_EMAIL_ERR_REND"]'
    form_submit_success = '[data-aid="CONTACT_FORM_SUBMIT_SUCCESS"]'
    form_success_message = '[data-aid="CONTACT_FORM_SUBMIT_SUCCESS_MESSAGE"]'
    main_heading = "h1#dynamic-tagline-307370"


HOME_PAGE_DATA = {
    "expected_title": "CandyMapper.Com",
    "expected_success_text": "Thank you for your inquiry! We will get back to you within 48 Years.",
    "expected_email_error_text": "Please enter a valid email address.",
    "timeouts": {"navigation": 10000, "popup": 5000, "form": 5000, "success": 15000},
}


class HomePageActions:
    def __init__(self, page: Page, verbose: bool = False):
        self.page = page
        self.components = HomePageComponents()
        self.verbose = verbose

    def popup_selector(self) -> str:
        return self.components.popup_container

    def close_button_selector(self) -> str:
        return self.components.popup_close_button

    async def navigate_to_home_page(self):
        await self.page.goto(URLS["home_page"])
        await wait_for_exact_url(self.page, URLS["home_page"], HOME_PAGE_DATA["timeouts"]["navigation"])

    async def is_popup_visible(self) -> bool:
        return await is_popup_visible(self.page, self)

    async def close_popup(self):
        await close_popup(self.page, self, verbose=self.verbose)

    async def close_popup_if_present(self):
        await close_popup_if_present(self.page, self, verbose=self.verbose)

    def _keystroke_delay(self) -> int:
        # WebKit is slow enough with per-key delays to hit the scenario timeout.
        browser = self.page.context.browser
        if browser is not None and browser.browser_type.name == "webkit":
            return 0
        return KEYSTROKE_DELAY_MS

    async def _fill(self, selector: str, value: str, label: str):
        await enter_text_with_validation(
            self.page,
            selector,
            value,
            label,
            delay_ms=self._keystroke_delay(),
            scroll=True,
            check_fillable=True,
            verbose=self.verbose,
        )

    async def fill_contact_form(self, form: ContactFormData):
        # Email goes first: the form submits reliably only in that order.
        await self._fill(self.components.email_input, form.email or "", "Email")
        await self._fill(self.components.first_name_input, form.first_name, "First name")
        await self._fill(self.components.last_name_input, form.last_name, "Last name")
        if form.phone:
            await self._fill(self.components.phone_input, form.phone, "Phone")
        await self._fill(self.components.message_textarea, form.message, "Message")

    async def submit_contact_form(self):
        submit = self.page.locator(self.components.submit_button)
        await submit.scroll_into_view_if_needed()
        await wait_for_state(submit, ElementState.VISIBLE)
        await submit.hover()
        await submit.click()

    async def is_success_message_visible(self) -> bool:
        success = self.page.locator(self.components.form_submit_success)
        return await wait_for_state(success, ElementState.VISIBLE, HOME_PAGE_DATA["timeouts"]["success"])

    async def get_success_message_text(self) -> str | None:
        return await self.page.locator(self.components.form_success_message).text_content()

    async def is_email_error_visible(self) -> bool:
        return await self.page.locator(self.components.email_error_message).is_visible()

    async def get_email_error_text(self) -> str | None:
        return await self.page.locator(self.components.email_error_message).text_content()

    async def get_main_heading_text(self) -> str | None:
        return await self.page.locator(self.components.main_heading).text_content()

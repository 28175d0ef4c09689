"""Two-factor code simulation page.

The whole form lives inside an iframe. The frame is resolved once while
navigating, and every later operation goes through that memoized handle;
calling one of them before ``navigate_to_two_factor_auth_page`` raises
PreconditionError.
"""
import re

from playwright.async_api import Frame, Page

from action_errors import NotFoundError, PreconditionError
from element_helpers import ElementState, enter_text_with_validation, visible_text, wait_for_state
from fixture_data import TwoFactorAuthData
from frame_access import FrameAccess
from popups import close_popup, close_popup_if_present, is_popup_visible
from site_urls import URLS


DEMO_CODE_PATTERN = re.compile(r"Demo code: (\d{6})\)")


class TwoFactorAuthComponents:
    iframe = "#iframe-06"

    popup_container = "#popup-widget88933"
    popup_close_button = "#popup-widget88933-close-icon"

    heading = "h1"

    email_section = ".email-section"
    email_input = "#email"
    send_code_button = ".email-section button"

    verification_section = "#verificationSection"
    code_input = "#code"
    verify_code_button = ".verification-section button"

    message_container = "#message"
    success_message = ".message.success"
    error_message = ".message.error"


TWO_FACTOR_AUTH_DATA = {
    "url": URLS["two_factor_auth"],
    "expected_title": "2FA Validation code",
    "expected_heading": "2FA Code Simulation",
    "invalid_email_message": "Please enter a valid email address",
    "code_sent_message": "Code sent!",
    "verification_success_message": "Verification successful!",
    "verification_failure_message": "Invalid code. Please try again.",
    "timeouts": {"navigation": 10000, "frame": 10000, "verification": 5000},
}


def extract_demo_code(message: str | None) -> str:
    """Pull the six-digit code out of ``... (Demo code: 123456)``."""
    match = DEMO_CODE_PATTERN.search(message or "")
    if not match:
        raise NotFoundError("Could not extract verification code from message")
    return match.group(1)


class TwoFactorAuthActions:
    def __init__(self, page: Page, verbose: bool = False):
        self.page = page
        self.components = TwoFactorAuthComponents()
        self.verbose = verbose
        self.frames = FrameAccess(
            page, self.components.iframe, timeout_ms=TWO_FACTOR_AUTH_DATA["timeouts"]["frame"], verbose=verbose
        )

    def popup_selector(self) -> str:
        return self.components.popup_container

    def close_button_selector(self) -> str:
        return self.components.popup_close_button

    def _frame(self) -> Frame:
        return self.frames.require("Call navigate_to_two_factor_auth_page first.")

    async def navigate_to_two_factor_auth_page(self):
        await self.page.goto(URLS["two_factor_auth"])
        self.frames.reset()
        await self.frames.resolve()

    async def is_popup_visible(self) -> bool:
        return await is_popup_visible(self.page, self)

    async def close_popup(self):
        await close_popup(self.page, self, verbose=self.verbose)

    async def close_popup_if_present(self):
        await close_popup_if_present(self.page, self, verbose=self.verbose)

    async def get_heading_text(self) -> str | None:
        return await self.page.locator(self.components.heading).text_content()

    async def enter_email(self, email: str):
        await enter_text_with_validation(
            self._frame(), self.components.email_input, email, "Email", verbose=self.verbose
        )

    async def click_send_code(self):
        button = self._frame().locator(self.components.send_code_button)
        await wait_for_state(button, ElementState.VISIBLE)
        await button.click()

    async def is_verification_section_visible(self) -> bool:
        return await wait_for_state(self._frame().locator(self.components.verification_section), ElementState.VISIBLE)

    async def get_message_text(self) -> str | None:
        return await visible_text(self._frame().locator(self.components.message_container))

    async def extract_code_from_message(self) -> str:
        code = extract_demo_code(await self.get_message_text())
        if self.verbose:
            print(f"→ Extracted demo code {code}")
        return code

    async def enter_verification_code(self, code: str):
        await enter_text_with_validation(self._frame(), self.components.code_input, code, "Code", verbose=self.verbose)

    async def click_verify_code(self):
        button = self._frame().locator(self.components.verify_code_button)
        await wait_for_state(button, ElementState.VISIBLE)
        await button.click()

    async def is_success_message_visible(self) -> bool:
        return await wait_for_state(self._frame().locator(self.components.success_message), ElementState.VISIBLE)

    async def is_error_message_visible(self) -> bool:
        return await wait_for_state(self._frame().locator(self.components.error_message), ElementState.VISIBLE)

    async def complete_two_factor_auth(self, data: TwoFactorAuthData, use_valid_code: bool = True) -> str:
        """Run email -> send code -> enter code -> verify; return the code used.

        With ``use_valid_code`` the code is read from the rendered message,
        otherwise ``data.invalid_code`` is sent.
        """
        if not use_valid_code and not data.invalid_code:
            raise PreconditionError("Invalid code not provided in test data")

        await self.close_popup_if_present()
        await self.enter_email(data.email)
        await self.click_send_code()

        code = await self.extract_code_from_message() if use_valid_code else data.invalid_code

        await self.enter_verification_code(code)
        await self.click_verify_code()
        return code

from playwright.async_api import BrowserContext, Page

from action_errors import ActionError
from element_helpers import ElementState, visible_text, wait_for_exact_url, wait_for_state
from frame_access import FrameAccess
from popups import close_popup_if_present
from site_urls import URLS
from transitions import (
    ActionTarget,
    MenuSelectors,
    MenuType,
    TransitionKind,
    click_and_capture_new_page,
    click_menu_link_by_text,
    perform_transition,
)


class NavigationComponents:
    popup_close_button = "#popup-widget307423-close-icon"
    popup = "#popup-widget307423"

    visible_nav_items = 'ul[id="nav-307305"] li[style*="visibility: visible"]'
    nav_links = 'a[data-ux="NavLink"]'

    more_button = 'a[data-ux="NavLinkDropdown"][data-aid="NAV_MORE"]'
    more_dropdown = 'ul[id="more-307306"]'
    more_dropdown_items = 'ul[id="more-307306"] li[style*="visibility: visible"]'
    more_dropdown_links = 'a[data-ux="NavMoreMenuLink"]'

    # iframe ids change between deploys, so anchor on the wrapping element
    iframe = 'div[data-ux="Element"] iframe'
    loader = "div.loader"
    email = "#email"

    author_bio_section = "#author-bio"
    find_my_candy_title = '[data-aid="HTML_SECTION_TITLE_RENDERED"]'
    automation_sandbox_title = '[data-aid="CONTENT_SECTION_TITLE_RENDERED"]'
    mom_title = '[data-aid="CONTENT_SECTION_TITLE_RENDERED"]'
    sandbox_tools_buttons = [
        '[data-aid="CONTENT_CTA_BTN1_RENDERED"]',
        '[data-aid="CONTENT_CTA_BTN2_RENDERED"]',
        '[data-aid="CONTENT_CTA_BTN3_RENDERED"]',
        '[data-aid="CONTENT_CTA_BTN4_RENDERED"]',
    ]
    vampiras_blog_title = '[data-aid="RSS_SECTION_TITLE_RENDERED"]'


NAVIGATION_DATA = {
    "page_titles": {
        "home_page": "CandyMapper.Com",
        "join_us": "Login",
        "bcs": "British Computer Society",
        "halloween_party": "Halloween Party",
        "launch_candymapper": "Launch CandyMapper",
        "keysight": "Jonathon Wright | Keysight Blogs",
        "packt_publishing": "Enhanced Test Automation with WebdriverIO | Programming | Paperback",
        "find_my_candy": "Find My Candy",
        "automation_sandbox": "An Automation Sandbox?",
        "magic_object_model": "Magic Object Model?",
        "sandbox_tools": "Sandbox Tools",
        "vampiras_blog": "Vampira's Blog",
        "two_factor_auth": "2FA Validation code",
    },
    "menu_labels": {
        "join_us": "JOIN US",
        "bcs": "British Computer Society",
        "halloween_party": "Halloween Party",
        "launch_candymapper": "Launch CandyMapper",
        "keysight": "Keysight",
        "packt_publishing": "PACKT PUBLISHING",
        "find_my_candy": "FIND MY CANDY!",
        "automation_sandbox": "An Automation Sandbox?",
        "graveyard_links": "Graveyard Links Golfing",
        "magic_object_model": "Magic Object Model?",
        "sandbox_tools": "Sandbox Tools",
        "vampiras_blog": "Vampira's Blog",
        "two_factor_auth": "2FA Validation code",
    },
    "expected_content": {
        "find_my_candy": "Answer Me These Questions Three",
        "automation_sandbox": "What is an Automation Sandbox?",
        "magic_object_model": "MOM is understanding, forgiving and totally gets you!",
        "vampiras_blog": "Vampira's Blog",
    },
    "timeouts": {"navigation": 10000, "element_visibility": 5000, "author_bio": 10000},
}


def _dropdown(key: str) -> ActionTarget:
    return ActionTarget(
        trigger=NAVIGATION_DATA["menu_labels"][key],
        expected_url=URLS[key],
        kind=TransitionKind.DROPDOWN_LINK,
    )


NAVIGATION_TARGETS = {
    "join_us": ActionTarget(
        trigger=NAVIGATION_DATA["menu_labels"]["join_us"],
        expected_url=URLS["join_us"],
        kind=TransitionKind.NAV_LINK,
    ),
    "halloween_party": _dropdown("halloween_party"),
    "launch_candymapper": _dropdown("launch_candymapper"),
    "find_my_candy": _dropdown("find_my_candy"),
    "automation_sandbox": _dropdown("automation_sandbox"),
    "magic_object_model": _dropdown("magic_object_model"),
    "sandbox_tools": _dropdown("sandbox_tools"),
    "vampiras_blog": _dropdown("vampiras_blog"),
    "two_factor_auth": _dropdown("two_factor_auth"),
}


class NavigationActions:
    def __init__(self, page: Page, verbose: bool = False):
        self.page = page
        self.components = NavigationComponents()
        self.verbose = verbose
        self.menus = {
            MenuType.NAV: MenuSelectors(self.components.visible_nav_items, self.components.nav_links),
            MenuType.DROPDOWN: MenuSelectors(self.components.more_dropdown_items, self.components.more_dropdown_links),
        }
        self.frames = FrameAccess(page, self.components.iframe, verbose=verbose)

    def popup_selector(self) -> str:
        return self.components.popup

    def close_button_selector(self) -> str:
        return self.components.popup_close_button

    async def navigate_to_home_page(self):
        await self.page.goto(URLS["home_page"])
        await wait_for_exact_url(self.page, URLS["home_page"], NAVIGATION_DATA["timeouts"]["navigation"])
        self.frames.reset()

    async def close_popup_if_present(self):
        await close_popup_if_present(self.page, self, verbose=self.verbose)

    async def click_menu_link_by_text(self, link_text: str, menu_type: MenuType) -> int:
        try:
            menu = self.menus[MenuType(menu_type)]
        except (KeyError, ValueError):
            raise ActionError(f"Unknown menu type: {menu_type}")
        return await click_menu_link_by_text(self.page, link_text, menu, verbose=self.verbose)

    async def go_to(self, target: ActionTarget):
        await perform_transition(
            self.page,
            target,
            popup=self,
            menus=self.menus,
            timeout_ms=NAVIGATION_DATA["timeouts"]["navigation"],
            verbose=self.verbose,
        )
        # New document: any iframe resolved earlier is gone.
        self.frames.reset()

    async def click_nav_link_and_wait_for_new_page(self, link_text: str, context: BrowserContext) -> Page:
        return await click_and_capture_new_page(
            context, lambda: self.click_menu_link_by_text(link_text, MenuType.NAV)
        )

    async def click_more_menu_link_and_wait_for_new_page(self, link_text: str, context: BrowserContext) -> Page:
        return await click_and_capture_new_page(
            context, lambda: self.click_menu_link_by_text(link_text, MenuType.DROPDOWN)
        )

    async def click_more_dropdown(self):
        more_button = self.page.locator(self.components.more_button)
        await wait_for_state(more_button, ElementState.VISIBLE)
        await more_button.click()
        await wait_for_state(self.page.locator(self.components.more_dropdown), ElementState.VISIBLE)

    async def is_loader_visible(self) -> bool:
        await self.frames.resolve()
        loader = self.frames.locator_root.locator(self.components.loader)
        return await wait_for_state(loader, ElementState.VISIBLE)

    async def is_author_bio_visible(self, target_page: Page | None = None) -> bool:
        page = target_page or self.page
        bio = page.locator(self.components.author_bio_section)
        return await wait_for_state(bio, ElementState.VISIBLE, NAVIGATION_DATA["timeouts"]["author_bio"])

    async def get_find_my_candy_title(self) -> str | None:
        return await visible_text(self.page.locator(self.components.find_my_candy_title))

    async def get_automation_sandbox_title(self) -> str | None:
        return await self.page.locator(self.components.automation_sandbox_title).text_content()

    async def get_magic_object_model_title(self) -> str | None:
        return await self.page.locator(self.components.mom_title).text_content()

    async def are_sandbox_tool_buttons_visible(self) -> bool:
        all_visible = True
        for selector in self.components.sandbox_tools_buttons:
            visible = await self.page.locator(selector).is_visible()
            all_visible = all_visible and visible
        return all_visible

    async def get_vampiras_blog_title(self) -> str | None:
        return await self.page.locator(self.components.vampiras_blog_title).text_content()

    async def is_two_factor_iframe_visible(self) -> bool:
        """Non-throwing: True only if the iframe and its email input are both visible."""
        try:
            await wait_for_state(self.page.locator(self.components.iframe), ElementState.VISIBLE)
            await self.frames.resolve()
            return await self.frames.locator_root.locator(self.components.email).is_visible()
        except Exception as e:
            if self.verbose:
                print(f"→ 2FA iframe check failed: {e}")
            return False

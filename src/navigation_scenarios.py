from playwright.async_api import expect

from navigation_page import NAVIGATION_DATA, NAVIGATION_TARGETS, NavigationActions
from scenarios import ScenarioSession, scenario
from site_urls import URLS


GROUP = "navigation"
LABELS = NAVIGATION_DATA["menu_labels"]
TITLES = NAVIGATION_DATA["page_titles"]
CONTENT = NAVIGATION_DATA["expected_content"]
NAV_TIMEOUT = NAVIGATION_DATA["timeouts"]["navigation"]


async def _open(session: ScenarioSession, more_menu: bool = False) -> NavigationActions:
    actions = NavigationActions(session.page, verbose=session.verbose)
    await actions.navigate_to_home_page()
    await actions.close_popup_if_present()
    if more_menu:
        await actions.click_more_dropdown()
    return actions


@scenario(GROUP, "JOIN US nav link opens the login page")
async def join_us(session: ScenarioSession):
    actions = await _open(session)

    await actions.go_to(NAVIGATION_TARGETS["join_us"])

    await expect(session.page).to_have_url(URLS["join_us"], timeout=NAV_TIMEOUT)
    await expect(session.page).to_have_title(TITLES["join_us"], timeout=NAV_TIMEOUT)


@scenario(GROUP, "BCS nav link opens in a new tab")
async def bcs_new_tab(session: ScenarioSession):
    actions = await _open(session)

    new_page = await actions.click_nav_link_and_wait_for_new_page(LABELS["bcs"], session.context)

    await expect(new_page).to_have_url(URLS["bcs"], timeout=NAV_TIMEOUT)
    await new_page.close()


@scenario(GROUP, "Halloween Party menu link opens the party page")
async def halloween_party(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["halloween_party"])

    await expect(session.page).to_have_url(URLS["halloween_party"], timeout=NAV_TIMEOUT)
    await expect(session.page).to_have_title(TITLES["halloween_party"], timeout=NAV_TIMEOUT)


@scenario(GROUP, "Launch CandyMapper menu link shows the loader")
async def launch_candymapper(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["launch_candymapper"])

    await expect(session.page).to_have_url(URLS["launch_candymapper"], timeout=NAV_TIMEOUT)
    assert await actions.is_loader_visible()
    await expect(session.page).to_have_title(TITLES["launch_candymapper"], timeout=NAV_TIMEOUT)


@scenario(
    GROUP,
    "Keysight menu link opens the author page in a new tab",
    skip="third-party bot check on the Keysight site",
)
async def keysight_new_tab(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    new_page = await actions.click_more_menu_link_and_wait_for_new_page(LABELS["keysight"], session.context)

    await expect(new_page).to_have_url(URLS["keysight"], timeout=NAV_TIMEOUT)
    assert await actions.is_author_bio_visible(new_page)
    await expect(new_page).to_have_title(TITLES["keysight"], timeout=NAV_TIMEOUT)
    await new_page.close()


@scenario(GROUP, "PACKT PUBLISHING menu link opens the book page in a new tab")
async def packt_new_tab(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    new_page = await actions.click_more_menu_link_and_wait_for_new_page(LABELS["packt_publishing"], session.context)

    await expect(new_page).to_have_url(URLS["packt_publishing"], timeout=NAV_TIMEOUT)
    await expect(new_page).to_have_title(TITLES["packt_publishing"], timeout=NAV_TIMEOUT)
    await new_page.close()


@scenario(GROUP, "FIND MY CANDY! menu link opens the quiz page")
async def find_my_candy(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["find_my_candy"])
    title = await actions.get_find_my_candy_title() or ""

    await expect(session.page).to_have_url(URLS["find_my_candy"], timeout=NAV_TIMEOUT)
    assert CONTENT["find_my_candy"] in title, f"Unexpected section title: {title!r}"


@scenario(GROUP, "An Automation Sandbox? menu link opens the sandbox page")
async def automation_sandbox(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["automation_sandbox"])

    await expect(session.page).to_have_url(URLS["automation_sandbox"], timeout=NAV_TIMEOUT)
    title = await actions.get_automation_sandbox_title() or ""
    assert CONTENT["automation_sandbox"] in title, f"Unexpected section title: {title!r}"


@scenario(GROUP, "Graveyard Links menu link opens in a new tab")
async def graveyard_links_new_tab(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    new_page = await actions.click_more_menu_link_and_wait_for_new_page(LABELS["graveyard_links"], session.context)

    await expect(new_page).to_have_url(URLS["graveyard_links"], timeout=NAV_TIMEOUT)
    await new_page.close()


@scenario(GROUP, "Magic Object Model? menu link opens the MOM page")
async def magic_object_model(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["magic_object_model"])
    title = await actions.get_magic_object_model_title() or ""

    await expect(session.page).to_have_url(URLS["magic_object_model"], timeout=NAV_TIMEOUT)
    assert CONTENT["magic_object_model"] in title, f"Unexpected section title: {title!r}"


@scenario(GROUP, "Sandbox Tools menu link shows all tool buttons")
async def sandbox_tools(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["sandbox_tools"])
    buttons_visible = await actions.are_sandbox_tool_buttons_visible()

    await expect(session.page).to_have_url(URLS["sandbox_tools"], timeout=NAV_TIMEOUT)
    assert buttons_visible, "Not every sandbox tool button is visible"


@scenario(GROUP, "Vampira's Blog menu link opens the blog")
async def vampiras_blog(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["vampiras_blog"])
    title = await actions.get_vampiras_blog_title() or ""

    await expect(session.page).to_have_url(URLS["vampiras_blog"], timeout=NAV_TIMEOUT)
    assert CONTENT["vampiras_blog"] in title, f"Unexpected blog title: {title!r}"


@scenario(GROUP, "2FA Validation code menu link shows the 2FA iframe")
async def two_factor_auth(session: ScenarioSession):
    actions = await _open(session, more_menu=True)

    await actions.go_to(NAVIGATION_TARGETS["two_factor_auth"])
    iframe_visible = await actions.is_two_factor_iframe_visible()

    await expect(session.page).to_have_url(URLS["two_factor_auth"], timeout=NAV_TIMEOUT)
    assert iframe_visible, "2FA iframe or its email input is not visible"

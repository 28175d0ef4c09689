"""Element synchronization and input helpers shared by every page action module.

Nothing here sleeps for a fixed time: all waits go through Playwright's own
wait primitives with an explicit timeout, and a timeout always surfaces as a
WaitTimeoutError. Callers that only want to know whether something is there
must catch it themselves (see popups.is_popup_visible).
"""
from enum import Enum

from playwright.async_api import Frame, Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from action_errors import PreconditionError, ValueMismatchError, WaitTimeoutError


DEFAULT_TIMEOUT_MS = 5000
KEYSTROKE_DELAY_MS = 10


class ElementState(str, Enum):
    ATTACHED = "attached"
    DETACHED = "detached"
    VISIBLE = "visible"
    HIDDEN = "hidden"


async def wait_for_state(locator: Locator, state: ElementState | str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    """Wait until ``locator`` reaches ``state``.

    Returns True on success. Raises WaitTimeoutError naming the selector, the
    requested state and the timeout otherwise; it never returns False.
    """
    state = ElementState(state)
    try:
        await locator.wait_for(state=state.value, timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        raise WaitTimeoutError(
            f'Element with selector "{locator}" did not reach state "{state.value}" within {timeout_ms}ms.',
            selector=str(locator),
            state=state.value,
            timeout_ms=timeout_ms,
        )


async def wait_for_exact_url(page: Page, expected_url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
    # Predicate instead of a string: Playwright treats strings as glob patterns.
    try:
        await page.wait_for_url(lambda url: url == expected_url, timeout=timeout_ms)
    except PlaywrightTimeoutError:
        raise WaitTimeoutError(
            f'URL did not reach "{expected_url}" within {timeout_ms}ms (current: "{page.url}").',
            selector=expected_url,
            state="url",
            timeout_ms=timeout_ms,
        )


async def is_fillable(locator: Locator) -> bool:
    disabled = await locator.get_attribute("disabled")
    readonly = await locator.get_attribute("readonly")
    return disabled is None and readonly is None


async def enter_text_with_validation(
    context: Page | Frame,
    selector: str,
    value: str,
    field_label: str,
    delay_ms: int = KEYSTROKE_DELAY_MS,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    scroll: bool = False,
    check_fillable: bool = False,
    verbose: bool = False,
) -> None:
    """Type ``value`` into ``selector`` key by key and verify it was kept.

    Some of the target forms drop fast synthetic input, so the value is typed
    with a per-key delay and read back after blur. A difference raises
    ValueMismatchError.
    """
    field = context.locator(selector)
    if scroll:
        await field.scroll_into_view_if_needed()
    await wait_for_state(field, ElementState.VISIBLE, timeout_ms)

    if check_fillable and not await is_fillable(field):
        raise PreconditionError(f'Input with selector "{selector}" is not fillable (disabled or readonly)')

    await field.focus()
    await field.click()
    await field.clear()
    await field.press_sequentially(value, delay=delay_ms)
    await field.blur()

    actual = await field.input_value()
    if actual != value:
        raise ValueMismatchError(field_label, value, actual)
    if verbose:
        print(f"→ {field_label} entered ({len(value)} chars)")


async def visible_text(locator: Locator, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str | None:
    await wait_for_state(locator, ElementState.VISIBLE, timeout_ms)
    return await locator.text_content()

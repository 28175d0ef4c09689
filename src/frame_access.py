from playwright.async_api import Frame, FrameLocator, Page

from action_errors import NotFoundError, PreconditionError
from element_helpers import ElementState, wait_for_state


class FrameAccess:
    """Memoized access to one embedded document of a page.

    ``resolve()`` keeps two views of the same iframe: a FrameLocator for nested
    lookups and the direct Frame for things the locator root cannot do (reading
    a live ``<select>`` value, for instance). The handle is never refreshed on
    its own. If the iframe element is torn down and recreated, call ``reset()``
    and resolve again.
    """

    def __init__(self, page: Page, iframe_selector: str, timeout_ms: int = 10000, verbose: bool = False):
        self.page = page
        self.iframe_selector = iframe_selector
        self.timeout_ms = timeout_ms
        self.verbose = verbose
        self._locator_root: FrameLocator | None = None
        self._frame: Frame | None = None

    @property
    def is_resolved(self) -> bool:
        return self._frame is not None

    async def resolve(self) -> Frame:
        if self._frame is not None:
            return self._frame

        iframe = self.page.locator(self.iframe_selector).first
        await wait_for_state(iframe, ElementState.ATTACHED, self.timeout_ms)

        locator_root = self.page.frame_locator(self.iframe_selector).first
        handle = await self.page.query_selector(self.iframe_selector)
        frame = await handle.content_frame() if handle else None
        if frame is None:
            # The element is there but produced no content document.
            raise NotFoundError(f'Failed to initialize frame "{self.iframe_selector}": element attached but has no content frame.')

        self._locator_root = locator_root
        self._frame = frame
        if self.verbose:
            print(f"✓ Frame resolved: {self.iframe_selector} ({frame.url})")
        return frame

    def require(self, hint: str = "") -> Frame:
        if self._frame is None:
            raise PreconditionError(f"Frame is not initialized. {hint}".strip())
        return self._frame

    @property
    def locator_root(self) -> FrameLocator:
        if self._locator_root is None:
            raise PreconditionError("Frame is not initialized.")
        return self._locator_root

    def reset(self) -> None:
        self._locator_root = None
        self._frame = None

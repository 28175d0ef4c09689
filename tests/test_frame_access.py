import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from action_errors import NotFoundError, PreconditionError  # noqa: E402
from frame_access import FrameAccess  # noqa: E402


def _page(frame=None) -> MagicMock:
    page = MagicMock()
    page.locator.return_value.first.wait_for = AsyncMock()
    handle = MagicMock()
    handle.content_frame = AsyncMock(return_value=frame)
    page.query_selector = AsyncMock(return_value=handle)
    return page


def test_resolve_is_memoized() -> None:
    frame = MagicMock(url="https://candymapper.com/frame")
    page = _page(frame)
    frames = FrameAccess(page, "#iframe-06")

    async def resolve_twice():
        return await frames.resolve(), await frames.resolve()

    first, second = asyncio.run(resolve_twice())

    assert first is frame and second is frame
    assert frames.is_resolved
    assert frames.locator_root is page.frame_locator.return_value.first
    page.query_selector.assert_awaited_once_with("#iframe-06")


def test_reset_forces_a_fresh_lookup() -> None:
    page = _page(MagicMock())
    frames = FrameAccess(page, "#iframe-06")

    asyncio.run(frames.resolve())
    frames.reset()

    assert not frames.is_resolved
    asyncio.run(frames.resolve())
    assert page.query_selector.await_count == 2


def test_require_before_resolve_is_a_precondition_error() -> None:
    frames = FrameAccess(MagicMock(), "#iframe-06")

    with pytest.raises(PreconditionError, match="Frame is not initialized. Navigate first."):
        frames.require("Navigate first.")
    with pytest.raises(PreconditionError):
        frames.locator_root


def test_attached_iframe_without_document_is_not_found() -> None:
    frames = FrameAccess(_page(frame=None), "#iframe-06")

    with pytest.raises(NotFoundError, match="has no content frame"):
        asyncio.run(frames.resolve())
    assert not frames.is_resolved

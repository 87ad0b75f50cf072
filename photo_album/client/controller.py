"""
    Drives the gallery UI: every user intent becomes one or more reducer actions,
    and every successful mutation is followed by a full re-list from the gateway.

    The controller is single threaded by construction: it runs on one asyncio
    event loop and only compression is pushed off to a worker thread.
"""
from typing import Awaitable, Callable, Iterable, List, Optional
import asyncio
import logging

import httpx

from photo_album.client.api import GalleryApi, GalleryApiError
from photo_album.client.compression import LocalFile, compress_image
from photo_album.client.display import delete_confirmation
from photo_album.client.state import (
    Action,
    DeleteFinished,
    DeleteStarted,
    DeleteSucceeded,
    ErrorReported,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    GalleryState,
    LongPressed,
    PreviewClosed,
    PreviewOpened,
    RefreshStarted,
    SelectionCancelled,
    SelectionToggled,
    UploadFinished,
    UploadProgressed,
    UploadStarted,
    reduce,
)

log = logging.getLogger(__name__)

LONG_PRESS_SECONDS = 0.5

# Progress checkpoints of one upload
COMPRESSED_PROGRESS = 50
RESPONSE_PROGRESS = 90
DONE_PROGRESS = 100

Listener = Callable[[GalleryState], None]
Compressor = Callable[[LocalFile], Awaitable[LocalFile]]

def _log_alert(message: str) -> None:
    log.warning("Alert: %s", message)

class GalleryController:
    def __init__(
        self,
        api: GalleryApi,
        confirm: Callable[[str], bool],
        alert: Callable[[str], None] = _log_alert,
        compressor: Compressor = compress_image,
    ):
        self.api = api
        self.confirm = confirm
        self.alert = alert
        self.compressor = compressor
        self.state = GalleryState()
        self._listeners: List[Listener] = []
        self._press_timer: Optional[asyncio.TimerHandle] = None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a listener for every new state. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def dispatch(self, action: Action) -> GalleryState:
        new_state = reduce(self.state, action)
        if new_state is not self.state:
            self.state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self.state

    def report(self, message: str):
        """Records a failure in the state and alerts the user."""
        self.dispatch(ErrorReported(error=message))
        self.alert(message)

    # -------------------------
    # Listing
    # -------------------------
    async def load(self):
        """Initial load on mount."""
        self.dispatch(FetchStarted())
        await self.fetch_images()

    async def refresh(self):
        """Manual refresh. Interaction stays enabled while it runs."""
        self.dispatch(RefreshStarted())
        await self.fetch_images()

    async def fetch_images(self):
        try:
            images = await self.api.list_images()
        except GalleryApiError as e:
            log.error("Failed to fetch images: %s", e.message)
            self.dispatch(FetchFailed(error=e.message))
            self.alert(e.message)
        except httpx.HTTPError as e:
            log.error("Failed to fetch images: %s", e)
            self.dispatch(FetchFailed(error="Failed to load images, please retry"))
            self.alert("Failed to load images, please retry")
        else:
            self.dispatch(FetchSucceeded(images=tuple(images)))

    # -------------------------
    # Upload
    # -------------------------
    async def upload(self, files: Optional[Iterable[LocalFile]]):
        """Compresses and uploads the image files among `files`, then re-lists."""
        files = list(files or [])
        if not files or self.state.uploading:
            return

        images = [f for f in files if f.is_image]
        if not images:
            self.report("No image files selected")
            return

        self.dispatch(UploadStarted())
        try:
            prepared = []
            for done, file in enumerate(images, start=1):
                prepared.append(await self.compressor(file))
                self.dispatch(UploadProgressed(progress=round(done / len(images) * COMPRESSED_PROGRESS)))

            result = await self.api.upload(prepared)
            self.dispatch(UploadProgressed(progress=RESPONSE_PROGRESS))
            log.info("Uploaded %d images", result.count)

            await self.fetch_images()
            self.dispatch(UploadProgressed(progress=DONE_PROGRESS))
        except GalleryApiError as e:
            log.error("Upload rejected: %s", e.message)
            self.report(e.message)
        except httpx.HTTPError as e:
            log.error("Upload failed: %s", e)
            self.report("Upload failed, please retry")
        finally:
            self.dispatch(UploadFinished())

    # -------------------------
    # Delete
    # -------------------------
    async def delete(self, urls: Iterable[str]) -> bool:
        """Deletes `urls` after confirmation. Returns whether the delete went through."""
        urls = list(urls)
        if not urls or self.state.deleting:
            return False
        if not self.confirm(delete_confirmation(len(urls))):
            return False

        self.dispatch(DeleteStarted())
        try:
            await self.api.delete(urls)
        except GalleryApiError as e:
            log.error("Delete rejected: %s", e.message)
            self.report(e.message)
            return False
        except httpx.HTTPError as e:
            log.error("Delete failed: %s", e)
            self.report("Delete failed, please retry")
            return False
        else:
            self.dispatch(DeleteSucceeded())
            await self.fetch_images()
            return True
        finally:
            self.dispatch(DeleteFinished())

    async def delete_selected(self) -> bool:
        return await self.delete(sorted(self.state.selection))

    # -------------------------
    # Selection and preview
    # -------------------------
    def toggle_select(self, url: str):
        self.dispatch(SelectionToggled(url=url))

    def cancel_selection(self):
        self.dispatch(SelectionCancelled())

    def long_press(self, url: str):
        self.dispatch(LongPressed(url=url))

    def click_image(self, url: str):
        """Toggles selection in selection mode, opens the preview otherwise."""
        if self.state.select_mode:
            self.toggle_select(url)
        else:
            self.dispatch(PreviewOpened(url=url))

    def overlay_clicked(self, on_image: bool = False):
        """Clicks on the preview background close it; clicks on the image do not."""
        if not on_image:
            self.dispatch(PreviewClosed())

    def press_started(self, url: str):
        """Starts the long-press timer. Must be called from the running event loop."""
        self.press_ended()
        loop = asyncio.get_running_loop()
        self._press_timer = loop.call_later(LONG_PRESS_SECONDS, self._long_press_fired, url)

    def press_ended(self):
        if self._press_timer is not None:
            self._press_timer.cancel()
            self._press_timer = None

    def _long_press_fired(self, url: str):
        self._press_timer = None
        self.long_press(url)

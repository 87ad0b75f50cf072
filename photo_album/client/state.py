"""
    Immutable gallery UI state and the reducer that moves it between named actions.
    `reduce` is pure: it never mutates its input and never performs I/O.
"""
from typing import Callable, Dict, FrozenSet, Optional, Tuple, Type
from pydantic import BaseModel, ConfigDict

from photo_album.gallery.models import ImageRecord

class GalleryState(BaseModel):
    model_config = ConfigDict(frozen=True)

    images: Tuple[ImageRecord, ...] = ()
    selection: FrozenSet[str] = frozenset()
    loading: bool = True
    refreshing: bool = False
    uploading: bool = False
    upload_progress: int = 0
    deleting: bool = False
    preview_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def select_mode(self) -> bool:
        """Selection mode is active exactly when something is selected."""
        return len(self.selection) > 0

# -------------------------
# Actions
# -------------------------
class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

class FetchStarted(Action):
    pass

class RefreshStarted(Action):
    pass

class FetchSucceeded(Action):
    images: Tuple[ImageRecord, ...]

class FetchFailed(Action):
    error: str

class UploadStarted(Action):
    pass

class UploadProgressed(Action):
    progress: int

class UploadFinished(Action):
    pass

class DeleteStarted(Action):
    pass

class DeleteSucceeded(Action):
    pass

class DeleteFinished(Action):
    pass

class SelectionToggled(Action):
    url: str

class LongPressed(Action):
    url: str

class SelectionCancelled(Action):
    pass

class PreviewOpened(Action):
    url: str

class PreviewClosed(Action):
    pass

class ErrorReported(Action):
    error: str

# -------------------------
# Transitions
# -------------------------
def _fetch_started(state: GalleryState, action: FetchStarted) -> GalleryState:
    return state.model_copy(update={"loading": True})

def _refresh_started(state: GalleryState, action: RefreshStarted) -> GalleryState:
    return state.model_copy(update={"refreshing": True})

def _fetch_succeeded(state: GalleryState, action: FetchSucceeded) -> GalleryState:
    urls = {image.url for image in action.images}
    preview = state.preview_url if state.preview_url in urls else None
    return state.model_copy(update={
        "images": tuple(action.images),
        "selection": frozenset(url for url in state.selection if url in urls),
        "preview_url": preview,
        "loading": False,
        "refreshing": False,
        "error": None,
    })

def _fetch_failed(state: GalleryState, action: FetchFailed) -> GalleryState:
    return state.model_copy(update={"loading": False, "refreshing": False, "error": action.error})

def _upload_started(state: GalleryState, action: UploadStarted) -> GalleryState:
    return state.model_copy(update={"uploading": True, "upload_progress": 0})

def _upload_progressed(state: GalleryState, action: UploadProgressed) -> GalleryState:
    # Progress only moves forward while an upload is in flight
    if not state.uploading:
        return state
    progress = max(state.upload_progress, min(action.progress, 100))
    return state.model_copy(update={"upload_progress": progress})

def _upload_finished(state: GalleryState, action: UploadFinished) -> GalleryState:
    return state.model_copy(update={"uploading": False, "upload_progress": 0})

def _delete_started(state: GalleryState, action: DeleteStarted) -> GalleryState:
    return state.model_copy(update={"deleting": True})

def _delete_succeeded(state: GalleryState, action: DeleteSucceeded) -> GalleryState:
    return state.model_copy(update={"selection": frozenset()})

def _delete_finished(state: GalleryState, action: DeleteFinished) -> GalleryState:
    return state.model_copy(update={"deleting": False})

def _selection_toggled(state: GalleryState, action: SelectionToggled) -> GalleryState:
    if action.url in state.selection:
        selection = state.selection - {action.url}
    else:
        selection = state.selection | {action.url}
    return state.model_copy(update={"selection": selection})

def _long_pressed(state: GalleryState, action: LongPressed) -> GalleryState:
    if state.select_mode:
        return state
    return state.model_copy(update={"selection": frozenset({action.url})})

def _selection_cancelled(state: GalleryState, action: SelectionCancelled) -> GalleryState:
    return state.model_copy(update={"selection": frozenset()})

def _preview_opened(state: GalleryState, action: PreviewOpened) -> GalleryState:
    return state.model_copy(update={"preview_url": action.url})

def _preview_closed(state: GalleryState, action: PreviewClosed) -> GalleryState:
    return state.model_copy(update={"preview_url": None})

def _error_reported(state: GalleryState, action: ErrorReported) -> GalleryState:
    return state.model_copy(update={"error": action.error})

_TRANSITIONS: Dict[Type[Action], Callable[[GalleryState, Action], GalleryState]] = {
    FetchStarted: _fetch_started,
    RefreshStarted: _refresh_started,
    FetchSucceeded: _fetch_succeeded,
    FetchFailed: _fetch_failed,
    UploadStarted: _upload_started,
    UploadProgressed: _upload_progressed,
    UploadFinished: _upload_finished,
    DeleteStarted: _delete_started,
    DeleteSucceeded: _delete_succeeded,
    DeleteFinished: _delete_finished,
    SelectionToggled: _selection_toggled,
    LongPressed: _long_pressed,
    SelectionCancelled: _selection_cancelled,
    PreviewOpened: _preview_opened,
    PreviewClosed: _preview_closed,
    ErrorReported: _error_reported,
}

def reduce(state: GalleryState, action: Action) -> GalleryState:
    """Returns the state that follows `action`."""
    try:
        transition = _TRANSITIONS[type(action)]
    except KeyError:
        raise ValueError(f"Unknown action: {type(action).__name__}")
    return transition(state, action)

import pytest
from datetime import datetime, timezone

from photo_album.gallery.models import ImageRecord
from photo_album.client import state as gallery_state
from photo_album.client.state import (
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


def record(name, day=1):
    return ImageRecord(
        url=f"https://store.example/{name}",
        pathname=name,
        size=10,
        uploaded_at=datetime(2024, 12, day, tzinfo=timezone.utc),
    )


A, B, C = record("a.png", 3), record("b.png", 2), record("c.png", 1)


def ready(**kwargs):
    return GalleryState(images=(A, B, C), loading=False, **kwargs)


def test_initial_state_is_loading():
    state = GalleryState()
    assert state.loading is True
    assert state.images == ()
    assert state.select_mode is False


def test_reduce_returns_new_state_and_keeps_old():
    before = ready()
    after = reduce(before, SelectionToggled(url=A.url))
    assert before.selection == frozenset()
    assert after.selection == {A.url}


def test_unknown_action_rejected():
    with pytest.raises(ValueError):
        reduce(GalleryState(), gallery_state.Action())


# ------------------------------
# fetching
# ------------------------------

def test_fetch_lifecycle():
    state = reduce(GalleryState(), FetchStarted())
    assert state.loading is True
    state = reduce(state, FetchSucceeded(images=(A, B)))
    assert state.loading is False
    assert state.images == (A, B)


def test_refresh_sets_indicator_without_blocking():
    state = reduce(ready(), RefreshStarted())
    assert state.refreshing is True
    assert state.loading is False
    state = reduce(state, SelectionToggled(url=A.url))
    assert state.select_mode is True
    state = reduce(state, FetchSucceeded(images=(A, B, C)))
    assert state.refreshing is False


def test_fetch_failure_keeps_images():
    state = reduce(ready(refreshing=True), FetchFailed(error="offline"))
    assert state.images == (A, B, C)
    assert state.error == "offline"
    assert state.refreshing is False
    assert state.loading is False


def test_fetch_prunes_vanished_selection_and_preview():
    state = ready(selection=frozenset({A.url, B.url}), preview_url=C.url)
    state = reduce(state, FetchSucceeded(images=(A,)))
    assert state.selection == {A.url}
    assert state.preview_url is None


# ------------------------------
# upload progress
# ------------------------------

def test_upload_progress_is_monotonic():
    state = reduce(ready(), UploadStarted())
    assert state.uploading is True
    seen = [state.upload_progress]
    for value in (25, 50, 40, 90, 100, 150):
        state = reduce(state, UploadProgressed(progress=value))
        seen.append(state.upload_progress)
    assert seen == [0, 25, 50, 50, 90, 100, 100]


def test_upload_finished_resets_progress():
    state = reduce(reduce(ready(), UploadStarted()), UploadProgressed(progress=90))
    state = reduce(state, UploadFinished())
    assert state.uploading is False
    assert state.upload_progress == 0


def test_progress_ignored_when_not_uploading():
    state = reduce(ready(), UploadProgressed(progress=50))
    assert state.upload_progress == 0


# ------------------------------
# selection
# ------------------------------

def test_toggle_enters_and_leaves_select_mode():
    state = reduce(ready(), SelectionToggled(url=A.url))
    assert state.select_mode is True
    state = reduce(state, SelectionToggled(url=B.url))
    assert state.selection == {A.url, B.url}
    state = reduce(state, SelectionToggled(url=A.url))
    state = reduce(state, SelectionToggled(url=B.url))
    assert state.selection == frozenset()
    assert state.select_mode is False


def test_cancel_clears_selection():
    state = reduce(ready(selection=frozenset({A.url, B.url})), SelectionCancelled())
    assert state.selection == frozenset()
    assert state.select_mode is False


def test_long_press_selects_exactly_one():
    state = reduce(ready(), LongPressed(url=B.url))
    assert state.selection == {B.url}
    assert state.select_mode is True


def test_long_press_ignored_in_select_mode():
    state = ready(selection=frozenset({A.url, C.url}))
    assert reduce(state, LongPressed(url=B.url)).selection == {A.url, C.url}


def test_select_mode_matches_selection_at_every_step():
    actions = [
        SelectionToggled(url=A.url),
        LongPressed(url=B.url),
        SelectionToggled(url=B.url),
        SelectionToggled(url=A.url),
        LongPressed(url=C.url),
        DeleteStarted(),
        DeleteSucceeded(),
        DeleteFinished(),
        SelectionToggled(url=A.url),
        SelectionCancelled(),
    ]
    state = ready()
    for action in actions:
        state = reduce(state, action)
        assert state.select_mode == (len(state.selection) > 0)


# ------------------------------
# delete and preview
# ------------------------------

def test_delete_success_clears_selection():
    state = reduce(ready(selection=frozenset({A.url})), DeleteStarted())
    assert state.deleting is True
    state = reduce(state, DeleteSucceeded())
    assert state.selection == frozenset()
    state = reduce(state, DeleteFinished())
    assert state.deleting is False


def test_preview_open_and_close():
    state = reduce(ready(), PreviewOpened(url=A.url))
    assert state.preview_url == A.url
    assert reduce(state, PreviewClosed()).preview_url is None


def test_error_reported_keeps_everything_else():
    before = ready(selection=frozenset({A.url}))
    after = reduce(before, ErrorReported(error="Delete failed"))
    assert after.error == "Delete failed"
    assert after.images == before.images
    assert after.selection == before.selection


def test_successful_fetch_clears_reported_error():
    state = reduce(ready(), ErrorReported(error="Upload failed"))
    state = reduce(state, FetchSucceeded(images=(A,)))
    assert state.error is None

from __future__ import annotations

import pytest
from PIL import Image

from watermark_eraser.models.selection_model import GestureState, SelectionRect
from watermark_eraser.models.session_model import AppSession, AppState, StateError, SubmissionError


def _session_with_selection(make_image_data, start=(100, 100), end=(300, 250)) -> AppSession:
    session = AppSession()
    session.load_image(make_image_data(800, 600))
    session.begin_gesture(start)
    session.update_gesture(end)
    session.end_gesture()
    return session


def test_new_session_is_empty_and_rejects_gestures() -> None:
    session = AppSession()
    assert session.state is AppState.EMPTY
    assert session.begin_gesture((10, 10)) is False
    assert session.selection is None
    assert not session.can_submit


def test_load_image_enables_selection(make_image_data) -> None:
    session = AppSession()
    session.load_image(make_image_data(800, 600))
    assert session.state is AppState.IMAGE_LOADED
    assert session.dimensions.as_tuple() == (800, 600)

    assert session.begin_gesture((100, 100)) is True
    assert session.state is AppState.SELECTING
    assert not session.can_submit  # still dragging


def test_committed_selection_can_be_submitted(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    assert session.selection == SelectionRect(100, 100, 200, 150)
    assert session.can_submit

    image, selection = session.begin_submit()

    assert session.state is AppState.SUBMITTING
    assert image.width == 800
    assert selection == SelectionRect(100, 100, 200, 150)
    assert not session.can_submit


def test_click_without_drag_keeps_submit_disabled(make_image_data) -> None:
    session = _session_with_selection(make_image_data, start=(40, 40), end=(40, 40))
    assert session.selection == SelectionRect(40, 40, 0, 0)
    assert not session.can_submit
    with pytest.raises(SubmissionError):
        session.begin_submit()
    assert session.state is AppState.SELECTING


def test_submit_without_image_raises_user_message() -> None:
    with pytest.raises(SubmissionError, match="загрузите изображение"):
        AppSession().begin_submit()


def test_submit_without_selection_raises_user_message(make_image_data) -> None:
    session = AppSession()
    session.load_image(make_image_data())
    with pytest.raises(SubmissionError, match="Выделите"):
        session.begin_submit()
    assert session.state is AppState.IMAGE_LOADED


def test_second_submit_is_rejected_while_pending(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.begin_submit()
    with pytest.raises(SubmissionError):
        session.begin_submit()


def test_result_ready_rejects_new_gestures(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.begin_submit()
    result = Image.new("RGBA", (800, 600))
    session.complete_submit(result)

    assert session.state is AppState.RESULT_READY
    assert session.result is result
    assert session.begin_gesture((10, 10)) is False
    assert session.state is AppState.RESULT_READY
    assert session.tracker.state is GestureState.COMMITTED
    assert session.selection == SelectionRect(100, 100, 200, 150)


def test_failure_returns_to_selecting_for_retry(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.begin_submit()
    session.fail_submit()

    assert session.state is AppState.SELECTING
    assert session.selection == SelectionRect(100, 100, 200, 150)
    assert session.result is None
    assert session.can_submit
    assert session.begin_gesture((5, 5)) is True


def test_clear_selection_returns_to_image_loaded(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.clear_selection()
    assert session.state is AppState.IMAGE_LOADED
    assert session.selection is None


def test_loading_new_image_resets_selection_and_result(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.begin_submit()
    session.complete_submit(Image.new("RGBA", (800, 600)))

    session.load_image(make_image_data(320, 200))

    assert session.state is AppState.IMAGE_LOADED
    assert session.selection is None
    assert session.result is None
    assert session.tracker.bounds.as_tuple() == (320, 200)
    assert session.begin_gesture((10, 10)) is True


def test_reset_returns_to_empty(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.reset()
    assert session.state is AppState.EMPTY
    assert session.image is None
    assert session.selection is None


def test_transitions_not_allowed_while_submitting(make_image_data) -> None:
    session = _session_with_selection(make_image_data)
    session.begin_submit()
    with pytest.raises(StateError):
        session.load_image(make_image_data())
    with pytest.raises(StateError):
        session.reset()
    session.clear_selection()
    assert session.selection is not None


def test_result_outside_submission_is_a_programming_error(make_image_data) -> None:
    session = AppSession()
    session.load_image(make_image_data())
    with pytest.raises(StateError):
        session.complete_submit(Image.new("RGBA", (1, 1)))
    with pytest.raises(StateError):
        session.fail_submit()

import threading

import numpy as np
import pytest

from handpose_gesture.exceptions import ModelLoadFailure
from handpose_gesture.gesture_classifier import ClassificationResult
from handpose_gesture.presenter import PresentationState, ResultPresenter


def run_in_thread(fn):
    thread = threading.Thread(target=fn)
    thread.start()
    thread.join(timeout=5)


def test_initial_state():
    presenter = ResultPresenter(prefix="Result")

    assert presenter.state == PresentationState.IDLE
    assert presenter.text == "Result: -"


def test_updates_on_ui_thread_apply_immediately():
    presenter = ResultPresenter()

    presenter.show_result(ClassificationResult("rock", {"rock": 0.93, "paper": 0.07}))

    assert presenter.state == PresentationState.RESULT
    assert presenter.text == "Result: rock (93%)"


def test_background_updates_wait_for_drain():
    presenter = ResultPresenter()

    run_in_thread(presenter.show_no_hand)

    assert presenter.state == PresentationState.IDLE
    assert presenter.drain() == 1
    assert presenter.state == PresentationState.NO_HAND
    assert presenter.text == "Result: no hand detected"


def test_background_updates_apply_in_order():
    presenter = ResultPresenter()

    def updates():
        presenter.show_no_hand()
        presenter.show_result(ClassificationResult("paper", {"paper": 0.5}))

    run_in_thread(updates)
    presenter.drain()

    assert presenter.text == "Result: paper (50%)"


def test_drain_off_ui_thread_is_rejected():
    presenter = ResultPresenter()
    errors = []

    def drain():
        try:
            presenter.drain()
        except RuntimeError as e:
            errors.append(e)

    run_in_thread(drain)

    assert len(errors) == 1


def test_unavailable_keeps_error_detail():
    presenter = ResultPresenter()

    presenter.show_unavailable(ModelLoadFailure("model unavailable"))

    assert presenter.state == PresentationState.UNAVAILABLE
    assert presenter.text == "Result: unavailable"
    assert presenter.detail == "model unavailable"


def test_permission_required_shows_directive():
    presenter = ResultPresenter()

    presenter.show_permission_required("Open settings")

    assert presenter.state == PresentationState.PERMISSION_REQUIRED
    assert presenter.text == "Result: Open settings"


@pytest.mark.parametrize("channels", [3, 4])
def test_draw_returns_annotated_copy(channels):
    presenter = ResultPresenter()
    presenter.show_no_hand()
    frame = np.zeros((120, 480, channels), dtype=np.uint8)

    annotated = presenter.draw(frame)

    assert annotated.shape == frame.shape
    assert annotated.any()
    assert not frame.any()

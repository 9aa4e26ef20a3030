"""
Result presenter: owns the user-visible result text.

State is only touched from the thread that created the presenter (the UI
thread). Updates coming from other threads are queued and applied on the
next drain().
"""

import logging
import queue
import threading
from enum import Enum
from typing import Callable, Optional

import cv2
import numpy as np

from .gesture_classifier.result import ClassificationResult

logger = logging.getLogger(__name__)


class PresentationState(str, Enum):
    IDLE = "idle"
    RESULT = "result"
    NO_HAND = "no_hand"
    UNAVAILABLE = "unavailable"
    PERMISSION_REQUIRED = "permission_required"


class ResultPresenter:
    def __init__(self, prefix: str = "Result"):
        self.prefix = prefix
        self.state = PresentationState.IDLE
        self.text = f"{prefix}: -"
        self.detail: Optional[str] = None

        self._owner = threading.get_ident()
        self._pending: "queue.Queue[Callable[[], None]]" = queue.Queue()

    def on_ui_thread(self) -> bool:
        return threading.get_ident() == self._owner

    def post(self, update: Callable[[], None]) -> None:
        """Run update on the UI thread, now if already there, else on next drain()."""
        if self.on_ui_thread():
            update()
        else:
            self._pending.put(update)

    def drain(self) -> int:
        """Apply queued updates in order. Must be called from the UI thread."""
        if not self.on_ui_thread():
            raise RuntimeError("ResultPresenter.drain() must be called from the UI thread")

        applied = 0
        while True:
            try:
                update = self._pending.get_nowait()
            except queue.Empty:
                return applied
            update()
            applied += 1

    # Public updates, safe to call from any thread

    def show_result(self, result: ClassificationResult) -> None:
        self.post(lambda: self._set(PresentationState.RESULT, result.format()))

    def show_no_hand(self) -> None:
        self.post(lambda: self._set(PresentationState.NO_HAND, "no hand detected"))

    def show_unavailable(self, error: Optional[BaseException] = None) -> None:
        detail = str(error) if error is not None else None
        self.post(lambda: self._set(PresentationState.UNAVAILABLE, "unavailable", detail))

    def show_permission_required(self, directive: str) -> None:
        self.post(lambda: self._set(PresentationState.PERMISSION_REQUIRED, directive))

    def _set(self, state: PresentationState, message: str, detail: Optional[str] = None) -> None:
        self.state = state
        self.text = f"{self.prefix}: {message}"
        self.detail = detail
        logger.debug("[Presenter] %s", self.text)

    def draw(self, frame: np.ndarray) -> np.ndarray:
        """
        Draw the current text onto a copy of frame.

        Returns:
            Annotated frame.
        """
        annotated = frame.copy()
        font = cv2.FONT_HERSHEY_SIMPLEX
        scale = 0.8
        thickness = 2

        (text_w, text_h), baseline = cv2.getTextSize(self.text, font, scale, thickness)
        x = max(10, (annotated.shape[1] - text_w) // 2)
        y = 20 + text_h

        # Dark backing box so the label stays readable
        cv2.rectangle(
            annotated,
            (x - 10, y - text_h - 10),
            (x + text_w + 10, y + baseline + 10),
            (0, 0, 0),
            -1,
        )

        color = (255, 255, 255)
        if self.state in (PresentationState.UNAVAILABLE, PresentationState.PERMISSION_REQUIRED):
            color = (0, 0, 255)

        if annotated.ndim == 3 and annotated.shape[2] == 4:
            color = color + (255,)

        cv2.putText(annotated, self.text, (x, y), font, scale, color, thickness, cv2.LINE_AA)
        return annotated

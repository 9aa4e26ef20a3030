"""
Frame dispatcher: camera frame -> pose -> tensor -> classifier -> presenter.

Frames are handled one at a time on a single background worker. A frame that
arrives while another is still in flight is dropped, not queued, so the
displayed result always comes from a recent frame.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from .exceptions import (
    ClassificationFailure,
    GestureSystemError,
    PoseDetectionFailure,
    TensorEncodingFailure,
)
from .gesture_classifier.result import ClassificationResult
from .hand_pose.encoder import KeypointEncoder

logger = logging.getLogger(__name__)


class FrameState(str, Enum):
    IDLE = "idle"
    POSE_DETECTING = "pose_detecting"
    NO_HAND_REPORTED = "no_hand_reported"
    ENCODING = "encoding"
    CLASSIFYING = "classifying"
    REPORTED = "reported"
    FAILED = "failed"


# Error type used when a stage raises something outside the taxonomy
_STAGE_ERRORS = {
    FrameState.POSE_DETECTING: PoseDetectionFailure,
    FrameState.ENCODING: TensorEncodingFailure,
    FrameState.CLASSIFYING: ClassificationFailure,
}


@dataclass(frozen=True)
class FrameOutcome:
    """Terminal state of one frame."""

    state: FrameState
    result: Optional[ClassificationResult] = None
    error: Optional[GestureSystemError] = None


class FrameDispatcher:
    """
    Runs the per-frame pipeline.

    Usage:
        dispatcher = FrameDispatcher(estimator, classifier, presenter)
        dispatcher.start()
        session = CaptureSession(camera, on_frame=dispatcher.submit)
    """

    def __init__(
        self,
        estimator,
        classifier,
        presenter,
        encoder: Optional[KeypointEncoder] = None,
        report_failures: bool = True,
    ):
        """
        Args:
            estimator: Object with detect(frame) -> list of HandPoseObservation
            classifier: Shared GestureClassifier (read-only)
            presenter: ResultPresenter receiving updates
            encoder: KeypointEncoder (new one if None)
            report_failures: Show failures as "unavailable"; False drops them silently
        """
        self.estimator = estimator
        self.classifier = classifier
        self.presenter = presenter
        self.encoder = encoder or KeypointEncoder()
        self.report_failures = report_failures

        self.processed_frames = 0
        self.dropped_frames = 0
        self.failed_frames = 0

        self._cond = threading.Condition()
        self._pending: Optional[np.ndarray] = None
        self._busy = False
        self._running = False
        self._stopped = False
        self._worker: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Synchronous pipeline
    # ------------------------------------------------------------------

    def process_frame(self, frame: np.ndarray) -> FrameOutcome:
        """
        Run pose detection, encoding and classification for one frame.

        Never raises for pipeline errors; they end in FrameState.FAILED.
        """
        state = FrameState.POSE_DETECTING
        try:
            observations = self.estimator.detect(frame)

            if not observations:
                self._present(self.presenter.show_no_hand)
                return FrameOutcome(FrameState.NO_HAND_REPORTED)

            # Configured for one hand; anything after the first is ignored
            state = FrameState.ENCODING
            tensor = self.encoder.encode(observations[0])

            state = FrameState.CLASSIFYING
            result = self.classifier.predict(tensor)

        except Exception as e:
            error = e if isinstance(e, GestureSystemError) else self._wrap(state, e)
            return self._fail(state, error)

        self._present(lambda: self.presenter.show_result(result))
        return FrameOutcome(FrameState.REPORTED, result=result)

    @staticmethod
    def _wrap(state: FrameState, error: Exception) -> GestureSystemError:
        wrapped = _STAGE_ERRORS[state](f"{state.value} failed: {error}")
        wrapped.__cause__ = error
        return wrapped

    def _fail(self, state: FrameState, error: GestureSystemError) -> FrameOutcome:
        self.failed_frames += 1
        logger.warning("[Dispatcher] Frame failed during %s: %s", state.value, error)
        if self.report_failures:
            self._present(lambda: self.presenter.show_unavailable(error))
        return FrameOutcome(FrameState.FAILED, error=error)

    def _present(self, update: Callable[[], None]) -> None:
        if self._stopped:
            logger.debug("[Dispatcher] Stopped; discarding result")
            return
        update()

    # ------------------------------------------------------------------
    # Background lane
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        with self._cond:
            return self._busy

    def start(self) -> None:
        with self._cond:
            if self._running:
                return
            self._running = True
            self._stopped = False

        self._worker = threading.Thread(target=self._worker_loop, name="FrameDispatcher", daemon=True)
        self._worker.start()

    def submit(self, frame: np.ndarray) -> bool:
        """
        Hand a frame to the worker.

        Returns:
            True if accepted, False if dropped because a frame is in flight
            or the dispatcher is not running
        """
        with self._cond:
            if not self._running:
                return False
            if self._busy:
                self.dropped_frames += 1
                logger.debug("[Dispatcher] Busy; dropped frame (%d total)", self.dropped_frames)
                return False

            self._pending = frame
            self._busy = True
            self._cond.notify()
            return True

    def _worker_loop(self) -> None:
        while True:
            with self._cond:
                while self._running and self._pending is None:
                    self._cond.wait()
                if not self._running:
                    return
                frame = self._pending
                self._pending = None

            try:
                self.process_frame(frame)
                self.processed_frames += 1
            finally:
                with self._cond:
                    self._busy = False
                    self._cond.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no frame is in flight. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: not self._busy, timeout=timeout)

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the worker. A frame still in flight completes but is not presented."""
        with self._cond:
            self._running = False
            self._stopped = True
            if self._pending is not None:
                # Accepted but never picked up by the worker
                self._pending = None
                self._busy = False
            self._cond.notify_all()

        worker = self._worker
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=timeout)
        self._worker = None

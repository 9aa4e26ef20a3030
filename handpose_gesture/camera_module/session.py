"""
Capture session: pushes camera frames to a delegate from a background thread.
"""

import logging
import threading
import time
from typing import Callable, Optional

import numpy as np

from ..exceptions import CameraConnectionError
from .camera import Camera

logger = logging.getLogger(__name__)


class CaptureSession:
    """
    Continuous push stream of frames on a dedicated background thread.

    Stopping the session is the only way to cancel capture; frames already
    handed to on_frame are not recalled.

    Usage:
        session = CaptureSession(camera, on_frame=dispatcher.submit)
        session.start()
        ...
        session.stop()
    """

    def __init__(
        self,
        camera: Camera,
        on_frame: Callable[[np.ndarray], object],
        on_error: Optional[Callable[[Exception], None]] = None,
        idle_sleep: float = 0.01,
    ):
        self.camera = camera
        self.on_frame = on_frame
        self.on_error = on_error
        self.idle_sleep = idle_sleep

        self.running = False
        self.frames_delivered = 0
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self.running

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self.running = True

        self._thread = threading.Thread(target=self._capture_loop, name="VideoDataOutput", daemon=True)
        self._thread.start()
        logger.info("[Session] Capture started")

    def _capture_loop(self) -> None:
        while self.is_running:
            try:
                frame = self.camera.get_frame()
            except CameraConnectionError as e:
                logger.error("[Session] Camera lost: %s", e)
                with self._lock:
                    self.running = False
                if self.on_error is not None:
                    self.on_error(e)
                break

            if frame is None:
                time.sleep(self.idle_sleep)
                continue

            self.frames_delivered += 1
            self.on_frame(frame)

    def stop(self, timeout: float = 2.0) -> None:
        with self._lock:
            was_running = self.running
            self.running = False

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None

        if was_running:
            logger.info("[Session] Capture stopped after %d frames", self.frames_delivered)

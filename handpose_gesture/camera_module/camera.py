"""
Main Camera class for real-time frame capture.
"""

import logging
import time
from typing import Callable, Generator, Optional

import cv2
import numpy as np

from ..exceptions import CameraConnectionError, CameraDeviceUnavailable, CameraInputCreationFailure
from .config import CameraConfig
from .utils import convert_pixel_format, flip_frame, validate_frame

logger = logging.getLogger(__name__)


class Camera:
    """
    Camera capture class with error handling and frame processing.

    Usage:
        camera = Camera()
        for frame in camera.stream():
            # Process frame
            pass
    """

    def __init__(
        self,
        config: Optional[CameraConfig] = None,
        capture_factory: Optional[Callable[[int], object]] = None,
    ):
        """
        Initialize camera.

        Args:
            config: CameraConfig object (uses defaults if None)
            capture_factory: Callable(index) -> cv2.VideoCapture-like object
        """
        self.config = config or CameraConfig()
        self._capture_factory = capture_factory or cv2.VideoCapture
        self.cap = None
        self.is_running = False
        self.consecutive_failures = 0

        # FPS tracking
        self.frame_count = 0
        self.start_time = None

        # Initialize camera
        self._open_camera()

    def _open_camera(self) -> None:
        """
        Open camera device.

        Raises:
            CameraDeviceUnavailable: If camera cannot be opened
            CameraInputCreationFailure: If the device rejects the capture settings
        """
        logger.info("[Camera] Opening camera %d...", self.config.camera_index)

        self.cap = self._capture_factory(self.config.camera_index)

        if not self.cap.isOpened():
            self.cap = None
            raise CameraDeviceUnavailable(
                f"Could not open camera {self.config.camera_index}. "
                f"Make sure camera is connected and not in use by another application."
            )

        width, height = self.config.resolution
        width_ok = self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        height_ok = self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        if not width_ok and not height_ok:
            self.cap.release()
            self.cap = None
            raise CameraInputCreationFailure(
                f"Camera {self.config.camera_index} rejected resolution "
                f"{width}x{height} ({self.config.resolution_preset})"
            )

        if self.config.drop_late_frames:
            # Not every backend honours this; frames are still dropped downstream
            self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        actual_width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info(
            "[Camera] Opened. Resolution: %dx%d (requested: %dx%d, preset %s)",
            actual_width, actual_height, width, height, self.config.resolution_preset,
        )

        self.is_running = True
        self.start_time = time.time()

    def _reconnect(self) -> bool:
        """
        Attempt to reconnect to camera.

        Returns:
            True if reconnection successful, False otherwise
        """
        logger.warning("[Camera] Attempting to reconnect to camera...")

        try:
            self._close_camera()
            time.sleep(self.config.retry_delay)
            self._open_camera()
            self.consecutive_failures = 0
            logger.info("[Camera] Reconnection successful")
            return True

        except (CameraDeviceUnavailable, CameraInputCreationFailure) as e:
            logger.warning("[Camera] Reconnection failed: %s", e)
            return False

    def _close_camera(self) -> None:
        """Close camera device."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        self.is_running = False

    def get_frame(self) -> Optional[np.ndarray]:
        """
        Get a single frame from camera.

        Returns:
            Frame as numpy array in the configured pixel format, or None if read fails

        Raises:
            CameraConnectionError: If too many consecutive failures occur
        """
        if not self.is_running:
            return None

        ret, frame = self.cap.read()

        if not ret or not validate_frame(frame):
            self.consecutive_failures += 1

            if self.consecutive_failures >= self.config.max_consecutive_failures:
                if self.config.retry_on_disconnect:
                    if not self._reconnect():
                        raise CameraConnectionError(
                            f"Lost connection to camera after {self.consecutive_failures} failures"
                        )
                else:
                    raise CameraConnectionError(
                        f"Too many consecutive frame read failures ({self.consecutive_failures})"
                    )

            return None

        # Reset failure counter on successful read
        self.consecutive_failures = 0

        if self.config.mirror:
            frame = flip_frame(frame, horizontal=True)

        frame = convert_pixel_format(frame, self.config.pixel_format)

        self.frame_count += 1
        return frame

    def stream(self) -> Generator[np.ndarray, None, None]:
        """
        Stream frames from camera as generator.

        Yields:
            Frames as numpy arrays
        """
        while self.is_running:
            frame = self.get_frame()
            if frame is not None:
                yield frame

    def get_fps(self) -> float:
        """
        Get current FPS.

        Returns:
            Current frames per second
        """
        if self.start_time is None:
            return 0.0
        elapsed = time.time() - self.start_time
        return self.frame_count / elapsed if elapsed > 0 else 0.0

    def get_info(self) -> dict:
        """
        Get camera information.

        Returns:
            Dictionary with camera info
        """
        if not self.is_running or self.cap is None:
            return {}

        return {
            "camera_index": self.config.camera_index,
            "preset": self.config.resolution_preset,
            "pixel_format": self.config.pixel_format,
            "width": int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            "height": int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            "actual_fps": self.get_fps(),
            "is_running": self.is_running,
            "frame_count": self.frame_count,
        }

    def stop(self) -> None:
        """Stop camera and release resources."""
        if self.cap is None and not self.is_running:
            return

        self._close_camera()
        logger.info("[Camera] Stopped. Total frames captured: %d", self.frame_count)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()

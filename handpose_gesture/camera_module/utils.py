"""
Utility functions for camera module.
"""

import cv2
import numpy as np
from typing import Optional


def flip_frame(frame: np.ndarray, horizontal: bool = True, vertical: bool = False) -> np.ndarray:
    """
    Flip frame horizontally and/or vertically.

    Args:
        frame: Input frame
        horizontal: Flip horizontally (mirror)
        vertical: Flip vertically

    Returns:
        Flipped frame
    """
    if horizontal and vertical:
        return cv2.flip(frame, -1)
    elif horizontal:
        return cv2.flip(frame, 1)
    elif vertical:
        return cv2.flip(frame, 0)
    else:
        return frame


def convert_pixel_format(frame: np.ndarray, pixel_format: str) -> np.ndarray:
    """
    Convert an OpenCV BGR frame to the requested pixel format.

    Args:
        frame: BGR (or already BGRA) frame
        pixel_format: "BGRA" or "BGR"

    Returns:
        Frame in the requested layout
    """
    channels = 1 if frame.ndim == 2 else frame.shape[2]

    if pixel_format == "BGRA":
        if channels == 4:
            return frame
        if channels == 1:
            return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGRA)
        return cv2.cvtColor(frame, cv2.COLOR_BGR2BGRA)

    if pixel_format == "BGR":
        if channels == 3:
            return frame
        if channels == 1:
            return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)

    raise ValueError(f"Unsupported pixel format: {pixel_format}")


def validate_frame(frame: Optional[np.ndarray]) -> bool:
    """
    Validate that frame is usable.

    Args:
        frame: Frame to validate

    Returns:
        True if frame is valid, False otherwise
    """
    if frame is None:
        return False
    if not isinstance(frame, np.ndarray):
        return False
    if frame.size == 0:
        return False
    if len(frame.shape) not in [2, 3]:
        return False
    return True

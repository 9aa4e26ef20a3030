"""
Camera Module
Real-time camera capture for hand pose recognition.
"""

from .camera import Camera
from .config import CameraConfig, RESOLUTION_PRESETS
from .session import CaptureSession
from ..exceptions import (
    CameraError,
    CameraDeviceUnavailable,
    CameraInputCreationFailure,
    CameraConnectionError,
)

__all__ = [
    "Camera",
    "CameraConfig",
    "CaptureSession",
    "RESOLUTION_PRESETS",
    "CameraError",
    "CameraDeviceUnavailable",
    "CameraInputCreationFailure",
    "CameraConnectionError",
]

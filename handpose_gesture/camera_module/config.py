"""
Camera configuration settings.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

# Session presets -> requested (width, height)
RESOLUTION_PRESETS: Dict[str, Tuple[int, int]] = {
    "low": (320, 240),
    "medium": (640, 480),
    "high": (1280, 720),
    "hd1920x1080": (1920, 1080),
}

PIXEL_FORMATS = ("BGRA", "BGR")


@dataclass
class CameraConfig:
    """Configuration for camera capture."""

    # Camera settings
    camera_index: int = 0  # Which camera to use (0 = default/built-in)

    # Resolution
    resolution_preset: str = "high"

    # Output frames
    pixel_format: str = "BGRA"  # 32-bit BGRA or 24-bit BGR
    drop_late_frames: bool = True  # Keep only the newest frame in the driver buffer
    mirror: bool = True  # Flip horizontally for natural view

    # Error handling
    max_consecutive_failures: int = 10  # Max failed reads before reconnect / shutdown
    retry_on_disconnect: bool = True  # Try to reconnect if camera disconnects
    retry_delay: float = 1.0  # Seconds to wait before retry

    def __post_init__(self):
        """Validate configuration."""
        if self.camera_index < 0:
            raise ValueError("camera_index must be >= 0")
        if self.resolution_preset not in RESOLUTION_PRESETS:
            raise ValueError(
                f"resolution_preset must be one of {sorted(RESOLUTION_PRESETS)}"
            )
        if self.pixel_format not in PIXEL_FORMATS:
            raise ValueError(f"pixel_format must be one of {PIXEL_FORMATS}")
        if self.max_consecutive_failures <= 0:
            raise ValueError("max_consecutive_failures must be positive")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")

    @property
    def resolution(self) -> Tuple[int, int]:
        """Requested (width, height) for the preset."""
        return RESOLUTION_PRESETS[self.resolution_preset]

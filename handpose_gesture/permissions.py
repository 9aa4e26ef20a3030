"""
Camera authorization checks.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from .exceptions import PermissionDenied

logger = logging.getLogger(__name__)

SETTINGS_DIRECTIVE = "Camera access is required. Open system settings and allow camera access."


class CameraAuthorization(str, Enum):
    AUTHORIZED = "authorized"
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"


class CameraPermissionGate:
    """
    Decides whether the camera may be started.

    Args:
        status_provider: Callable returning the current CameraAuthorization
        request_access: Callable asking the user for access, returns True if granted
    """

    def __init__(
        self,
        status_provider: Callable[[], CameraAuthorization],
        request_access: Optional[Callable[[], bool]] = None,
    ):
        self.status_provider = status_provider
        self.request_access = request_access or (lambda: True)

    @classmethod
    def from_setting(cls, setting: str) -> "CameraPermissionGate":
        """Gate for platforms without a permission API; status comes from config."""
        status = CameraAuthorization(setting)
        return cls(status_provider=lambda: status)

    def ensure_authorized(self) -> None:
        """
        Raises:
            PermissionDenied: If access is denied, restricted or refused on request
        """
        status = self.status_provider()

        if status == CameraAuthorization.AUTHORIZED:
            return

        if status == CameraAuthorization.NOT_DETERMINED:
            logger.info("[Permissions] Requesting camera access")
            if self.request_access():
                return
            raise PermissionDenied("Camera access was not granted", directive=SETTINGS_DIRECTIVE)

        raise PermissionDenied(f"Camera access is {status.value}", directive=SETTINGS_DIRECTIVE)

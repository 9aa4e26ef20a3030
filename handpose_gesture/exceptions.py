"""
Custom exceptions for the hand-pose gesture system.
"""


class GestureSystemError(Exception):
    """Base exception for all gesture system errors."""
    pass


class ModelLoadFailure(GestureSystemError):
    """Raised when the classifier model cannot be loaded."""
    pass


class CameraError(GestureSystemError):
    """Base exception for camera-related errors."""
    pass


class CameraDeviceUnavailable(CameraError):
    """Raised when camera cannot be found or opened."""
    pass


class CameraInputCreationFailure(CameraError):
    """Raised when the opened camera rejects the requested input settings."""
    pass


class CameraConnectionError(CameraError):
    """Raised when camera connection is lost during operation."""
    pass


class PoseDetectionFailure(GestureSystemError):
    """Raised when the pose estimator fails on a frame."""
    pass


class TensorEncodingFailure(GestureSystemError):
    """Raised when a hand-pose observation cannot be encoded."""
    pass


class AllocationError(TensorEncodingFailure):
    """Raised when the keypoint tensor cannot be allocated."""
    pass


class ClassificationFailure(GestureSystemError):
    """Raised when the classifier fails to produce a prediction."""
    pass


class PermissionDenied(GestureSystemError):
    """
    Raised when camera access is not authorized.

    Carries the directive shown to the user (open system settings).
    """

    def __init__(self, message: str, directive: str = ""):
        super().__init__(message)
        self.directive = directive

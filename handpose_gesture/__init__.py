"""
Hand Pose Gesture Package
Live hand pose keypoint detection and gesture classification.
"""

from .dispatcher import FrameDispatcher, FrameOutcome, FrameState
from .gesture_classifier import ClassificationResult, GestureClassifier
from .hand_pose import HandJoint, HandPoseObservation, KEYPOINT_ORDER, Keypoint, encode_observation
from .presenter import PresentationState, ResultPresenter

__version__ = "1.0.0"
__all__ = [
    "FrameDispatcher",
    "FrameOutcome",
    "FrameState",
    "GestureClassifier",
    "ClassificationResult",
    "HandJoint",
    "HandPoseObservation",
    "Keypoint",
    "KEYPOINT_ORDER",
    "encode_observation",
    "ResultPresenter",
    "PresentationState",
]

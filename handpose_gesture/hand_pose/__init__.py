"""
Hand Pose Package
Hand keypoint detection and encoding into classifier input tensors.
"""

from .encoder import KeypointEncoder, encode_observation, TENSOR_SHAPE
from .estimator import HandPoseEstimator, observation_from_landmarks
from .joints import HandJoint, KEYPOINT_ORDER, NUM_JOINTS
from .types import HandPoseObservation, Keypoint

__all__ = [
    "HandJoint",
    "KEYPOINT_ORDER",
    "NUM_JOINTS",
    "Keypoint",
    "HandPoseObservation",
    "KeypointEncoder",
    "encode_observation",
    "TENSOR_SHAPE",
    "HandPoseEstimator",
    "observation_from_landmarks",
]

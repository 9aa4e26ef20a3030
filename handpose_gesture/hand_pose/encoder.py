"""
Keypoint encoder: hand-pose observation -> classifier input tensor.
"""

import numpy as np

from ..exceptions import AllocationError
from .joints import KEYPOINT_ORDER, NUM_JOINTS
from .types import HandPoseObservation

# batch, channel (x, y, confidence), joint position
TENSOR_SHAPE = (1, 3, NUM_JOINTS)

X_CHANNEL = 0
Y_CHANNEL = 1
CONFIDENCE_CHANNEL = 2


def encode_observation(observation: HandPoseObservation) -> np.ndarray:
    """
    Encode an observation into a [1, 3, 21] float64 tensor.

    Joint N of KEYPOINT_ORDER always lands at position N. Joints missing from
    the observation are written as (0.0, 0.0, 0.0).

    Raises:
        AllocationError: If the tensor cannot be allocated
    """
    try:
        tensor = np.zeros(TENSOR_SHAPE, dtype=np.float64)
    except MemoryError as e:
        raise AllocationError(f"Could not allocate keypoint tensor of shape {TENSOR_SHAPE}") from e

    for idx, joint in enumerate(KEYPOINT_ORDER):
        point = observation.get(joint, None)
        if point is None:
            # Missing joint sentinel
            tensor[0, X_CHANNEL, idx] = 0.0
            tensor[0, Y_CHANNEL, idx] = 0.0
            tensor[0, CONFIDENCE_CHANNEL, idx] = 0.0
            continue

        tensor[0, X_CHANNEL, idx] = point.x
        tensor[0, Y_CHANNEL, idx] = point.y
        tensor[0, CONFIDENCE_CHANNEL, idx] = point.confidence

    return tensor


class KeypointEncoder:
    """
    Callable wrapper around encode_observation that counts encoded observations.
    """

    def __init__(self):
        self.encoded_count = 0

    def encode(self, observation: HandPoseObservation) -> np.ndarray:
        tensor = encode_observation(observation)
        self.encoded_count += 1
        return tensor

    __call__ = encode

import numpy as np
import pytest

from handpose_gesture.exceptions import AllocationError, TensorEncodingFailure
from handpose_gesture.hand_pose import encoder as encoder_module
from handpose_gesture.hand_pose.encoder import TENSOR_SHAPE, KeypointEncoder, encode_observation
from handpose_gesture.hand_pose.joints import KEYPOINT_ORDER, HandJoint, NUM_JOINTS
from handpose_gesture.hand_pose.types import HandPoseObservation

from conftest import make_observation


def test_keypoint_order_is_fixed():
    assert [joint.value for joint in KEYPOINT_ORDER] == [
        "wrist",
        "thumb_cmc", "thumb_mp", "thumb_ip", "thumb_tip",
        "index_mcp", "index_pip", "index_dip", "index_tip",
        "middle_mcp", "middle_pip", "middle_dip", "middle_tip",
        "ring_mcp", "ring_pip", "ring_dip", "ring_tip",
        "little_mcp", "little_pip", "little_dip", "little_tip",
    ]
    assert all(joint.value == joint.name.lower() for joint in KEYPOINT_ORDER)
    assert NUM_JOINTS == 21
    assert KEYPOINT_ORDER[0] == HandJoint.WRIST
    assert KEYPOINT_ORDER[20] == HandJoint.LITTLE_TIP


def test_full_observation_reads_back(full_observation):
    tensor = encode_observation(full_observation)

    assert tensor.shape == TENSOR_SHAPE == (1, 3, 21)
    assert tensor.dtype == np.float64
    for idx, joint in enumerate(KEYPOINT_ORDER):
        point = full_observation.get(joint)
        assert tensor[0, 0, idx] == point.x
        assert tensor[0, 1, idx] == point.y
        assert tensor[0, 2, idx] == point.confidence


def test_missing_joints_are_zero_filled():
    missing = {HandJoint.WRIST, HandJoint.INDEX_TIP, HandJoint.LITTLE_TIP, HandJoint.RING_PIP}
    present = [joint for joint in KEYPOINT_ORDER if joint not in missing]
    observation = make_observation(present)

    tensor = encode_observation(observation)

    for idx, joint in enumerate(KEYPOINT_ORDER):
        if joint in missing:
            assert list(tensor[0, :, idx]) == [0.0, 0.0, 0.0]
        else:
            point = observation.get(joint)
            assert list(tensor[0, :, idx]) == [point.x, point.y, point.confidence]


def test_empty_observation_is_all_zero():
    tensor = encode_observation(HandPoseObservation())

    assert tensor.shape == (1, 3, 21)
    assert not tensor.any()


def test_allocation_failure_raises_allocation_error(monkeypatch, full_observation):
    def fail(*args, **kwargs):
        raise MemoryError()

    monkeypatch.setattr(encoder_module.np, "zeros", fail)

    with pytest.raises(AllocationError):
        encode_observation(full_observation)
    assert issubclass(AllocationError, TensorEncodingFailure)


def test_encoder_counts_calls(full_observation):
    encoder = KeypointEncoder()

    first = encoder.encode(full_observation)
    second = encoder(full_observation)

    assert encoder.encoded_count == 2
    np.testing.assert_array_equal(first, second)

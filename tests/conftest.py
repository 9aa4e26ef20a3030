import threading
from types import SimpleNamespace

import numpy as np
import pytest

from handpose_gesture.hand_pose.joints import KEYPOINT_ORDER
from handpose_gesture.hand_pose.types import HandPoseObservation, Keypoint


def make_keypoint(joint, idx):
    return Keypoint(joint=joint, x=0.01 * (idx + 1), y=0.5 + 0.01 * idx, confidence=0.9 - 0.01 * idx)


def make_observation(joints=KEYPOINT_ORDER, **kwargs):
    index = {joint: idx for idx, joint in enumerate(KEYPOINT_ORDER)}
    keypoints = {joint: make_keypoint(joint, index[joint]) for joint in joints}
    return HandPoseObservation(keypoints=keypoints, **kwargs)


class FakeEstimator:
    """Returns canned observations, or raises, and records every call."""

    def __init__(self, observations=None, error=None, gate=None):
        self.observations = list(observations or [])
        self.error = error
        self.gate = gate
        self.calls = 0
        self.started = threading.Event()

    def detect(self, frame):
        self.calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return list(self.observations)

    def close(self):
        pass


class FakeModel:
    """Keras-like model returning fixed scores."""

    def __init__(self, scores, error=None):
        self.scores = np.asarray([scores], dtype=np.float32)
        self.error = error
        self.inputs = []
        self.input_shape = (None, 3, 21)
        self.output_shape = (None, self.scores.shape[1])

    def predict(self, batch, verbose=0):
        self.inputs.append(batch)
        if self.error is not None:
            raise self.error
        return self.scores


class RecordingEncoder:
    def __init__(self):
        self.observations = []

    def encode(self, observation):
        from handpose_gesture.hand_pose.encoder import encode_observation

        self.observations.append(observation)
        return encode_observation(observation)


def fake_landmarks(count=21, visibility=0.0):
    return [
        SimpleNamespace(x=0.02 * i, y=0.04 * i, z=0.0, visibility=visibility)
        for i in range(count)
    ]


@pytest.fixture
def frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def full_observation():
    return make_observation()

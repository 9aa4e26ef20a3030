from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .joints import HandJoint


@dataclass(frozen=True)
class Keypoint:
    """A single hand joint in normalized image coordinates."""

    joint: HandJoint
    x: float
    y: float
    confidence: float  # [0..1]


@dataclass(frozen=True)
class HandPoseObservation:
    """
    Keypoints of one detected hand in one frame.

    The mapping may be partial; joints the estimator did not recognize are
    simply absent.
    """

    keypoints: Dict[HandJoint, Keypoint] = field(default_factory=dict)
    handedness_label: Optional[str] = None  # "Left" / "Right"
    handedness_score: Optional[float] = None

    def get(self, joint: HandJoint, default: Optional[Keypoint] = None) -> Optional[Keypoint]:
        return self.keypoints.get(joint, default)

    def __len__(self) -> int:
        return len(self.keypoints)

"""
Hand joint identifiers and the fixed keypoint ordering expected by the classifier.
"""

from enum import Enum
from typing import Dict, Tuple


class HandJoint(str, Enum):
    """The 21 skeletal joints of a hand."""

    WRIST = "wrist"

    THUMB_CMC = "thumb_cmc"
    THUMB_MP = "thumb_mp"
    THUMB_IP = "thumb_ip"
    THUMB_TIP = "thumb_tip"

    INDEX_MCP = "index_mcp"
    INDEX_PIP = "index_pip"
    INDEX_DIP = "index_dip"
    INDEX_TIP = "index_tip"

    MIDDLE_MCP = "middle_mcp"
    MIDDLE_PIP = "middle_pip"
    MIDDLE_DIP = "middle_dip"
    MIDDLE_TIP = "middle_tip"

    RING_MCP = "ring_mcp"
    RING_PIP = "ring_pip"
    RING_DIP = "ring_dip"
    RING_TIP = "ring_tip"

    LITTLE_MCP = "little_mcp"
    LITTLE_PIP = "little_pip"
    LITTLE_DIP = "little_dip"
    LITTLE_TIP = "little_tip"


# Order the classifier was trained on. Never reorder.
KEYPOINT_ORDER: Tuple[HandJoint, ...] = (
    HandJoint.WRIST,
    HandJoint.THUMB_CMC, HandJoint.THUMB_MP, HandJoint.THUMB_IP, HandJoint.THUMB_TIP,
    HandJoint.INDEX_MCP, HandJoint.INDEX_PIP, HandJoint.INDEX_DIP, HandJoint.INDEX_TIP,
    HandJoint.MIDDLE_MCP, HandJoint.MIDDLE_PIP, HandJoint.MIDDLE_DIP, HandJoint.MIDDLE_TIP,
    HandJoint.RING_MCP, HandJoint.RING_PIP, HandJoint.RING_DIP, HandJoint.RING_TIP,
    HandJoint.LITTLE_MCP, HandJoint.LITTLE_PIP, HandJoint.LITTLE_DIP, HandJoint.LITTLE_TIP,
)

NUM_JOINTS = len(KEYPOINT_ORDER)

JOINT_INDEX: Dict[HandJoint, int] = {joint: idx for idx, joint in enumerate(KEYPOINT_ORDER)}

# MediaPipe Hands emits landmarks 0..20 in the same order
# (its THUMB_MCP is the thumb MP joint, PINKY_* is LITTLE_*).
MEDIAPIPE_LANDMARK_TO_JOINT: Dict[int, HandJoint] = dict(enumerate(KEYPOINT_ORDER))

"""
Hand pose estimator backed by MediaPipe Hands.
"""

import logging
import time
from pathlib import Path
from types import SimpleNamespace
from typing import List, Optional, Sequence

import cv2
import numpy as np

from ..exceptions import PoseDetectionFailure
from .joints import MEDIAPIPE_LANDMARK_TO_JOINT
from .types import HandPoseObservation, Keypoint

logger = logging.getLogger(__name__)

COORDINATE_ORIGINS = ("bottom_left", "top_left")

HAND_LANDMARKER_TASK_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
)


def observation_from_landmarks(
    landmarks: Sequence,
    handedness_label: Optional[str] = None,
    handedness_score: Optional[float] = None,
    coordinate_origin: str = "bottom_left",
) -> HandPoseObservation:
    """
    Convert MediaPipe hand landmarks into a HandPoseObservation.

    Args:
        landmarks: Landmark objects with x, y (normalized, top-left origin)
            and an optional visibility
        handedness_label: "Left" / "Right" from MediaPipe
        handedness_score: Score of the handedness classification
        coordinate_origin: "bottom_left" flips y so (0, 0) is the bottom-left
            corner, "top_left" keeps MediaPipe's convention

    Returns:
        Observation holding one keypoint per landmark index 0..20
    """
    if coordinate_origin not in COORDINATE_ORIGINS:
        raise ValueError(f"coordinate_origin must be one of {COORDINATE_ORIGINS}")

    fallback_confidence = float(handedness_score) if handedness_score is not None else 1.0

    keypoints = {}
    for idx, lm in enumerate(landmarks):
        joint = MEDIAPIPE_LANDMARK_TO_JOINT.get(idx)
        if joint is None:
            continue

        x = float(lm.x)
        y = float(lm.y)
        if coordinate_origin == "bottom_left":
            y = 1.0 - y

        # Hand landmarks usually report visibility 0.0; use the hand score instead
        confidence = float(getattr(lm, "visibility", 0.0) or 0.0)
        if confidence <= 0.0:
            confidence = fallback_confidence
        confidence = min(1.0, max(0.0, confidence))

        keypoints[joint] = Keypoint(joint=joint, x=x, y=y, confidence=confidence)

    return HandPoseObservation(
        keypoints=keypoints,
        handedness_label=handedness_label,
        handedness_score=handedness_score,
    )


class _TasksHands:
    """
    Adapter giving the MediaPipe Tasks HandLandmarker the same process()
    result shape as mp.solutions.hands.Hands.

    Used when the installed mediapipe build no longer ships `mp.solutions`.
    """

    def __init__(self, mp, model_path: str, max_num_hands: int,
                 min_detection_confidence: float, min_tracking_confidence: float):
        from mediapipe.tasks.python import BaseOptions  # type: ignore
        from mediapipe.tasks.python.vision import (  # type: ignore
            HandLandmarker,
            HandLandmarkerOptions,
            RunningMode,
        )

        if not Path(model_path).exists():
            raise FileNotFoundError(
                f"MediaPipe Tasks hand landmarker model not found: {model_path}\n"
                f"Download it with:\n  curl -L -o \"{model_path}\" \"{HAND_LANDMARKER_TASK_URL}\""
            )

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=model_path),
            running_mode=RunningMode.VIDEO,
            num_hands=max_num_hands,
            min_hand_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
        self._mp = mp
        self._landmarker = HandLandmarker.create_from_options(options)
        self._last_ts = 0

    def process(self, frame_rgb: np.ndarray):
        image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=np.ascontiguousarray(frame_rgb))

        # VIDEO mode requires strictly increasing timestamps
        ts = max(int(time.monotonic() * 1000), self._last_ts + 1)
        self._last_ts = ts
        result = self._landmarker.detect_for_video(image, ts)

        hands = []
        handedness = []
        for i, landmarks in enumerate(getattr(result, "hand_landmarks", None) or []):
            hands.append(SimpleNamespace(landmark=landmarks))
            categories = []
            if i < len(result.handedness or []) and result.handedness[i]:
                cat0 = result.handedness[i][0]
                categories.append(SimpleNamespace(label=cat0.category_name, score=cat0.score))
            handedness.append(SimpleNamespace(classification=categories))

        return SimpleNamespace(multi_hand_landmarks=hands, multi_handedness=handedness)

    def close(self) -> None:
        self._landmarker.close()


def to_rgb(frame: np.ndarray) -> np.ndarray:
    """Convert a BGR / BGRA / grayscale frame to RGB."""
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


class HandPoseEstimator:
    """
    Detects hand keypoints in camera frames.

    Usage:
        with HandPoseEstimator(max_num_hands=1) as estimator:
            observations = estimator.detect(frame)
    """

    def __init__(
        self,
        max_num_hands: int = 1,
        static_image_mode: bool = False,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        coordinate_origin: str = "bottom_left",
        tasks_model_path: str = "models/hand_landmarker.task",
        hands=None,
    ):
        """
        Initialize estimator.

        Args:
            max_num_hands: Maximum number of hands to report per frame
            static_image_mode: Treat every frame as an unrelated image
            model_complexity: MediaPipe model complexity (0 or 1)
            min_detection_confidence: MediaPipe detection threshold
            min_tracking_confidence: MediaPipe tracking threshold
            coordinate_origin: "bottom_left" or "top_left"
            tasks_model_path: HandLandmarker .task file, used when mp.solutions is missing
            hands: Pre-built object with a MediaPipe-compatible process() (optional)
        """
        if max_num_hands < 1:
            raise ValueError("max_num_hands must be >= 1")
        if coordinate_origin not in COORDINATE_ORIGINS:
            raise ValueError(f"coordinate_origin must be one of {COORDINATE_ORIGINS}")

        self.max_num_hands = max_num_hands
        self.coordinate_origin = coordinate_origin

        if hands is None:
            try:
                import mediapipe as mp  # type: ignore
            except Exception as e:
                raise RuntimeError(
                    "MediaPipe is not installed. Install it with: pip install mediapipe"
                ) from e

            if hasattr(mp, "solutions"):
                hands = mp.solutions.hands.Hands(
                    static_image_mode=static_image_mode,
                    max_num_hands=max_num_hands,
                    model_complexity=model_complexity,
                    min_detection_confidence=min_detection_confidence,
                    min_tracking_confidence=min_tracking_confidence,
                )
            else:
                logger.info("[Pose] mp.solutions unavailable; using Tasks HandLandmarker")
                hands = _TasksHands(
                    mp,
                    model_path=tasks_model_path,
                    max_num_hands=max_num_hands,
                    min_detection_confidence=min_detection_confidence,
                    min_tracking_confidence=min_tracking_confidence,
                )
        self._hands = hands

    def detect(self, frame: np.ndarray) -> List[HandPoseObservation]:
        """
        Run hand pose detection on one frame.

        Args:
            frame: BGR or BGRA image (OpenCV layout)

        Returns:
            Observations best-first, at most max_num_hands. Empty if no hand.

        Raises:
            PoseDetectionFailure: If the frame cannot be processed
        """
        try:
            results = self._hands.process(to_rgb(frame))
        except Exception as e:
            raise PoseDetectionFailure(f"Hand pose detection failed: {e}") from e

        hand_landmarks_list = getattr(results, "multi_hand_landmarks", None) or []
        if not hand_landmarks_list:
            return []

        handedness_list = getattr(results, "multi_handedness", None) or []
        observations: List[HandPoseObservation] = []

        for i, hand_landmarks in enumerate(hand_landmarks_list[: self.max_num_hands]):
            label: Optional[str] = None
            score: Optional[float] = None
            if i < len(handedness_list) and handedness_list[i].classification:
                c = handedness_list[i].classification[0]
                label = getattr(c, "label", None)
                score = float(getattr(c, "score", 0.0))

            observations.append(
                observation_from_landmarks(
                    hand_landmarks.landmark,
                    handedness_label=label,
                    handedness_score=score,
                    coordinate_origin=self.coordinate_origin,
                )
            )

        return observations

    def close(self) -> None:
        close = getattr(self._hands, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "HandPoseEstimator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

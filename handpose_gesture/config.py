"""
Application configuration.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .camera_module.config import CameraConfig
from .gesture_classifier.config import ClassifierConfig
from .hand_pose.estimator import COORDINATE_ORIGINS
from .permissions import CameraAuthorization

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Configuration for the live hand pose classifier."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)

    # Pose estimation
    max_num_hands: int = 1  # The classifier takes exactly one hand
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    coordinate_origin: str = "bottom_left"  # Origin the model was trained with
    tasks_model_path: str = "models/hand_landmarker.task"  # Only used without mp.solutions

    # Error handling
    report_failures: bool = True  # False = drop failed frames without telling the user

    # Display
    result_prefix: str = "Result"
    window_name: str = "Hand Pose Classifier"

    # Permissions
    camera_authorization: str = "authorized"

    def __post_init__(self):
        """Validate configuration."""
        if self.max_num_hands != 1:
            raise ValueError("max_num_hands must be 1")
        for name in ("min_detection_confidence", "min_tracking_confidence"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1]")
        if self.coordinate_origin not in COORDINATE_ORIGINS:
            raise ValueError(f"coordinate_origin must be one of {COORDINATE_ORIGINS}")
        # Raises ValueError on unknown values
        CameraAuthorization(self.camera_authorization)


def _known(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        logger.warning("[Config] Ignoring unknown %s keys: %s", cls.__name__, ", ".join(unknown))
    return {k: v for k, v in data.items() if k in names}


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    data = dict(data or {})
    camera = CameraConfig(**_known(CameraConfig, data.pop("camera", None) or {}))
    classifier = ClassifierConfig(**_known(ClassifierConfig, data.pop("classifier", None) or {}))
    return AppConfig(camera=camera, classifier=classifier, **_known(AppConfig, data))


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from a JSON file.

    Missing file (or no path) gives the defaults.
    """
    if not path:
        return AppConfig()

    config_path = Path(path)
    if not config_path.exists():
        logger.warning("[Config] %s not found; using defaults", config_path)
        return AppConfig()

    data = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a JSON object")
    return config_from_dict(data)

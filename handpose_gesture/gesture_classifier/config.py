"""
Configuration for the gesture classifier.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

DEFAULT_CLASS_NAMES = ["paper", "rock", "scissors"]


def load_class_map(map_path: str) -> List[str]:
    """
    Load class names from a JSON class map.

    The file maps label -> output index, e.g. {"paper": 0, "rock": 1}.

    Returns:
        Labels ordered by output index
    """
    with open(map_path, "r") as f:
        raw_map = json.load(f)

    if not isinstance(raw_map, dict) or not raw_map:
        raise ValueError(f"Class map {map_path} must be a non-empty JSON object")

    idx_to_label = {int(v): str(k) for k, v in raw_map.items()}
    if sorted(idx_to_label) != list(range(len(idx_to_label))):
        raise ValueError(f"Class map {map_path} indices must be 0..{len(idx_to_label) - 1}")

    return [idx_to_label[i] for i in range(len(idx_to_label))]


@dataclass
class ClassifierConfig:
    """Configuration for loading the gesture classifier."""

    model_path: str = "hand_pose_classifier.keras"
    class_map_path: Optional[str] = None  # JSON {label: index}
    class_names: Optional[List[str]] = None  # Overrides class_map_path
    load_retries: int = 1  # Extra attempts after a failed load

    def __post_init__(self):
        """Validate configuration."""
        if self.load_retries < 0:
            raise ValueError("load_retries must be >= 0")
        if self.class_names is not None and len(set(self.class_names)) != len(self.class_names):
            raise ValueError("class_names must be unique")

    def resolve_class_names(self) -> List[str]:
        """Return class names from the explicit list, the class map, or defaults."""
        if self.class_names:
            return list(self.class_names)
        if self.class_map_path:
            if not Path(self.class_map_path).exists():
                raise FileNotFoundError(f"Class map not found: {self.class_map_path}")
            return load_class_map(self.class_map_path)
        return list(DEFAULT_CLASS_NAMES)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

"""
Gesture Classifier Package
Keras classifier mapping encoded hand keypoints to gesture labels.
"""

from .classifier import GestureClassifier
from .config import ClassifierConfig, DEFAULT_CLASS_NAMES, load_class_map
from .result import ClassificationResult

__all__ = [
    "GestureClassifier",
    "ClassifierConfig",
    "ClassificationResult",
    "DEFAULT_CLASS_NAMES",
    "load_class_map",
]

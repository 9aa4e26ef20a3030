"""
Main GestureClassifier class.
Maps encoded hand keypoint tensors to gesture labels.
"""

import logging
import os
from typing import List, Optional, Sequence

import numpy as np

from ..exceptions import ClassificationFailure, ModelLoadFailure
from ..hand_pose.encoder import TENSOR_SHAPE
from .config import ClassifierConfig
from .result import ClassificationResult

logger = logging.getLogger(__name__)


def _load_keras_model(model_path: str):
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")
    from tensorflow.keras.models import load_model

    return load_model(model_path)


class GestureClassifier:
    """
    Hand pose gesture classifier.

    The handle is built once and shared read-only between frames; it keeps no
    per-prediction state.

    Usage:
        classifier = GestureClassifier.load("hand_pose_classifier.keras")
        result = classifier.predict(tensor)
    """

    def __init__(self, model, class_names: Sequence[str]):
        """
        Initialize gesture classifier.

        Args:
            model: Loaded model exposing predict(batch, verbose=0)
            class_names: Gesture labels in model output order
        """
        if not class_names:
            raise ValueError("class_names must not be empty")

        self._model = model
        self._class_names = tuple(class_names)

    @property
    def class_names(self) -> List[str]:
        return list(self._class_names)

    @classmethod
    def load(
        cls,
        model_path: str,
        class_names: Optional[Sequence[str]] = None,
        class_map_path: Optional[str] = None,
        retries: int = 1,
        loader=None,
    ) -> "GestureClassifier":
        """
        Load a Keras model from disk.

        Args:
            model_path: Path to trained Keras model
            class_names: Gesture labels in output order (optional)
            class_map_path: JSON {label: index} used when class_names is None
            retries: Extra load attempts after the first failure
            loader: Callable(model_path) -> model (default: Keras load_model)

        Raises:
            ModelLoadFailure: If every attempt fails
        """
        config = ClassifierConfig(
            model_path=model_path,
            class_map_path=class_map_path,
            class_names=list(class_names) if class_names else None,
            load_retries=retries,
        )
        return cls.from_config(config, loader=loader)

    @classmethod
    def from_config(cls, config: ClassifierConfig, loader=None) -> "GestureClassifier":
        loader = loader or _load_keras_model

        try:
            names = config.resolve_class_names()
        except (OSError, ValueError) as e:
            raise ModelLoadFailure(f"Could not read class names: {e}") from e

        attempts = config.load_retries + 1
        last_error: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            try:
                logger.info("[Classifier] Loading model %s (attempt %d/%d)", config.model_path, attempt, attempts)
                model = loader(config.model_path)
                return cls(model, names)
            except Exception as e:
                last_error = e
                logger.warning("[Classifier] Model load failed: %s", e)

        raise ModelLoadFailure(
            f"Could not load model {config.model_path} after {attempts} attempt(s): {last_error}"
        ) from last_error

    def predict(self, tensor: np.ndarray) -> ClassificationResult:
        """
        Classify one encoded hand pose.

        Args:
            tensor: Encoded keypoints of shape (1, 3, 21)

        Returns:
            ClassificationResult with the top label and all probabilities

        Raises:
            ClassificationFailure: On bad input shape or model errors
        """
        if tuple(np.shape(tensor)) != TENSOR_SHAPE:
            raise ClassificationFailure(
                f"Expected tensor of shape {TENSOR_SHAPE}, got {tuple(np.shape(tensor))}"
            )

        try:
            predictions = np.asarray(self._model.predict(tensor, verbose=0))[0]
        except Exception as e:
            raise ClassificationFailure(f"Model prediction failed: {e}") from e

        predictions = np.ravel(predictions)
        if predictions.shape[0] != len(self._class_names):
            raise ClassificationFailure(
                f"Model returned {predictions.shape[0]} scores for {len(self._class_names)} classes"
            )
        if not np.all(np.isfinite(predictions)):
            raise ClassificationFailure(f"Model returned non-finite scores: {predictions.tolist()}")

        class_idx = int(np.argmax(predictions))
        probabilities = {
            name: float(conf)
            for name, conf in zip(self._class_names, predictions)
        }

        return ClassificationResult(label=self._class_names[class_idx], probabilities=probabilities)

    def get_model_info(self) -> dict:
        """
        Get information about the loaded model.

        Returns:
            Dictionary with model information
        """
        return {
            "input_shape": getattr(self._model, "input_shape", TENSOR_SHAPE),
            "output_shape": getattr(self._model, "output_shape", None),
            "num_classes": len(self._class_names),
            "class_names": self.class_names,
        }

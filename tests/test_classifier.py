import json

import numpy as np
import pytest

from handpose_gesture.exceptions import ClassificationFailure, ModelLoadFailure
from handpose_gesture.gesture_classifier import (
    ClassificationResult,
    ClassifierConfig,
    DEFAULT_CLASS_NAMES,
    GestureClassifier,
    load_class_map,
)
from handpose_gesture.hand_pose.encoder import encode_observation

from conftest import FakeModel


def test_predict_returns_top_label_and_probabilities(full_observation):
    model = FakeModel([0.1, 0.7, 0.2])
    classifier = GestureClassifier(model, ["paper", "rock", "scissors"])
    tensor = encode_observation(full_observation)

    result = classifier.predict(tensor)

    assert result.label == "rock"
    assert result.probabilities == pytest.approx({"paper": 0.1, "rock": 0.7, "scissors": 0.2})
    assert sum(result.probabilities.values()) == pytest.approx(1.0)
    assert model.inputs[0] is tensor


def test_predict_rejects_wrong_shape():
    classifier = GestureClassifier(FakeModel([1.0, 0.0, 0.0]), DEFAULT_CLASS_NAMES)

    with pytest.raises(ClassificationFailure):
        classifier.predict(np.zeros((1, 21, 3)))


def test_predict_wraps_model_errors(full_observation):
    classifier = GestureClassifier(FakeModel([1.0], error=RuntimeError("bad")), ["only"])

    with pytest.raises(ClassificationFailure):
        classifier.predict(encode_observation(full_observation))


def test_predict_detects_class_count_mismatch(full_observation):
    classifier = GestureClassifier(FakeModel([0.5, 0.5]), DEFAULT_CLASS_NAMES)

    with pytest.raises(ClassificationFailure):
        classifier.predict(encode_observation(full_observation))


def test_classifier_is_reusable(full_observation):
    classifier = GestureClassifier(FakeModel([0.2, 0.3, 0.5]), DEFAULT_CLASS_NAMES)
    tensor = encode_observation(full_observation)

    assert classifier.predict(tensor) == classifier.predict(tensor)


def test_load_retries_once_then_succeeds():
    attempts = []

    def flaky_loader(path):
        attempts.append(path)
        if len(attempts) == 1:
            raise OSError("disk hiccup")
        return FakeModel([0.3, 0.3, 0.4])

    classifier = GestureClassifier.load("model.keras", loader=flaky_loader)

    assert attempts == ["model.keras", "model.keras"]
    assert classifier.class_names == DEFAULT_CLASS_NAMES


def test_load_raises_after_persistent_failure():
    attempts = []

    def broken_loader(path):
        attempts.append(path)
        raise OSError("missing")

    with pytest.raises(ModelLoadFailure):
        GestureClassifier.load("model.keras", retries=1, loader=broken_loader)
    assert len(attempts) == 2


def test_load_uses_class_map(tmp_path):
    class_map = tmp_path / "classes.json"
    class_map.write_text(json.dumps({"rock": 1, "paper": 0, "scissors": 2}))

    classifier = GestureClassifier.load(
        "model.keras", class_map_path=str(class_map), loader=lambda path: FakeModel([0, 0, 1])
    )

    assert classifier.class_names == ["paper", "rock", "scissors"]


def test_missing_class_map_is_a_load_failure(tmp_path):
    with pytest.raises(ModelLoadFailure):
        GestureClassifier.load(
            "model.keras",
            class_map_path=str(tmp_path / "nope.json"),
            loader=lambda path: FakeModel([1.0]),
        )


def test_load_class_map_rejects_gaps(tmp_path):
    class_map = tmp_path / "classes.json"
    class_map.write_text(json.dumps({"rock": 0, "paper": 2}))

    with pytest.raises(ValueError):
        load_class_map(str(class_map))


def test_config_validation():
    with pytest.raises(ValueError):
        ClassifierConfig(load_retries=-1)
    with pytest.raises(ValueError):
        ClassifierConfig(class_names=["rock", "rock"])


def test_model_info():
    classifier = GestureClassifier(FakeModel([0.2, 0.3, 0.5]), DEFAULT_CLASS_NAMES)

    info = classifier.get_model_info()

    assert info["num_classes"] == 3
    assert info["input_shape"] == (None, 3, 21)


@pytest.mark.parametrize(
    "probability, percent",
    [(0.0, 0), (0.5, 50), (0.875, 87), (0.999, 99), (1.0, 100), (1.2, 100), (-0.1, 0)],
)
def test_confidence_percent_is_floored_and_clamped(probability, percent):
    result = ClassificationResult(label="rock", probabilities={"rock": probability})

    assert result.confidence_percent == percent
    assert isinstance(result.confidence_percent, int)


def test_result_format():
    result = ClassificationResult(label="scissors", probabilities={"scissors": 0.875, "rock": 0.125})

    assert result.format() == "scissors (87%)"


def test_missing_label_probability_is_zero():
    assert ClassificationResult(label="rock", probabilities={}).confidence_percent == 0


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf")])
def test_predict_rejects_non_finite_scores(full_observation, bad):
    classifier = GestureClassifier(FakeModel([bad, 0.5, 0.5]), DEFAULT_CLASS_NAMES)

    with pytest.raises(ClassificationFailure):
        classifier.predict(encode_observation(full_observation))


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_confidence_shows_zero_percent(bad):
    result = ClassificationResult(label="rock", probabilities={"rock": bad})

    assert result.confidence_percent == 0
    assert result.format() == "rock (0%)"

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class ClassificationResult:
    """Predicted gesture label plus the probability of every label."""

    label: str
    probabilities: Dict[str, float] = field(default_factory=dict)

    @property
    def confidence(self) -> float:
        return float(self.probabilities.get(self.label, 0.0))

    @property
    def confidence_percent(self) -> int:
        """Confidence truncated to a whole percent in [0, 100]."""
        confidence = self.confidence
        if not math.isfinite(confidence):
            return 0
        percent = math.floor(confidence * 100)
        return max(0, min(100, int(percent)))

    def format(self) -> str:
        return f"{self.label} ({self.confidence_percent}%)"

"""
Single-sample prediction

PredictionService wraps a FittedPipeline and scores individual traffic
samples: raw margin, probability of normal traffic and the resulting
label. Samples do not need a label.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..data.samples import TrafficSample
from ..exceptions import ModelStateError
from ..models.gbdt_components.data_transforms import sigmoid
from ..pipeline import FittedPipeline


@dataclass(frozen=True)
class PredictionResult:
    """
    Attributes:
    -----------
    label : bool
        True when the sample is predicted normal (probability >= 0.5)
    score : float
        Raw margin before the sigmoid
    probability : float
        Probability that the sample is normal traffic
    """

    label: bool
    score: float
    probability: float


def _require_pipeline(pipeline: FittedPipeline) -> FittedPipeline:
    if pipeline is None:
        raise ModelStateError("No fitted pipeline available for prediction")
    if not isinstance(pipeline, FittedPipeline):
        raise ModelStateError(f"Expected a FittedPipeline, got {type(pipeline).__name__}")
    return pipeline


def predict(pipeline: FittedPipeline, sample: TrafficSample) -> PredictionResult:
    """Score one sample with a fitted pipeline."""
    return predict_many(pipeline, [sample])[0]


def predict_many(pipeline: FittedPipeline, samples: Sequence[TrafficSample]) -> List[PredictionResult]:
    pipeline = _require_pipeline(pipeline)
    if len(samples) == 0:
        return []
    scores = pipeline.decision_function(samples)
    probabilities = sigmoid(scores)
    return [
        PredictionResult(label=bool(p >= 0.5), score=float(s), probability=float(p))
        for s, p in zip(scores, probabilities)
    ]


class PredictionService:
    """
    Holds a fitted pipeline for repeated single-sample scoring

    Parameters:
    -----------
    pipeline : FittedPipeline
        Normalization model and ensemble produced by TrafficPipeline.fit
    """

    def __init__(self, pipeline: FittedPipeline):
        self.pipeline = _require_pipeline(pipeline)

    @classmethod
    def from_file(cls, file_path: str) -> "PredictionService":
        return cls(FittedPipeline.load(file_path))

    def predict(self, sample: TrafficSample) -> PredictionResult:
        return predict(self.pipeline, sample)

    def predict_many(self, samples: Sequence[TrafficSample]) -> List[PredictionResult]:
        return predict_many(self.pipeline, samples)

    def predict_frame(self, samples) -> np.ndarray:
        """Probabilities for a DataFrame or sequence of samples."""
        return self.pipeline.predict_proba(samples)

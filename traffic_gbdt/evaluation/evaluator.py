"""
Evaluator

Scores a dataset with a fitted ensemble and computes accuracy, AUC, F1
and the supporting binary metrics. Inputs are never modified.
"""

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..config import is_real_number
from ..data.samples import SampleInput
from ..exceptions import ConfigError, DataError, ModelStateError
from ..models.gbdt_components.ensemble import Ensemble, require_ensemble
from ..models.gbdt_components.data_transforms import validate_input_data
from .metrics import DEFAULT_THRESHOLD, EvaluationMetrics, compute_metrics

if TYPE_CHECKING:
    from ..pipeline import FittedPipeline

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Parameters:
    -----------
    threshold : float, default=0.5
        Probability at or above which a sample is classified normal
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        if not is_real_number(threshold) or not 0.0 <= threshold <= 1.0:
            raise ConfigError(f"threshold must be in [0, 1], got {threshold!r}")
        self.threshold = threshold

    def evaluate(self, ensemble: Ensemble, features: np.ndarray, labels: np.ndarray) -> EvaluationMetrics:
        """
        Metrics for normalized feature vectors and 0/1 labels

        Parameters:
        -----------
        ensemble : Ensemble
            Fitted model
        features : array-like, shape=(n_samples, n_features)
            Normalized feature vectors
        labels : array-like, shape=(n_samples,)
            1 = normal, 0 = anomaly

        Returns:
        --------
        metrics : EvaluationMetrics
        """
        ensemble = require_ensemble(ensemble)
        features = np.asarray(features, dtype=np.float64)
        labels = np.asarray(labels, dtype=np.float64).ravel()
        if features.ndim != 2 or features.shape[0] == 0:
            raise DataError("Cannot evaluate on an empty dataset")
        if features.shape[0] != labels.shape[0]:
            raise DataError(f"{features.shape[0]} feature vectors but {labels.shape[0]} labels")
        # rejects NaN/inf features and labels outside {0, 1}
        features, labels = validate_input_data(features, labels)

        probabilities = ensemble.predict_proba(features)
        metrics = compute_metrics(labels, probabilities, self.threshold)
        logger.info("Evaluated %d samples: accuracy=%.4f auc=%.4f f1=%.4f",
                    labels.shape[0], metrics.accuracy, metrics.auc, metrics.f1)
        return metrics

    def evaluate_samples(self, pipeline: "FittedPipeline", samples: SampleInput) -> EvaluationMetrics:
        """Normalize raw samples with the pipeline's model, then evaluate."""
        if pipeline is None:
            raise ModelStateError("No fitted pipeline to evaluate")
        features = pipeline.transform(samples)
        labels = pipeline.assembler.labels(samples)
        return self.evaluate(pipeline.ensemble, features, labels)

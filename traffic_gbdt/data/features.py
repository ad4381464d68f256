"""
Feature assembly and min-max normalization

FeatureAssembler turns samples into fixed-order feature matrices and
fits a NormalizationModel (per-feature min/max) on a training set. The
same model is then applied, without clipping, to evaluation and inference
data.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from ..exceptions import DataError
from .samples import FEATURE_NAMES, SampleInput, feature_matrix, label_vector


@dataclass(frozen=True, eq=False)
class NormalizationModel:
    """
    Per-feature (min, max) learned from a training set

    Attributes:
    -----------
    feature_names : tuple of str
        Feature order the model was fitted on
    minimums : np.ndarray, shape=(n_features,)
    maximums : np.ndarray, shape=(n_features,)
    """

    feature_names: Tuple[str, ...]
    minimums: np.ndarray
    maximums: np.ndarray

    def __post_init__(self):
        minimums = np.array(self.minimums, dtype=np.float64)
        maximums = np.array(self.maximums, dtype=np.float64)
        if minimums.shape != (len(self.feature_names),) or maximums.shape != minimums.shape:
            raise DataError("minimums/maximums must have one entry per feature")
        minimums.flags.writeable = False
        maximums.flags.writeable = False
        object.__setattr__(self, "feature_names", tuple(self.feature_names))
        object.__setattr__(self, "minimums", minimums)
        object.__setattr__(self, "maximums", maximums)

    @property
    def n_features(self) -> int:
        return len(self.feature_names)

    def apply(self, X: np.ndarray) -> np.ndarray:
        """Scale a raw feature matrix; constant features map to 0."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2 or X.shape[1] != self.n_features:
            raise DataError(f"Expected {self.n_features} feature columns, got shape {X.shape}")
        span = self.maximums - self.minimums
        constant = span == 0
        safe_span = np.where(constant, 1.0, span)
        scaled = (X - self.minimums) / safe_span
        scaled[:, constant] = 0.0
        return scaled

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature_names": list(self.feature_names),
            "minimums": self.minimums.tolist(),
            "maximums": self.maximums.tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormalizationModel":
        return cls(
            feature_names=tuple(data["feature_names"]),
            minimums=np.asarray(data["minimums"], dtype=np.float64),
            maximums=np.asarray(data["maximums"], dtype=np.float64),
        )


class FeatureAssembler:
    """
    Concatenates the raw numeric fields into feature vectors

    The column order is FEATURE_NAMES for every sample. `fit` learns the
    normalization, `transform` applies it and returns a read-only matrix
    whose rows are the feature vectors.
    """

    def __init__(self, feature_names: Sequence[str] = FEATURE_NAMES):
        unknown = [name for name in feature_names if name not in FEATURE_NAMES]
        if unknown:
            raise DataError(f"Unknown feature names: {unknown}")
        self.feature_names = tuple(feature_names)
        self._columns = [FEATURE_NAMES.index(name) for name in self.feature_names]

    def assemble(self, samples: SampleInput) -> np.ndarray:
        """
        Raw (unnormalized) feature matrix, validated

        Raises DataError on NaN/inf or negative values.
        """
        X = feature_matrix(samples)[:, self._columns]
        if X.size and not np.all(np.isfinite(X)):
            raise DataError("Feature values contain NaN or inf")
        if X.size and np.any(X < 0):
            bad = sorted({self.feature_names[j] for j in np.where(X < 0)[1]})
            raise DataError(f"Negative feature values in: {bad}")
        return X

    def fit(self, samples: SampleInput) -> NormalizationModel:
        X = self.assemble(samples)
        if X.shape[0] == 0:
            raise DataError("Cannot fit normalization on an empty sample set")
        return NormalizationModel(
            feature_names=self.feature_names,
            minimums=X.min(axis=0),
            maximums=X.max(axis=0),
        )

    def transform(self, samples: SampleInput, model: NormalizationModel) -> np.ndarray:
        """
        Apply a fitted NormalizationModel

        Values outside the training range are not clipped, so held-out
        data may fall outside [0, 1].

        Returns:
        --------
        features : np.ndarray, shape=(n_samples, n_features), read-only
        """
        if model.feature_names != self.feature_names:
            raise DataError(
                f"Normalization was fitted on {model.feature_names}, assembler uses {self.feature_names}"
            )
        features = model.apply(self.assemble(samples))
        features.flags.writeable = False
        return features

    def fit_transform(self, samples: SampleInput) -> Tuple[NormalizationModel, np.ndarray]:
        model = self.fit(samples)
        return model, self.transform(samples, model)

    @staticmethod
    def labels(samples: SampleInput) -> np.ndarray:
        return label_vector(samples)

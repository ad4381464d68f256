"""
Fitted boosted-tree ensemble

The Ensemble is the immutable result of training: an ordered tuple of
regression trees, the shrinkage applied to each of them and the initial
bias (log-odds of the training base rate).
"""

import json
from typing import Any, Dict, Iterator, Optional, Sequence

import numpy as np

from ...exceptions import DataError, ModelStateError
from .data_transforms import sigmoid
from .tree_node import RegressionTree


class Ensemble:
    """
    Immutable additive tree model

    Parameters:
    -----------
    trees : sequence of RegressionTree
        Trees in the order they were boosted
    base_prediction : float
        Initial margin, log(p / (1 - p))
    learning_rate : float
        Shrinkage applied to every tree output
    n_features : int
        Width of the feature vectors the model expects
    """

    __slots__ = ("_trees", "_base_prediction", "_learning_rate", "_n_features")

    def __init__(self,
                 trees: Sequence[RegressionTree],
                 base_prediction: float,
                 learning_rate: float,
                 n_features: int):
        object.__setattr__(self, "_trees", tuple(trees))
        object.__setattr__(self, "_base_prediction", float(base_prediction))
        object.__setattr__(self, "_learning_rate", float(learning_rate))
        object.__setattr__(self, "_n_features", int(n_features))

    def __setattr__(self, name, value):
        raise AttributeError("Ensemble is immutable")

    @property
    def trees(self):
        return self._trees

    @property
    def base_prediction(self) -> float:
        return self._base_prediction

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @property
    def n_features(self) -> int:
        return self._n_features

    def __len__(self) -> int:
        return len(self._trees)

    def __iter__(self) -> Iterator[RegressionTree]:
        return iter(self._trees)

    def _check_features(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        if X.ndim != 2 or X.shape[1] != self._n_features:
            raise DataError(f"Expected {self._n_features} features, got shape {X.shape}")
        return X

    def decision_function(self, X: np.ndarray, n_trees: Optional[int] = None) -> np.ndarray:
        """
        Raw margins base + learning_rate * sum(tree outputs)

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
        n_trees : int, optional
            Only use the first `n_trees` trees (staged prediction)
        """
        X = self._check_features(X)
        trees = self._trees if n_trees is None else self._trees[:n_trees]
        margin = np.full(X.shape[0], self._base_prediction)
        for tree in trees:
            margin += self._learning_rate * tree.predict(X)
        return margin

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Probability of the positive (normal) class for every row."""
        return sigmoid(self.decision_function(X))

    def predict(self, X: np.ndarray, threshold: float = 0.5) -> np.ndarray:
        return self.predict_proba(X) >= threshold

    def score_one(self, feature_vector: np.ndarray) -> float:
        """Margin for a single feature vector using tree walks."""
        x = np.asarray(feature_vector, dtype=np.float64).ravel()
        if x.shape[0] != self._n_features:
            raise DataError(f"Expected {self._n_features} features, got {x.shape[0]}")
        return self._base_prediction + self._learning_rate * sum(tree.evaluate(x) for tree in self._trees)

    def feature_importance(self, normalize: bool = True) -> np.ndarray:
        importance = np.zeros(self._n_features)
        for tree in self._trees:
            importance += tree.feature_importance(self._n_features)
        total = importance.sum()
        if normalize and total > 0:
            importance = importance / total
        return importance

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_prediction": self._base_prediction,
            "learning_rate": self._learning_rate,
            "n_features": self._n_features,
            "trees": [tree.to_dict() for tree in self._trees],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ensemble":
        try:
            return cls(
                trees=[RegressionTree.from_dict(tree) for tree in data["trees"]],
                base_prediction=data["base_prediction"],
                learning_rate=data["learning_rate"],
                n_features=data["n_features"],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ModelStateError(f"Malformed ensemble description: {exc}") from exc

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "Ensemble":
        return cls.from_dict(json.loads(payload))

    def __repr__(self) -> str:
        return (f"Ensemble(n_trees={len(self._trees)}, base_prediction={self._base_prediction:.4f}, "
                f"learning_rate={self._learning_rate})")


def require_ensemble(model: Any) -> Ensemble:
    """Raise ModelStateError unless `model` is a fitted Ensemble."""
    if model is None:
        raise ModelStateError("Model has not been fitted yet")
    if not isinstance(model, Ensemble):
        raise ModelStateError(f"Expected a fitted Ensemble, got {type(model).__name__}")
    return model

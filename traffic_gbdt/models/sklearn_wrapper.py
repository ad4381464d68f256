"""
scikit-learn adapter

GBDTClassifier exposes GBDTTrainer through the BaseEstimator /
ClassifierMixin interface so it can be used with sklearn utilities
(cross-validation, clone, pipelines, scoring).
"""

from typing import Optional

import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.preprocessing import LabelEncoder
from sklearn.utils.validation import check_array, check_is_fitted, check_X_y

from ..exceptions import DataError
from .gbdt_components import GBDTTrainer


class GBDTClassifier(ClassifierMixin, BaseEstimator):
    """
    Binary boosted-tree classifier with the sklearn estimator API

    Parameters:
    -----------
    number_of_trees : int, default=100
    number_of_leaves : int, default=20
    learning_rate : float, default=0.1
    min_leaf_samples : int, default=1
    max_depth : int, optional
    l2_regularization : float, default=1e-6
    n_jobs : int, default=1
    growth_strategy : str, default="leafwise"

    The second entry of `classes_` is treated as the positive class.
    """

    def __init__(self,
                 number_of_trees: int = 100,
                 number_of_leaves: int = 20,
                 learning_rate: float = 0.1,
                 min_leaf_samples: int = 1,
                 max_depth: Optional[int] = None,
                 l2_regularization: float = 1e-6,
                 n_jobs: int = 1,
                 growth_strategy: str = "leafwise"):
        self.number_of_trees = number_of_trees
        self.number_of_leaves = number_of_leaves
        self.learning_rate = learning_rate
        self.min_leaf_samples = min_leaf_samples
        self.max_depth = max_depth
        self.l2_regularization = l2_regularization
        self.n_jobs = n_jobs
        self.growth_strategy = growth_strategy

    def fit(self, X, y) -> "GBDTClassifier":
        X, y = check_X_y(X, y)
        encoder = LabelEncoder()
        y_encoded = encoder.fit_transform(y)
        if len(encoder.classes_) > 2:
            raise DataError(f"GBDTClassifier is binary, got {len(encoder.classes_)} classes")
        self.classes_ = encoder.classes_
        self.n_features_in_ = X.shape[1]

        self.trainer_ = GBDTTrainer(
            number_of_trees=self.number_of_trees,
            number_of_leaves=self.number_of_leaves,
            learning_rate=self.learning_rate,
            min_leaf_samples=self.min_leaf_samples,
            max_depth=self.max_depth,
            l2_regularization=self.l2_regularization,
            n_jobs=self.n_jobs,
            growth_strategy=self.growth_strategy,
        )
        self.ensemble_ = self.trainer_.fit(X, y_encoded)
        self.feature_importances_ = self.ensemble_.feature_importance()
        return self

    def decision_function(self, X) -> np.ndarray:
        check_is_fitted(self, "ensemble_")
        X = check_array(X)
        return self.ensemble_.decision_function(X)

    def predict_proba(self, X) -> np.ndarray:
        check_is_fitted(self, "ensemble_")
        X = check_array(X)
        positive = self.ensemble_.predict_proba(X)
        return np.column_stack([1.0 - positive, positive])

    def predict(self, X) -> np.ndarray:
        proba = self.predict_proba(X)
        if len(self.classes_) == 1:
            return np.full(proba.shape[0], self.classes_[0])
        return self.classes_[(proba[:, 1] >= 0.5).astype(int)]

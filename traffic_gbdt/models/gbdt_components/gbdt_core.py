"""
GBDT Core Module

This module contains GBDTTrainer, which runs the boosting loop: initial
log-odds bias, per-round gradients/hessians of the logistic loss, one
tree per round from the configured TreeGrower, shrinkage by the learning
rate. The result is an immutable Ensemble.
"""

import logging
import time
from typing import List, Optional

import numpy as np

from ...config import TrainerConfig
from ...exceptions import DataError, ModelStateError
from ..base import TreeGrower
from .data_transforms import validate_input_data
from .ensemble import Ensemble
from .gradient_computer import GradientComputer
from .tree_builder import make_tree_builder

logger = logging.getLogger(__name__)


class GBDTTrainer:
    """
    Gradient-boosted decision trees for binary classification

    Parameters:
    -----------
    number_of_trees : int, default=100
        Number of boosting rounds
    number_of_leaves : int, default=20
        Leaf budget per tree
    learning_rate : float, default=0.1
        Shrinkage applied to every tree
    min_leaf_samples : int, default=1
        Minimum samples per leaf
    max_depth : int, optional
        Depth bound per tree
    l2_regularization : float, default=1e-6
        Added to hessian sums in gains and leaf values
    n_jobs : int, default=1
        Threads for the split search
    growth_strategy : str, default="leafwise"
        "leafwise" or "depthwise"; ignored when `tree_grower` is given
    tree_grower : TreeGrower, optional
        Custom tree growth implementation

    Attributes:
    -----------
    ensemble_ : Ensemble or None
        Model produced by the last call to fit
    train_loss_history_ : list of float
        Training log-loss after initialization and after every round
    """

    def __init__(self,
                 number_of_trees: int = 100,
                 number_of_leaves: int = 20,
                 learning_rate: float = 0.1,
                 min_leaf_samples: int = 1,
                 max_depth: Optional[int] = None,
                 l2_regularization: float = 1e-6,
                 n_jobs: int = 1,
                 growth_strategy: str = "leafwise",
                 tree_grower: Optional[TreeGrower] = None):
        self.config = TrainerConfig(
            number_of_trees=number_of_trees,
            number_of_leaves=number_of_leaves,
            learning_rate=learning_rate,
            min_leaf_samples=min_leaf_samples,
            max_depth=max_depth,
            l2_regularization=l2_regularization,
            n_jobs=n_jobs,
            growth_strategy=growth_strategy,
        ).validate()

        self.gradient_computer = GradientComputer(loss="logloss")
        self.tree_grower = tree_grower if tree_grower is not None else make_tree_builder(
            growth_strategy,
            max_leaves=number_of_leaves,
            max_depth=max_depth,
            min_leaf_samples=min_leaf_samples,
            l2_regularization=l2_regularization,
            n_jobs=n_jobs,
        )

        self.ensemble_: Optional[Ensemble] = None
        self.train_loss_history_: List[float] = []
        self.training_time_: float = 0.0

    @classmethod
    def from_config(cls, config: TrainerConfig, tree_grower: Optional[TreeGrower] = None) -> "GBDTTrainer":
        config.validate()
        return cls(
            number_of_trees=config.number_of_trees,
            number_of_leaves=config.number_of_leaves,
            learning_rate=config.learning_rate,
            min_leaf_samples=config.min_leaf_samples,
            max_depth=config.max_depth,
            l2_regularization=config.l2_regularization,
            n_jobs=config.n_jobs,
            growth_strategy=config.growth_strategy,
            tree_grower=tree_grower,
        )

    @property
    def learning_rate(self) -> float:
        return self.config.learning_rate

    def fit(self, X: np.ndarray, y: np.ndarray) -> Ensemble:
        """
        Train the ensemble

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            Normalized feature vectors
        y : array-like, shape=(n_samples,)
            Labels, 1/True = normal, 0/False = anomaly

        Returns:
        --------
        ensemble : Ensemble
            Immutable fitted model
        """
        X, y = validate_input_data(X, y)
        if y is None:
            raise DataError("Labels are required for training")
        n_samples, n_features = X.shape

        positive_rate = float(np.mean(y))
        if positive_rate in (0.0, 1.0):
            logger.warning(
                "All %d training labels are %s; the model will predict a constant probability",
                n_samples, "normal" if positive_rate == 1.0 else "anomaly",
            )

        start_time = time.time()
        base_prediction = self.gradient_computer.compute_initial_prediction(y)
        margin = np.full(n_samples, base_prediction)
        self.train_loss_history_ = [self.gradient_computer.compute_loss(y, margin)]

        trees = []
        for iteration in range(self.config.number_of_trees):
            gradients, hessians = self.gradient_computer.compute_gradients_hessians(y, margin)
            tree = self.tree_grower.build_tree(X, gradients, hessians)
            trees.append(tree)

            margin = margin + self.learning_rate * tree.predict(X)
            loss = self.gradient_computer.compute_loss(y, margin)
            self.train_loss_history_.append(loss)
            logger.debug("round %d: leaves=%d train_logloss=%.6f", iteration + 1, tree.n_leaves, loss)

        self.training_time_ = time.time() - start_time
        self.ensemble_ = Ensemble(
            trees=trees,
            base_prediction=base_prediction,
            learning_rate=self.learning_rate,
            n_features=n_features,
        )
        logger.info(
            "Trained %d trees on %d samples in %.2fs (final train logloss %.4f)",
            len(trees), n_samples, self.training_time_, self.train_loss_history_[-1],
        )
        return self.ensemble_

    def _require_fitted(self) -> Ensemble:
        if self.ensemble_ is None:
            raise ModelStateError("GBDTTrainer has not been fitted yet")
        return self.ensemble_

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return self._require_fitted().predict_proba(X)

    def get_feature_importance(self) -> np.ndarray:
        """Split-gain importance of every feature, normalized to sum to 1."""
        return self._require_fitted().feature_importance(normalize=True)

    def print_training_summary(self) -> None:
        ensemble = self._require_fitted()
        leaves = [tree.n_leaves for tree in ensemble.trees]
        print("\n=== GBDT Training Summary ===")
        print(f"Growth strategy: {self.config.growth_strategy}")
        print(f"Trees: {len(ensemble)}")
        print(f"Learning rate: {ensemble.learning_rate}")
        print(f"Leaves per tree (max {self.config.number_of_leaves}): "
              f"{np.mean(leaves) if leaves else 0:.1f} avg")
        print(f"Base prediction (log-odds): {ensemble.base_prediction:.4f}")
        print(f"Train logloss: {self.train_loss_history_[0]:.4f} -> {self.train_loss_history_[-1]:.4f}")
        print(f"Training time: {self.training_time_:.2f}s")

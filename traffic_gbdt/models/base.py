"""
Tree growth interface

The boosting loop only depends on TreeGrower: anything that can fit one
regression tree to per-sample gradients and hessians can be plugged into
GBDTTrainer.
"""

from abc import ABC, abstractmethod

import numpy as np

from .gbdt_components.tree_node import RegressionTree


class TreeGrower(ABC):
    """
    Fits a single regression tree against (gradient, hessian) pairs
    """

    @abstractmethod
    def build_tree(self, X: np.ndarray, gradients: np.ndarray, hessians: np.ndarray) -> RegressionTree:
        """
        Grow one tree

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            Normalized feature matrix
        gradients : array-like, shape=(n_samples,)
            First derivatives of the loss
        hessians : array-like, shape=(n_samples,)
            Second derivatives of the loss

        Returns:
        --------
        tree : RegressionTree
            Frozen tree whose leaves hold Newton steps -G / (H + lambda)
        """

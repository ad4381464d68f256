"""
Gradient Computer

This module handles the initial prediction, gradient and hessian
computation for the binary logistic loss.
"""

from typing import Tuple

import numpy as np

from .data_transforms import log_odds, logistic_loss, sigmoid


class GradientComputer:
    """
    Gradient / Hessian computation for binary log-loss

    Attributes:
    -----------
    loss : str
        Loss function name (only "logloss" is supported)
    epsilon : float
        Clamp applied to the base rate before taking log-odds
    """

    def __init__(self, loss: str = "logloss", epsilon: float = 1e-7):
        if loss != "logloss":
            raise ValueError(f"Unsupported loss function: {loss}")
        self.loss = loss
        self.epsilon = epsilon

    def compute_initial_prediction(self, y: np.ndarray) -> float:
        """
        Log-odds of the positive (normal) base rate

        Parameters:
        -----------
        y : array-like, shape=(n_samples,)
            Binary labels

        Returns:
        --------
        base_prediction : float
            log(p / (1 - p)) with p clamped to [epsilon, 1 - epsilon]
        """
        return log_odds(float(np.mean(y)), self.epsilon)

    def compute_gradients_hessians(self, y: np.ndarray, margin: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        First and second derivatives of the log-loss w.r.t. the margin

        Parameters:
        -----------
        y : array-like, shape=(n_samples,)
            Binary labels
        margin : array-like, shape=(n_samples,)
            Current raw predictions (log-odds)

        Returns:
        --------
        gradients : array-like, shape=(n_samples,)
            probability - label (the negated pseudo-residual)
        hessians : array-like, shape=(n_samples,)
            probability * (1 - probability)
        """
        probability = sigmoid(margin)
        gradients = probability - y
        hessians = probability * (1.0 - probability)
        return gradients, hessians

    def compute_loss(self, y: np.ndarray, margin: np.ndarray) -> float:
        return logistic_loss(y, margin)

"""
Data Transform Utilities

This module contains numeric helpers shared by the boosting components:
input validation, sigmoid/log-odds transforms and the logistic loss.
"""

from typing import Optional, Tuple

import numpy as np

from ...exceptions import DataError

PROBABILITY_EPSILON = 1e-7


def validate_input_data(X: np.ndarray, y: Optional[np.ndarray] = None) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Validate and convert training inputs

    Parameters:
    -----------
    X : array-like, shape=(n_samples, n_features)
        Feature matrix
    y : array-like, shape=(n_samples,), optional
        Binary labels (1 = normal, 0 = anomaly)

    Returns:
    --------
    X_validated : np.ndarray of float64
    y_validated : np.ndarray of float64 or None
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise DataError(f"X must be 2D array, got {X.ndim}D")
    if X.shape[0] == 0:
        raise DataError("X contains no samples")
    if not np.all(np.isfinite(X)):
        raise DataError("X contains inf or NaN values")

    if y is not None:
        y = np.asarray(y, dtype=np.float64).ravel()
        if X.shape[0] != y.shape[0]:
            raise DataError(f"X and y must have same number of samples, got {X.shape[0]} and {y.shape[0]}")
        if not np.all((y == 0) | (y == 1)):
            raise DataError("y must contain only binary labels (0/1 or False/True)")

    return X, y


def sigmoid(margin: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-np.clip(margin, -500, 500)))


def clip_probabilities(probs: np.ndarray, epsilon: float = PROBABILITY_EPSILON) -> np.ndarray:
    return np.clip(probs, epsilon, 1 - epsilon)


def log_odds(p: float, epsilon: float = PROBABILITY_EPSILON) -> float:
    """log(p / (1 - p)) with p clamped to [epsilon, 1 - epsilon]."""
    p = float(np.clip(p, epsilon, 1 - epsilon))
    return float(np.log(p / (1 - p)))


def logistic_loss(y_true: np.ndarray, margin: np.ndarray) -> float:
    """
    Mean binary cross-entropy computed from raw margins

    Uses the log1p/logaddexp form so large margins do not overflow.
    """
    y_true = np.asarray(y_true, dtype=np.float64)
    margin = np.asarray(margin, dtype=np.float64)
    # -[y*log(sigmoid(m)) + (1-y)*log(1-sigmoid(m))] = logaddexp(0, m) - y*m
    return float(np.mean(np.logaddexp(0.0, margin) - y_true * margin))

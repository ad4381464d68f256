"""Binary classification metrics with "normal" (label 1) as the positive class."""

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np

from ..exceptions import DataError
from ..models.gbdt_components.data_transforms import clip_probabilities

DEFAULT_THRESHOLD = 0.5

# AUC reported when only one class is present (no positive/negative pairs)
UNDEFINED_AUC = 0.5


@dataclass(frozen=True)
class EvaluationMetrics:
    accuracy: float
    auc: float
    f1: float
    precision: float = 0.0
    recall: float = 0.0
    negative_precision: float = 0.0
    negative_recall: float = 0.0
    log_loss: float = 0.0
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def format_report(self) -> str:
        return "\n".join([
            f"Model accuracy: {self.accuracy:.2%}",
            f"AUC: {self.auc:.2%}",
            f"F1 Score: {self.f1:.2%}",
        ])


def _check_pair(y_true: np.ndarray, y_other: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_other = np.asarray(y_other, dtype=np.float64).ravel()
    if y_true.shape != y_other.shape:
        raise DataError(f"Length mismatch: {y_true.shape[0]} labels vs {y_other.shape[0]} predictions")
    if y_true.size == 0:
        raise DataError("Cannot compute metrics on an empty dataset")
    return y_true, y_other


def confusion_counts(y_true: np.ndarray, y_pred: np.ndarray) -> Tuple[int, int, int, int]:
    """(tp, fp, tn, fn) with label 1 as the positive class."""
    y_true, y_pred = _check_pair(y_true, y_pred)
    actual = y_true == 1
    predicted = y_pred == 1
    tp = int(np.sum(actual & predicted))
    fp = int(np.sum(~actual & predicted))
    tn = int(np.sum(~actual & ~predicted))
    fn = int(np.sum(actual & ~predicted))
    return tp, fp, tn, fn


def accuracy(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    y_true, y_pred = _check_pair(y_true, y_pred)
    return float(np.mean(y_true == y_pred))


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0


def f1_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Harmonic mean of precision and recall; 0 when both are 0."""
    tp, fp, _, fn = confusion_counts(y_true, y_pred)
    precision = _ratio(tp, tp + fp)
    recall = _ratio(tp, tp + fn)
    if precision + recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)


def _average_ranks(values: np.ndarray) -> np.ndarray:
    """1-based ranks, tied values share the mean of their ranks."""
    _, inverse, counts = np.unique(values, return_inverse=True, return_counts=True)
    # rank of the last element of each tie group, then step back to the middle
    upper = np.cumsum(counts)
    mean_rank = upper - (counts - 1) / 2.0
    return mean_rank[inverse]


def roc_auc(y_true: np.ndarray, scores: np.ndarray) -> float:
    """
    Rank-based AUC

    (concordant pairs + 0.5 * tied pairs) / (positives * negatives),
    computed through the Mann-Whitney U statistic with average ranks.
    Returns UNDEFINED_AUC (0.5) when only one class is present.
    """
    y_true, scores = _check_pair(y_true, scores)
    positives = y_true == 1
    n_pos = int(np.sum(positives))
    n_neg = y_true.size - n_pos
    if n_pos == 0 or n_neg == 0:
        return UNDEFINED_AUC
    ranks = _average_ranks(scores)
    u_statistic = np.sum(ranks[positives]) - n_pos * (n_pos + 1) / 2.0
    return float(u_statistic / (n_pos * n_neg))


def roc_curve_points(y_true: np.ndarray, scores: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    False/true positive rates at every distinct score threshold

    Returns:
    --------
    fpr, tpr : np.ndarray
        Both start at 0 and end at 1
    """
    y_true, scores = _check_pair(y_true, scores)
    order = np.argsort(-scores, kind="mergesort")
    sorted_scores = scores[order]
    sorted_labels = y_true[order]
    # last index of each group of equal scores
    distinct = np.r_[np.nonzero(np.diff(sorted_scores))[0], sorted_scores.size - 1]
    tps = np.cumsum(sorted_labels)[distinct]
    fps = (distinct + 1) - tps
    n_pos = max(tps[-1], 1)
    n_neg = max(fps[-1], 1)
    return np.r_[0.0, fps / n_neg], np.r_[0.0, tps / n_pos]


def binary_log_loss(y_true: np.ndarray, probabilities: np.ndarray) -> float:
    y_true, probabilities = _check_pair(y_true, probabilities)
    p = clip_probabilities(probabilities)
    return float(-np.mean(y_true * np.log(p) + (1 - y_true) * np.log(1 - p)))


def compute_metrics(y_true: np.ndarray, probabilities: np.ndarray,
                    threshold: float = DEFAULT_THRESHOLD) -> EvaluationMetrics:
    """
    Full metric set from labels and positive-class probabilities

    Samples with probability >= threshold are predicted normal.
    """
    y_true, probabilities = _check_pair(y_true, probabilities)
    y_pred = (probabilities >= threshold).astype(np.float64)
    tp, fp, tn, fn = confusion_counts(y_true, y_pred)
    return EvaluationMetrics(
        accuracy=accuracy(y_true, y_pred),
        auc=roc_auc(y_true, probabilities),
        f1=f1_score(y_true, y_pred),
        precision=_ratio(tp, tp + fp),
        recall=_ratio(tp, tp + fn),
        negative_precision=_ratio(tn, tn + fn),
        negative_recall=_ratio(tn, tn + fp),
        log_loss=binary_log_loss(y_true, probabilities),
        true_positives=tp,
        false_positives=fp,
        true_negatives=tn,
        false_negatives=fn,
    )

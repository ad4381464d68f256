import numpy as np
import pytest
from sklearn.metrics import f1_score as sklearn_f1
from sklearn.metrics import log_loss as sklearn_log_loss
from sklearn.metrics import roc_auc_score

from traffic_gbdt.evaluation.metrics import (
    EvaluationMetrics,
    accuracy,
    binary_log_loss,
    compute_metrics,
    confusion_counts,
    f1_score,
    roc_auc,
    roc_curve_points,
)
from traffic_gbdt.exceptions import DataError


def test_auc_counts_ties_as_half():
    y = [1, 0, 1, 0]
    scores = [0.8, 0.8, 0.6, 0.2]
    assert roc_auc(y, scores) == pytest.approx(0.625)


def test_auc_matches_sklearn_with_tied_scores():
    rng = np.random.default_rng(3)
    y = rng.integers(0, 2, size=300)
    scores = np.round(rng.random(300) + 0.3 * y, 1)
    assert roc_auc(y, scores) == pytest.approx(roc_auc_score(y, scores))


def test_auc_perfect_and_inverted_ranking():
    y = np.array([0, 0, 1, 1])
    assert roc_auc(y, [0.1, 0.2, 0.8, 0.9]) == 1.0
    assert roc_auc(y, [0.9, 0.8, 0.2, 0.1]) == 0.0


def test_auc_single_class_is_one_half():
    assert roc_auc(np.ones(5), np.linspace(0, 1, 5)) == 0.5
    assert roc_auc(np.zeros(5), np.linspace(0, 1, 5)) == 0.5


def test_f1_matches_sklearn():
    rng = np.random.default_rng(4)
    y = rng.integers(0, 2, size=200)
    y_pred = rng.integers(0, 2, size=200)
    assert f1_score(y, y_pred) == pytest.approx(sklearn_f1(y, y_pred))


def test_f1_is_zero_without_true_positives():
    assert f1_score([1, 1, 0], [0, 0, 0]) == 0.0
    assert f1_score([0, 0], [0, 0]) == 0.0


def test_confusion_counts_and_accuracy():
    y = [1, 1, 0, 0, 1]
    y_pred = [1, 0, 0, 1, 1]
    assert confusion_counts(y, y_pred) == (2, 1, 1, 1)
    assert accuracy(y, y_pred) == pytest.approx(0.6)


def test_log_loss_matches_sklearn():
    y = np.array([1, 0, 1, 1, 0])
    p = np.array([0.9, 0.2, 0.6, 0.4, 0.1])
    assert binary_log_loss(y, p) == pytest.approx(sklearn_log_loss(y, p))


def test_roc_curve_endpoints():
    fpr, tpr = roc_curve_points([0, 1, 0, 1], [0.1, 0.9, 0.4, 0.35])
    assert (fpr[0], tpr[0]) == (0.0, 0.0)
    assert (fpr[-1], tpr[-1]) == (1.0, 1.0)
    assert np.all(np.diff(fpr) >= 0) and np.all(np.diff(tpr) >= 0)


def test_compute_metrics_thresholds_at_one_half():
    y = np.array([1, 1, 0, 0])
    probabilities = np.array([0.5, 0.7, 0.49, 0.2])
    metrics = compute_metrics(y, probabilities)
    assert metrics.accuracy == 1.0
    assert metrics.f1 == 1.0
    assert metrics.true_positives == 2 and metrics.true_negatives == 2
    assert metrics.negative_precision == 1.0 and metrics.negative_recall == 1.0
    for value in (metrics.accuracy, metrics.auc, metrics.f1):
        assert 0.0 <= value <= 1.0


def test_report_format():
    report = EvaluationMetrics(accuracy=0.95, auc=0.9876, f1=0.5).format_report()
    assert report.splitlines() == ["Model accuracy: 95.00%", "AUC: 98.76%", "F1 Score: 50.00%"]


def test_empty_and_mismatched_inputs():
    with pytest.raises(DataError):
        compute_metrics([], [])
    with pytest.raises(DataError):
        roc_auc([1, 0], [0.5])

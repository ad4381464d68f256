from .metrics import (
    EvaluationMetrics,
    accuracy,
    binary_log_loss,
    compute_metrics,
    confusion_counts,
    f1_score,
    roc_auc,
    roc_curve_points,
)
from .evaluator import Evaluator

__all__ = [
    'EvaluationMetrics',
    'Evaluator',
    'accuracy',
    'binary_log_loss',
    'compute_metrics',
    'confusion_counts',
    'f1_score',
    'roc_auc',
    'roc_curve_points',
]

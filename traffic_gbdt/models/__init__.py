"""
Boosted-tree models

GBDTTrainer is the main entry point; GBDTClassifier adapts it to the
scikit-learn estimator API.
"""

from .gbdt_components import (
    DepthWiseTreeBuilder,
    Ensemble,
    GBDTTrainer,
    LeafWiseTreeBuilder,
    RegressionTree,
)
from .base import TreeGrower
from .sklearn_wrapper import GBDTClassifier

__all__ = [
    'TreeGrower',
    'RegressionTree',
    'LeafWiseTreeBuilder',
    'DepthWiseTreeBuilder',
    'Ensemble',
    'GBDTTrainer',
    'GBDTClassifier',
]

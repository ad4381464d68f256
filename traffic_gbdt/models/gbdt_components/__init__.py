"""
GBDT Components Package

This package contains the modular components of the boosted-tree
implementation: tree nodes, gradient computation, tree growth, the
fitted ensemble and the training loop.
"""

from .tree_node import DecisionTreeNode, RegressionTree
from .data_transforms import (
    validate_input_data,
    sigmoid,
    clip_probabilities,
    log_odds,
    logistic_loss,
)
from .gradient_computer import GradientComputer
from .tree_builder import (
    SplitCandidate,
    TreeBuilder,
    LeafWiseTreeBuilder,
    DepthWiseTreeBuilder,
    best_split_for_feature,
    make_tree_builder,
)
from .ensemble import Ensemble, require_ensemble
from .gbdt_core import GBDTTrainer

__all__ = [
    'DecisionTreeNode',
    'RegressionTree',
    'validate_input_data',
    'sigmoid',
    'clip_probabilities',
    'log_odds',
    'logistic_loss',
    'GradientComputer',
    'SplitCandidate',
    'TreeBuilder',
    'LeafWiseTreeBuilder',
    'DepthWiseTreeBuilder',
    'best_split_for_feature',
    'make_tree_builder',
    'Ensemble',
    'require_ensemble',
    'GBDTTrainer',
]

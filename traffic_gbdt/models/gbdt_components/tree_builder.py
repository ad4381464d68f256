"""
Tree Builder

This module handles the construction of regression trees for gradient
boosting: split finding on gradient/hessian statistics, leaf value
computation and the two growth strategies (leaf-wise and depth-wise).
"""

import heapq
from abc import abstractmethod
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import List, NamedTuple, Optional

import numpy as np

from ..base import TreeGrower
from .tree_node import DecisionTreeNode, RegressionTree


class SplitCandidate(NamedTuple):
    feature_idx: int
    threshold: float
    gain: float


def _split_gains(grad_left: np.ndarray, hess_left: np.ndarray,
                 grad_total: float, hess_total: float, l2: float) -> np.ndarray:
    """
    gain = G_L^2 / (H_L + l2) + G_R^2 / (H_R + l2) - G^2 / (H + l2)

    Undefined gains (zero hessian without regularization) become -inf.
    """
    grad_right = grad_total - grad_left
    hess_right = hess_total - hess_left
    with np.errstate(divide="ignore", invalid="ignore"):
        gains = (grad_left ** 2 / (hess_left + l2)
                 + grad_right ** 2 / (hess_right + l2)
                 - grad_total ** 2 / (hess_total + l2))
    return np.where(np.isfinite(gains), gains, -np.inf)


def best_split_for_feature(values: np.ndarray,
                           gradients: np.ndarray,
                           hessians: np.ndarray,
                           min_leaf_samples: int,
                           l2: float) -> Optional[SplitCandidate]:
    """
    Best threshold for one feature

    Candidate thresholds lie between consecutive sorted unique values;
    each candidate must leave at least `min_leaf_samples` on both sides.
    Ties resolve to the lowest threshold.

    Parameters:
    -----------
    values : array-like, shape=(n_samples,)
        Feature column for the node's samples
    gradients, hessians : array-like, shape=(n_samples,)
        Loss derivatives for the same samples
    min_leaf_samples : int
        Minimum samples per child
    l2 : float
        Hessian regularization

    Returns:
    --------
    split : SplitCandidate or None
        feature_idx is left as -1; the caller fills it in
    """
    n_samples = values.shape[0]
    if n_samples < 2 * min_leaf_samples:
        return None

    order = np.argsort(values, kind="mergesort")
    sorted_values = values[order]
    grad_cumsum = np.cumsum(gradients[order])
    hess_cumsum = np.cumsum(hessians[order])

    # split after position i puts rows [0, i] on the left
    positions = np.arange(n_samples - 1)
    valid = (
        (sorted_values[:-1] < sorted_values[1:])
        & (positions + 1 >= min_leaf_samples)
        & (n_samples - positions - 1 >= min_leaf_samples)
    )
    if not np.any(valid):
        return None

    candidates = positions[valid]
    gains = _split_gains(grad_cumsum[candidates], hess_cumsum[candidates],
                         grad_cumsum[-1], hess_cumsum[-1], l2)
    best = int(np.argmax(gains))
    if not np.isfinite(gains[best]):
        return None

    i = candidates[best]
    lower, upper = sorted_values[i], sorted_values[i + 1]
    threshold = (lower + upper) / 2.0
    if not lower <= threshold < upper:
        # adjacent floats: the midpoint rounds onto the upper value
        threshold = lower
    return SplitCandidate(-1, float(threshold), float(gains[best]))


class TreeBuilder(TreeGrower):
    """
    Shared machinery for growing a regression tree

    Attributes:
    -----------
    max_leaves : int
        Leaf budget per tree
    max_depth : int or None
        Depth bound (None = unbounded)
    min_leaf_samples : int
        Minimum samples per leaf; a node needs twice this to be split
    l2_regularization : float
        Constant added to hessian sums
    min_split_gain : float
        Splits must have strictly greater gain than this
    n_jobs : int
        Threads used to search features in parallel
    node_counter : int
        Node ids handed out during the current build
    """

    def __init__(self,
                 max_leaves: int = 20,
                 max_depth: Optional[int] = None,
                 min_leaf_samples: int = 1,
                 l2_regularization: float = 1e-6,
                 min_split_gain: float = 0.0,
                 n_jobs: int = 1):
        self.max_leaves = max_leaves
        self.max_depth = max_depth
        self.min_leaf_samples = min_leaf_samples
        self.l2_regularization = l2_regularization
        self.min_split_gain = min_split_gain
        self.n_jobs = n_jobs
        self.node_counter = 0

    def build_tree(self, X: np.ndarray, gradients: np.ndarray, hessians: np.ndarray) -> RegressionTree:
        X = np.asarray(X, dtype=np.float64)
        gradients = np.asarray(gradients, dtype=np.float64)
        hessians = np.asarray(hessians, dtype=np.float64)
        if gradients.shape != (X.shape[0],) or hessians.shape != (X.shape[0],):
            raise ValueError("gradients and hessians must have one entry per sample")

        self.node_counter = 0
        root = self._make_node(np.arange(X.shape[0]), 0, gradients, hessians)

        if self.n_jobs > 1 and X.shape[1] > 1:
            with ThreadPoolExecutor(max_workers=self.n_jobs) as executor:
                self._grow(root, X, gradients, hessians, executor)
        else:
            self._grow(root, X, gradients, hessians, None)

        for leaf in self._leaves(root):
            leaf.value = self._compute_leaf_value(leaf.grad_sum, leaf.hess_sum)
        return RegressionTree.from_root(root)

    @abstractmethod
    def _grow(self, root: DecisionTreeNode, X: np.ndarray, gradients: np.ndarray,
              hessians: np.ndarray, executor: Optional[ThreadPoolExecutor]) -> None:
        """Split `root` and its descendants in place until a stopping rule fires."""

    def _make_node(self, indices: np.ndarray, depth: int,
                   gradients: np.ndarray, hessians: np.ndarray) -> DecisionTreeNode:
        node = DecisionTreeNode(node_id=self.node_counter, depth=depth)
        self.node_counter += 1
        node.sample_indices = indices
        node.n_samples = len(indices)
        node.grad_sum = float(np.sum(gradients[indices]))
        node.hess_sum = float(np.sum(hessians[indices]))
        return node

    def _can_split(self, node: DecisionTreeNode) -> bool:
        if self.max_depth is not None and node.depth >= self.max_depth:
            return False
        return node.n_samples >= 2 * self.min_leaf_samples

    def _search_best_split(self, node: DecisionTreeNode, X: np.ndarray, gradients: np.ndarray,
                           hessians: np.ndarray, executor: Optional[ThreadPoolExecutor]) -> Optional[SplitCandidate]:
        """
        Best split over all features for the node's samples

        Each worker reads the shared arrays and returns its own candidate;
        the reduction below keeps the highest gain, preferring the lowest
        feature index on ties, so threaded and sequential runs agree.
        """
        if not self._can_split(node):
            return None

        indices = node.sample_indices
        node_grads = gradients[indices]
        node_hess = hessians[indices]

        def search(feature_idx: int) -> Optional[SplitCandidate]:
            split = best_split_for_feature(X[indices, feature_idx], node_grads, node_hess,
                                           self.min_leaf_samples, self.l2_regularization)
            return None if split is None else split._replace(feature_idx=feature_idx)

        features = range(X.shape[1])
        results = list(executor.map(search, features)) if executor is not None else [search(f) for f in features]

        best = None
        for split in results:
            if split is not None and (best is None or split.gain > best.gain):
                best = split
        if best is None or best.gain <= self.min_split_gain:
            return None
        return best

    def _split_node(self, node: DecisionTreeNode, split: SplitCandidate, X: np.ndarray,
                    gradients: np.ndarray, hessians: np.ndarray) -> None:
        indices = node.sample_indices
        left_mask = X[indices, split.feature_idx] <= split.threshold
        node.is_leaf = False
        node.feature_idx = split.feature_idx
        node.threshold = split.threshold
        node.split_gain = split.gain
        node.left = self._make_node(indices[left_mask], node.depth + 1, gradients, hessians)
        node.right = self._make_node(indices[~left_mask], node.depth + 1, gradients, hessians)
        node.sample_indices = None

    def _compute_leaf_value(self, grad_sum: float, hess_sum: float) -> float:
        """Newton step -G / (H + lambda); 0 when the denominator vanishes."""
        denominator = hess_sum + self.l2_regularization
        if denominator <= 0:
            return 0.0
        return -grad_sum / denominator

    @staticmethod
    def _leaves(root: DecisionTreeNode) -> List[DecisionTreeNode]:
        leaves = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                leaves.append(node)
            else:
                stack.extend((node.left, node.right))
        return leaves


class LeafWiseTreeBuilder(TreeBuilder):
    """
    Best-first growth: always split the leaf whose best split has the
    highest gain, until the leaf budget is spent or no leaf can improve.
    """

    def _grow(self, root, X, gradients, hessians, executor):
        heap = []
        self._push(heap, root, X, gradients, hessians, executor)
        n_leaves = 1
        while heap and n_leaves < self.max_leaves:
            _, _, node, split = heapq.heappop(heap)
            self._split_node(node, split, X, gradients, hessians)
            n_leaves += 1
            self._push(heap, node.left, X, gradients, hessians, executor)
            self._push(heap, node.right, X, gradients, hessians, executor)

    def _push(self, heap, node, X, gradients, hessians, executor) -> None:
        split = self._search_best_split(node, X, gradients, hessians, executor)
        if split is not None:
            # node_id breaks gain ties in creation order
            heapq.heappush(heap, (-split.gain, node.node_id, node, split))


class DepthWiseTreeBuilder(TreeBuilder):
    """
    Level-by-level growth: nodes are split in breadth-first order up to
    `max_depth` (default 6), still capped by the leaf budget.
    """

    def __init__(self, max_leaves: int = 20, max_depth: Optional[int] = 6, **kwargs):
        super().__init__(max_leaves=max_leaves, max_depth=6 if max_depth is None else max_depth, **kwargs)

    def _grow(self, root, X, gradients, hessians, executor):
        queue = deque([root])
        n_leaves = 1
        while queue and n_leaves < self.max_leaves:
            node = queue.popleft()
            split = self._search_best_split(node, X, gradients, hessians, executor)
            if split is None:
                continue
            self._split_node(node, split, X, gradients, hessians)
            n_leaves += 1
            queue.append(node.left)
            queue.append(node.right)


def make_tree_builder(growth_strategy: str = "leafwise", **kwargs) -> TreeBuilder:
    builders = {
        "leafwise": LeafWiseTreeBuilder,
        "depthwise": DepthWiseTreeBuilder,
    }
    if growth_strategy not in builders:
        raise ValueError(f"Unknown growth strategy: {growth_strategy}")
    return builders[growth_strategy](**kwargs)

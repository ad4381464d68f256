"""
Decision Tree Node Implementation

DecisionTreeNode is the mutable node used while a tree is being grown.
Once growth finishes the node graph is frozen into a RegressionTree, a
flat array representation that is read-only and cheap to evaluate.
"""

from typing import Any, Dict, List, Optional

import numpy as np

LEAF = -1


class DecisionTreeNode:
    """
    Node of a tree under construction

    Attributes:
    -----------
    feature_idx : int or None
        Feature used for the split (None for leaves)
    threshold : float or None
        Split threshold; samples with x[feature_idx] <= threshold go left
    left, right : DecisionTreeNode or None
        Children
    is_leaf : bool
        Whether the node is a leaf
    value : float
        Leaf output (Newton step)
    node_id : int
        Node id, assigned in creation order
    depth : int
        Depth of the node (root = 0)
    n_samples : int
        Number of training samples reaching the node
    split_gain : float
        Gain of the split made at this node (0 for leaves)
    sample_indices : np.ndarray or None
        Training rows reaching the node; released when the tree is frozen
    grad_sum, hess_sum : float
        Sums of gradients / hessians over the node's samples
    """

    def __init__(self, node_id: int = 0, depth: int = 0):
        self.feature_idx = None
        self.threshold = None
        self.left = None
        self.right = None
        self.is_leaf = True
        self.value = 0.0
        self.node_id = node_id
        self.depth = depth
        self.n_samples = 0
        self.split_gain = 0.0
        self.sample_indices = None
        self.grad_sum = 0.0
        self.hess_sum = 0.0

    def __str__(self) -> str:
        if self.is_leaf:
            return f"Leaf(id={self.node_id}, depth={self.depth}, samples={self.n_samples}, value={self.value:.4f})"
        return (f"Node(id={self.node_id}, depth={self.depth}, samples={self.n_samples}, "
                f"feature={self.feature_idx}, threshold={self.threshold:.4f})")

    def __repr__(self) -> str:
        return self.__str__()


class RegressionTree:
    """
    Immutable binary regression tree stored as parallel arrays

    Node 0 is the root. For an internal node i, `feature[i]` and
    `threshold[i]` define the test `x[feature] <= threshold` which routes
    to `left[i]`, otherwise `right[i]`. Leaves have feature == -1 and
    hold their output in `value[i]`.
    """

    _ARRAYS = ("feature", "threshold", "left", "right", "value", "gain", "n_samples")

    def __init__(self,
                 feature: np.ndarray,
                 threshold: np.ndarray,
                 left: np.ndarray,
                 right: np.ndarray,
                 value: np.ndarray,
                 gain: Optional[np.ndarray] = None,
                 n_samples: Optional[np.ndarray] = None):
        n_nodes = len(feature)
        if n_nodes == 0:
            raise ValueError("A tree needs at least one node")
        arrays = {
            "feature": np.asarray(feature, dtype=np.int64),
            "threshold": np.asarray(threshold, dtype=np.float64),
            "left": np.asarray(left, dtype=np.int64),
            "right": np.asarray(right, dtype=np.int64),
            "value": np.asarray(value, dtype=np.float64),
            "gain": np.zeros(n_nodes) if gain is None else np.asarray(gain, dtype=np.float64),
            "n_samples": np.zeros(n_nodes, dtype=np.int64) if n_samples is None else np.asarray(n_samples, dtype=np.int64),
        }
        for name, array in arrays.items():
            if array.shape != (n_nodes,):
                raise ValueError(f"Tree array '{name}' has shape {array.shape}, expected ({n_nodes},)")
            array.flags.writeable = False
            object.__setattr__(self, name, array)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_root(cls, root: DecisionTreeNode) -> "RegressionTree":
        """Freeze a grown node graph (pre-order numbering)."""
        nodes: List[DecisionTreeNode] = []
        stack = [root]
        while stack:
            node = stack.pop()
            nodes.append(node)
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)

        position = {id(node): i for i, node in enumerate(nodes)}
        n_nodes = len(nodes)
        feature = np.full(n_nodes, LEAF, dtype=np.int64)
        threshold = np.zeros(n_nodes)
        left = np.full(n_nodes, LEAF, dtype=np.int64)
        right = np.full(n_nodes, LEAF, dtype=np.int64)
        value = np.zeros(n_nodes)
        gain = np.zeros(n_nodes)
        n_samples = np.zeros(n_nodes, dtype=np.int64)

        for i, node in enumerate(nodes):
            n_samples[i] = node.n_samples
            if node.is_leaf:
                value[i] = node.value
            else:
                feature[i] = node.feature_idx
                threshold[i] = node.threshold
                left[i] = position[id(node.left)]
                right[i] = position[id(node.right)]
                gain[i] = node.split_gain
            node.sample_indices = None

        return cls(feature, threshold, left, right, value, gain, n_samples)

    @property
    def n_nodes(self) -> int:
        return len(self.feature)

    @property
    def n_leaves(self) -> int:
        return int(np.sum(self.feature == LEAF))

    @property
    def depth(self) -> int:
        depths = np.zeros(self.n_nodes, dtype=np.int64)
        for i in range(self.n_nodes):
            if self.feature[i] != LEAF:
                depths[self.left[i]] = depths[i] + 1
                depths[self.right[i]] = depths[i] + 1
        return int(depths.max())

    def evaluate(self, x: np.ndarray) -> float:
        """Walk a single feature vector from the root to a leaf."""
        node = 0
        while self.feature[node] != LEAF:
            if x[self.feature[node]] <= self.threshold[node]:
                node = self.left[node]
            else:
                node = self.right[node]
        return float(self.value[node])

    def apply(self, X: np.ndarray) -> np.ndarray:
        """Leaf index reached by every row of X."""
        X = np.asarray(X, dtype=np.float64)
        nodes = np.zeros(X.shape[0], dtype=np.int64)
        active = self.feature[nodes] != LEAF
        while np.any(active):
            rows = np.nonzero(active)[0]
            current = nodes[rows]
            go_left = X[rows, self.feature[current]] <= self.threshold[current]
            nodes[rows] = np.where(go_left, self.left[current], self.right[current])
            active[rows] = self.feature[nodes[rows]] != LEAF
        return nodes

    def predict(self, X: np.ndarray) -> np.ndarray:
        return self.value[self.apply(X)]

    def feature_importance(self, n_features: int) -> np.ndarray:
        """Total split gain per feature."""
        importance = np.zeros(n_features)
        internal = self.feature != LEAF
        np.add.at(importance, self.feature[internal], self.gain[internal])
        return importance

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name).tolist() for name in self._ARRAYS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegressionTree":
        return cls(**{name: data[name] for name in cls._ARRAYS if name in data})

    def __repr__(self) -> str:
        return f"RegressionTree(n_nodes={self.n_nodes}, n_leaves={self.n_leaves})"

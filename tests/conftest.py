import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from traffic_gbdt.data.synthetic import generate_traffic_samples


@pytest.fixture
def traffic_samples():
    return generate_traffic_samples(100, anomaly_probability=0.2, seed=42)


@pytest.fixture
def separable_data():
    """Feature 0 separates the classes by a wide margin; features 1-2 are noise."""
    rng = np.random.default_rng(0)
    n = 60
    y = np.array([1.0] * (n // 2) + [0.0] * (n // 2))
    X = rng.random((n, 3))
    X[: n // 2, 0] = rng.uniform(0.8, 1.0, n // 2)
    X[n // 2:, 0] = rng.uniform(0.0, 0.2, n // 2)
    return X, y

"""
Synthetic traffic generation

Labeled samples drawn from class-conditional integer ranges. Anomalous
traffic is bursty, oversized and rapid: every anomaly range is disjoint
from (and more extreme than) the matching normal range.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..exceptions import ConfigError
from .samples import FEATURE_NAMES, TrafficSample

logger = logging.getLogger(__name__)

# Half-open [low, high) integer ranges per feature
NORMAL_RANGES: Dict[str, Tuple[int, int]] = {
    "packet_count": (80, 300),
    "avg_packet_size": (400, 800),
    "packet_duration": (50, 150),
    "interval_between_packets": (40, 80),
    "packet_frequency": (3, 6),
    "total_data_sent": (2000, 5000),
    "source_destination_ratio": (1, 2),
}

ANOMALY_RANGES: Dict[str, Tuple[int, int]] = {
    "packet_count": (500, 1000),
    "avg_packet_size": (1500, 3000),
    "packet_duration": (200, 400),
    "interval_between_packets": (10, 30),
    "packet_frequency": (7, 15),
    "total_data_sent": (7000, 14000),
    "source_destination_ratio": (2, 5),
}


class SampleGenerator:
    """
    Draws TrafficSample records with a private numpy Generator

    Parameters:
    -----------
    normal_ranges : dict, optional
        Per-feature [low, high) ranges for normal traffic
    anomaly_ranges : dict, optional
        Per-feature [low, high) ranges for anomalous traffic
    """

    def __init__(self,
                 normal_ranges: Optional[Dict[str, Tuple[int, int]]] = None,
                 anomaly_ranges: Optional[Dict[str, Tuple[int, int]]] = None):
        self.normal_ranges = dict(normal_ranges or NORMAL_RANGES)
        self.anomaly_ranges = dict(anomaly_ranges or ANOMALY_RANGES)
        for ranges in (self.normal_ranges, self.anomaly_ranges):
            missing = [name for name in FEATURE_NAMES if name not in ranges]
            if missing:
                raise ConfigError(f"Ranges missing for features: {missing}")
            for name, (low, high) in ranges.items():
                if low < 0 or high <= low:
                    raise ConfigError(f"Invalid range for {name}: [{low}, {high})")

    def generate(self,
                 count: int,
                 anomaly_probability: float = 0.2,
                 seed: Optional[int] = None) -> List[TrafficSample]:
        """
        Generate `count` labeled samples

        Parameters:
        -----------
        count : int
            Number of samples, must be positive
        anomaly_probability : float, default=0.2
            Probability of drawing an anomaly
        seed : int, optional
            Seed for reproducible output

        Returns:
        --------
        samples : list of TrafficSample
            label=True for normal traffic, False for anomalies
        """
        if not isinstance(count, (int, np.integer)) or isinstance(count, bool) or count <= 0:
            raise ConfigError(f"count must be a positive integer, got {count!r}")
        if not 0.0 <= anomaly_probability <= 1.0:
            raise ConfigError(f"anomaly_probability must be in [0, 1], got {anomaly_probability!r}")

        rng = np.random.default_rng(seed)
        samples = []
        for _ in range(count):
            is_anomaly = bool(rng.random() < anomaly_probability)
            ranges = self.anomaly_ranges if is_anomaly else self.normal_ranges
            values = {name: int(rng.integers(*ranges[name])) for name in FEATURE_NAMES}
            values["source_destination_ratio"] = float(values["source_destination_ratio"])
            samples.append(TrafficSample(label=not is_anomaly, **values))

        n_anomalies = sum(1 for s in samples if not s.label)
        logger.debug("Generated %d samples (%d anomalies, seed=%s)", count, n_anomalies, seed)
        return samples


def generate_traffic_samples(count: int,
                             anomaly_probability: float = 0.2,
                             seed: Optional[int] = None) -> List[TrafficSample]:
    """Shortcut for SampleGenerator().generate with the default ranges."""
    return SampleGenerator().generate(count, anomaly_probability, seed)

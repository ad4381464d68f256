"""Traffic samples: records, synthetic generation and feature assembly."""

from .samples import (
    FEATURE_NAMES,
    TrafficSample,
    feature_matrix,
    label_vector,
    load_samples_csv,
    samples_from_frame,
    samples_to_frame,
    save_samples_csv,
)
from .synthetic import ANOMALY_RANGES, NORMAL_RANGES, SampleGenerator, generate_traffic_samples
from .features import FeatureAssembler, NormalizationModel

__all__ = [
    'FEATURE_NAMES',
    'TrafficSample',
    'feature_matrix',
    'label_vector',
    'load_samples_csv',
    'samples_from_frame',
    'samples_to_frame',
    'save_samples_csv',
    'ANOMALY_RANGES',
    'NORMAL_RANGES',
    'SampleGenerator',
    'generate_traffic_samples',
    'FeatureAssembler',
    'NormalizationModel',
]

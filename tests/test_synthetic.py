import pytest

from traffic_gbdt.data.samples import FEATURE_NAMES
from traffic_gbdt.data.synthetic import (
    ANOMALY_RANGES,
    NORMAL_RANGES,
    SampleGenerator,
    generate_traffic_samples,
)
from traffic_gbdt.exceptions import ConfigError


def test_same_seed_reproduces_samples():
    first = generate_traffic_samples(50, 0.3, seed=7)
    second = generate_traffic_samples(50, 0.3, seed=7)
    assert first == second


def test_different_seeds_differ():
    assert generate_traffic_samples(50, 0.3, seed=1) != generate_traffic_samples(50, 0.3, seed=2)


def test_values_fall_in_class_ranges(traffic_samples):
    assert len(traffic_samples) == 100
    for sample in traffic_samples:
        ranges = NORMAL_RANGES if sample.label else ANOMALY_RANGES
        for name in FEATURE_NAMES:
            low, high = ranges[name]
            assert low <= getattr(sample, name) < high


def test_both_classes_present_at_default_rate(traffic_samples):
    n_anomalies = sum(1 for s in traffic_samples if s.label is False)
    assert 0 < n_anomalies < 50


@pytest.mark.parametrize("probability, expected_label", [(0.0, True), (1.0, False)])
def test_extreme_probabilities_give_single_class(probability, expected_label):
    samples = generate_traffic_samples(30, probability, seed=3)
    assert {s.label for s in samples} == {expected_label}


@pytest.mark.parametrize("count", [0, -5])
def test_non_positive_count_rejected(count):
    with pytest.raises(ConfigError):
        generate_traffic_samples(count, 0.2, seed=1)


def test_probability_out_of_range_rejected():
    with pytest.raises(ConfigError):
        generate_traffic_samples(10, 1.5, seed=1)


def test_custom_ranges_must_cover_every_feature():
    with pytest.raises(ConfigError):
        SampleGenerator(normal_ranges={"packet_count": (1, 2)})

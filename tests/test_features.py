import numpy as np
import pytest

from traffic_gbdt.data.features import FeatureAssembler, NormalizationModel
from traffic_gbdt.data.samples import FEATURE_NAMES, TrafficSample, load_samples_csv, samples_to_frame
from traffic_gbdt.data.synthetic import generate_traffic_samples
from traffic_gbdt.exceptions import DataError


def make_sample(**overrides):
    values = dict(packet_count=100, avg_packet_size=500, packet_duration=80,
                  interval_between_packets=50, packet_frequency=4,
                  total_data_sent=3000, source_destination_ratio=1.0, label=True)
    values.update(overrides)
    return TrafficSample(**values)


def test_fit_learns_min_and_max(traffic_samples):
    model = FeatureAssembler().fit(traffic_samples)
    counts = [s.packet_count for s in traffic_samples]
    assert model.feature_names == FEATURE_NAMES
    assert model.minimums[0] == min(counts)
    assert model.maximums[0] == max(counts)


def test_training_features_within_unit_interval(traffic_samples):
    model, features = FeatureAssembler().fit_transform(traffic_samples)
    assert features.shape == (100, len(FEATURE_NAMES))
    assert features.min() >= 0.0
    assert features.max() <= 1.0


def test_held_out_values_are_not_clipped():
    assembler = FeatureAssembler()
    model = assembler.fit([make_sample(packet_count=100), make_sample(packet_count=200)])
    features = assembler.transform([make_sample(packet_count=400), make_sample(packet_count=50)], model)
    assert features[0, 0] == pytest.approx(3.0)
    assert features[1, 0] == pytest.approx(-0.5)


def test_constant_feature_maps_to_zero():
    normal_only = generate_traffic_samples(40, 0.0, seed=5)
    model, features = FeatureAssembler().fit_transform(normal_only)
    ratio_column = FEATURE_NAMES.index("source_destination_ratio")
    assert model.minimums[ratio_column] == model.maximums[ratio_column]
    assert np.all(features[:, ratio_column] == 0.0)
    assert not np.any(np.isnan(features))


def test_feature_vectors_are_read_only(traffic_samples):
    _, features = FeatureAssembler().fit_transform(traffic_samples)
    with pytest.raises(ValueError):
        features[0, 0] = 42.0


def test_fit_on_empty_set_raises():
    with pytest.raises(DataError):
        FeatureAssembler().fit([])


@pytest.mark.parametrize("bad_value", [float("nan"), float("inf"), -1.0])
def test_invalid_feature_values_raise(bad_value):
    with pytest.raises(DataError):
        FeatureAssembler().fit([make_sample(), make_sample(source_destination_ratio=bad_value)])


def test_dataframe_input_matches_sample_input(traffic_samples):
    assembler = FeatureAssembler()
    model = assembler.fit(traffic_samples)
    from_frame = assembler.transform(samples_to_frame(traffic_samples), model)
    from_samples = assembler.transform(traffic_samples, model)
    np.testing.assert_allclose(from_frame, from_samples)
    np.testing.assert_array_equal(assembler.labels(samples_to_frame(traffic_samples)),
                                  assembler.labels(traffic_samples))


def test_labels_missing_raise():
    with pytest.raises(DataError):
        FeatureAssembler.labels([make_sample(), make_sample(label=None)])


def test_normalization_model_dict_roundtrip(traffic_samples):
    model = FeatureAssembler().fit(traffic_samples)
    restored = NormalizationModel.from_dict(model.to_dict())
    np.testing.assert_array_equal(restored.minimums, model.minimums)
    np.testing.assert_array_equal(restored.maximums, model.maximums)
    assert restored.feature_names == model.feature_names


@pytest.mark.parametrize("bad_labels", [[0, 2], ["normal", "anomaly"]])
def test_dataframe_labels_outside_zero_one_raise(traffic_samples, bad_labels):
    frame = samples_to_frame(traffic_samples[:2])
    frame["label"] = bad_labels
    with pytest.raises(DataError):
        FeatureAssembler.labels(frame)


def test_dataframe_integer_labels_accepted(traffic_samples):
    frame = samples_to_frame(traffic_samples)
    frame["label"] = frame["label"].astype(int)
    np.testing.assert_array_equal(FeatureAssembler.labels(frame), FeatureAssembler.labels(traffic_samples))


def test_csv_with_non_binary_labels_raises(traffic_samples, tmp_path):
    frame = samples_to_frame(traffic_samples[:3])
    frame["label"] = ["normal", "anomaly", "normal"]
    path = tmp_path / "samples.csv"
    frame.to_csv(path, index=False)
    with pytest.raises(DataError):
        load_samples_csv(str(path))

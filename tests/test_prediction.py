import numpy as np
import pytest

from traffic_gbdt.config import TrainerConfig
from traffic_gbdt.data.samples import TrafficSample, samples_to_frame
from traffic_gbdt.exceptions import ModelStateError
from traffic_gbdt.inference.prediction import PredictionService, predict, predict_many
from traffic_gbdt.models.gbdt_components import sigmoid
from traffic_gbdt.pipeline import TrafficPipeline

NORMAL_FLOW = TrafficSample(packet_count=150, avg_packet_size=500, packet_duration=100,
                            interval_between_packets=60, packet_frequency=4,
                            total_data_sent=3000, source_destination_ratio=1.0)
BURST_FLOW = TrafficSample(packet_count=800, avg_packet_size=2000, packet_duration=300,
                           interval_between_packets=15, packet_frequency=10,
                           total_data_sent=10000, source_destination_ratio=3.0)


@pytest.fixture
def fitted(traffic_samples):
    return TrafficPipeline(TrainerConfig(number_of_trees=30)).fit(traffic_samples)


def test_demo_flows_are_classified(fitted):
    assert predict(fitted, NORMAL_FLOW).label is True
    assert predict(fitted, BURST_FLOW).label is False


def test_result_fields_are_consistent(fitted):
    for result in predict_many(fitted, [NORMAL_FLOW, BURST_FLOW]):
        assert result.probability == pytest.approx(float(sigmoid(result.score)))
        assert result.label == (result.probability >= 0.5)
        assert 0.0 <= result.probability <= 1.0


def test_score_matches_tree_walk(fitted):
    features = fitted.transform([NORMAL_FLOW])
    assert predict(fitted, NORMAL_FLOW).score == pytest.approx(fitted.ensemble.score_one(features[0]))


def test_prediction_does_not_depend_on_batch(fitted):
    single = predict(fitted, BURST_FLOW)
    batched = predict_many(fitted, [NORMAL_FLOW, BURST_FLOW])[1]
    assert single == batched


def test_out_of_range_values_still_score(fitted):
    extreme = TrafficSample(packet_count=100000, avg_packet_size=0, packet_duration=0,
                            interval_between_packets=0, packet_frequency=500,
                            total_data_sent=10 ** 7, source_destination_ratio=50.0)
    result = predict(fitted, extreme)
    assert np.isfinite(result.score)


def test_service_round_trip(fitted, tmp_path):
    path = tmp_path / "pipeline.json"
    fitted.save(str(path))
    service = PredictionService.from_file(str(path))
    assert service.predict(NORMAL_FLOW) == predict(fitted, NORMAL_FLOW)
    frame = samples_to_frame([NORMAL_FLOW, BURST_FLOW])
    np.testing.assert_allclose(service.predict_frame(frame),
                               [r.probability for r in service.predict_many([NORMAL_FLOW, BURST_FLOW])])


def test_empty_batch(fitted):
    assert predict_many(fitted, []) == []


@pytest.mark.parametrize("pipeline", [None, object()])
def test_missing_pipeline_raises(pipeline):
    with pytest.raises(ModelStateError):
        predict(pipeline, NORMAL_FLOW)
    with pytest.raises(ModelStateError):
        PredictionService(pipeline)

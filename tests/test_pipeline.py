import json

import numpy as np
import pytest

from traffic_gbdt.__main__ import main
from traffic_gbdt.config import PipelineConfig, TrainerConfig
from traffic_gbdt.data.samples import load_samples_csv, samples_to_frame, save_samples_csv
from traffic_gbdt.evaluation.evaluator import Evaluator
from traffic_gbdt.exceptions import ModelStateError
from traffic_gbdt.pipeline import FittedPipeline, TrafficPipeline, run_experiment


def test_default_scenario_meets_quality_bar():
    result = run_experiment(PipelineConfig.from_dict({"sampleCount": 100, "anomalyProbability": 0.2, "seed": 42}))
    assert len(result.samples) == 100
    assert len(result.pipeline.ensemble) == 100
    assert result.metrics.accuracy >= 0.9
    assert result.metrics.auc >= 0.9
    assert len(result.train_loss_history) == 101


def test_same_seed_gives_identical_models():
    config = {"sampleCount": 60, "numberOfTrees": 10, "seed": 5}
    first = run_experiment(PipelineConfig.from_dict(config))
    second = run_experiment(PipelineConfig.from_dict(config))
    assert first.pipeline.ensemble.to_dict() == second.pipeline.ensemble.to_dict()
    assert first.metrics == second.metrics


def test_fit_on_dataframe(traffic_samples):
    fitted = TrafficPipeline(TrainerConfig(number_of_trees=10)).fit(samples_to_frame(traffic_samples))
    metrics = Evaluator().evaluate_samples(fitted, traffic_samples)
    assert metrics.accuracy >= 0.9


def test_csv_samples_train_like_in_memory_samples(traffic_samples, tmp_path):
    path = tmp_path / "samples.csv"
    save_samples_csv(traffic_samples, str(path))
    loaded = load_samples_csv(str(path))
    assert loaded == traffic_samples


def test_pipeline_save_and_load(traffic_samples, tmp_path):
    fitted = TrafficPipeline(TrainerConfig(number_of_trees=15)).fit(traffic_samples)
    path = tmp_path / "models" / "pipeline.json"
    fitted.save(str(path))
    restored = FittedPipeline.load(str(path))
    np.testing.assert_allclose(restored.predict_proba(traffic_samples), fitted.predict_proba(traffic_samples))


def test_malformed_pipeline_file(tmp_path):
    path = tmp_path / "pipeline.json"
    path.write_text(json.dumps({"ensemble": {}}))
    with pytest.raises(ModelStateError):
        FittedPipeline.load(str(path))


def test_pipeline_requires_ensemble(traffic_samples):
    fitted = TrafficPipeline(TrainerConfig(number_of_trees=2)).fit(traffic_samples)
    with pytest.raises(ModelStateError):
        FittedPipeline(normalization=fitted.normalization, ensemble=None)


def test_evaluate_samples_without_pipeline(traffic_samples):
    with pytest.raises(ModelStateError):
        Evaluator().evaluate_samples(None, traffic_samples)


def test_cli_prints_report(capsys):
    exit_code = main(["--samples", "80", "--trees", "10", "--seed", "1", "--demo-predictions"])
    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Model accuracy:" in out
    assert "AUC:" in out
    assert "F1 Score:" in out
    assert out.count("Prediction:") == 2


def test_cli_saves_model(tmp_path):
    path = tmp_path / "model.json"
    assert main(["--samples", "50", "--trees", "3", "--seed", "2", "--save-model", str(path)]) == 0
    assert FittedPipeline.load(str(path)).ensemble.n_features == 7


def test_cli_reads_config_file(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"numberOfTrees": 4, "sampleCount": 30, "seed": 8}))
    assert main(["--config", str(path), "--summary"]) == 0
    assert "Trees: 4" in capsys.readouterr().out


def test_cli_rejects_invalid_settings(capsys):
    assert main(["--trees", "0"]) == 2
    assert "number_of_trees" in capsys.readouterr().err

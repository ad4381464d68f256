import json

import pytest

pytest.importorskip("lightgbm")
pytest.importorskip("xgboost")

from traffic_gbdt.config import PipelineConfig
from traffic_gbdt.experiments.compare_models import ScratchGBDTModel, run_model_comparison

CONFIG = {"sampleCount": 200, "numberOfTrees": 10, "numberOfLeaves": 8, "seed": 42}


def test_all_models_separate_synthetic_traffic():
    results = run_model_comparison(PipelineConfig.from_dict(CONFIG))
    assert list(results.index) == ["GBDT", "LightGBM", "XGBoost"]
    assert set(results.columns) >= {"accuracy", "auc", "f1", "train_time"}
    assert (results["accuracy"] >= 0.9).all()
    assert results.loc["GBDT", "auc"] >= 0.9


def test_comparison_writes_artifacts(tmp_path):
    run_model_comparison(PipelineConfig.from_dict(CONFIG), model_classes=[ScratchGBDTModel],
                         output_dir=str(tmp_path))
    saved = json.loads((tmp_path / "comparison.json").read_text())
    assert "GBDT" in saved["models"]
    assert (tmp_path / "summary_report.md").exists()
    assert (tmp_path / "figures" / "metrics.png").exists()


def test_invalid_test_size():
    with pytest.raises(ValueError):
        run_model_comparison(PipelineConfig.from_dict(CONFIG), test_size=1.0)

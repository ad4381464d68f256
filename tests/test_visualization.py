import numpy as np
import pandas as pd

from traffic_gbdt.utils.visualization import (
    create_results_directory,
    create_summary_report,
    plot_feature_importance,
    plot_performance_comparison,
    plot_roc_curve,
    plot_training_loss,
    plot_training_time_comparison,
    save_experiment_config,
)


def comparison_frame():
    return pd.DataFrame(
        {"accuracy": [0.98, 0.97], "auc": [0.99, 0.98], "f1": [0.97, 0.96], "train_time": [1.2, 0.1]},
        index=["GBDT", "LightGBM"],
    )


def test_run_plots_are_written(tmp_path):
    plot_training_loss([0.5, 0.4, 0.3], save_path=str(tmp_path / "loss.png"))
    plot_roc_curve(np.array([0, 1, 0, 1]), np.array([0.1, 0.8, 0.3, 0.6]), save_path=str(tmp_path / "roc.png"))
    plot_feature_importance(["a", "b", "c"], np.array([0.2, 0.7, 0.1]), save_path=str(tmp_path / "imp.png"))
    for name in ("loss.png", "roc.png", "imp.png"):
        assert (tmp_path / name).stat().st_size > 0


def test_comparison_outputs(tmp_path):
    results = comparison_frame()
    plot_performance_comparison(results, save_path=str(tmp_path / "figures" / "metrics.png"))
    plot_training_time_comparison(results, save_path=str(tmp_path / "figures" / "time.png"))
    report_path = create_summary_report(results, str(tmp_path))
    assert (tmp_path / "figures" / "metrics.png").exists()
    assert (tmp_path / "figures" / "time.png").exists()
    report = open(report_path).read()
    assert "| GBDT | 0.9800 |" in report


def test_results_directory_and_config(tmp_path):
    results_dir = create_results_directory(str(tmp_path))
    save_experiment_config({"numberOfTrees": 5}, results_dir)
    assert (tmp_path / results_dir.split("/")[-1] / "figures").is_dir()
    assert (tmp_path / results_dir.split("/")[-1] / "experiment_config.json").exists()

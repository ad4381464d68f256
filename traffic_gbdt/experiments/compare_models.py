"""
Baseline comparison experiment

Trains the scratch GBDT, LightGBM and XGBoost with matching settings
(tree count, leaf budget, learning rate, minimum leaf size) on the same
synthetic train/test split and tabulates accuracy, AUC, F1 and timings.
"""

import json
import logging
import os
import time
from typing import Dict, List, Optional

import lightgbm as lgb
import numpy as np
import pandas as pd
import xgboost as xgb

from ..config import PipelineConfig, TrainerConfig
from ..data.features import FeatureAssembler
from ..data.synthetic import SampleGenerator
from ..evaluation.metrics import compute_metrics
from ..models.gbdt_components.gbdt_core import GBDTTrainer
from ..utils.visualization import (
    create_summary_report,
    plot_performance_comparison,
    plot_training_time_comparison,
)

logger = logging.getLogger(__name__)


class ScratchGBDTModel:
    name = "GBDT"

    def __init__(self, config: TrainerConfig, random_state: Optional[int] = None):
        self.trainer = GBDTTrainer.from_config(config)
        self.ensemble = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> "ScratchGBDTModel":
        self.ensemble = self.trainer.fit(X, y)
        return self

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return self.ensemble.predict_proba(X)


class LightGBMModel:
    name = "LightGBM"

    def __init__(self, config: TrainerConfig, random_state: Optional[int] = None):
        self.params = {
            'objective': 'binary',
            'num_leaves': max(config.number_of_leaves, 2),
            'learning_rate': config.learning_rate,
            'min_data_in_leaf': config.min_leaf_samples,
            'min_data_in_bin': 1,
            'lambda_l2': config.l2_regularization,
            'max_depth': -1 if config.max_depth is None else config.max_depth,
            'num_threads': config.n_jobs,
            'verbose': -1,
        }
        if random_state is not None:
            self.params['seed'] = random_state
        self.num_boost_round = config.number_of_trees
        self.model = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> "LightGBMModel":
        train_data = lgb.Dataset(X, label=y)
        self.model = lgb.train(
            self.params,
            train_data,
            num_boost_round=self.num_boost_round,
            callbacks=[lgb.log_evaluation(period=0)],
        )
        return self

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return np.asarray(self.model.predict(X))


class XGBoostModel:
    name = "XGBoost"

    def __init__(self, config: TrainerConfig, random_state: Optional[int] = None):
        self.params = {
            'objective': 'binary:logistic',
            'eta': config.learning_rate,
            'tree_method': 'hist',
            'grow_policy': 'lossguide',
            'max_leaves': config.number_of_leaves,
            'max_depth': 0 if config.max_depth is None else config.max_depth,
            'lambda': config.l2_regularization,
            'min_child_weight': 0,
            'nthread': config.n_jobs,
            'verbosity': 0,
        }
        if random_state is not None:
            self.params['seed'] = random_state
        self.num_boost_round = config.number_of_trees
        self.model = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> "XGBoostModel":
        dtrain = xgb.DMatrix(X, label=y)
        self.model = xgb.train(self.params, dtrain, num_boost_round=self.num_boost_round, verbose_eval=False)
        return self

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return np.asarray(self.model.predict(xgb.DMatrix(X)))


MODEL_CLASSES = [ScratchGBDTModel, LightGBMModel, XGBoostModel]


def run_model_comparison(config: Optional[PipelineConfig] = None,
                         test_size: float = 0.3,
                         model_classes: Optional[List[type]] = None,
                         output_dir: Optional[str] = None) -> pd.DataFrame:
    """
    Compare the scratch GBDT with library baselines

    Parameters:
    -----------
    config : PipelineConfig, optional
        Generator and trainer settings shared by every model
    test_size : float, default=0.3
        Fraction of generated samples held out for evaluation
    model_classes : list of type, optional
        Models to compare (default: GBDT, LightGBM, XGBoost)
    output_dir : str, optional
        When given, the result table (JSON), plots and a markdown report
        are written there

    Returns:
    --------
    results : pd.DataFrame
        One row per model: accuracy, auc, f1, log_loss, train_time, predict_time
    """
    config = (config or PipelineConfig()).validate()
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")

    generator = config.generator
    samples = SampleGenerator().generate(generator.sample_count, generator.anomaly_probability, generator.seed)
    n_test = max(1, int(round(len(samples) * test_size)))
    if n_test >= len(samples):
        raise ValueError("Not enough samples for a train/test split")
    train_samples, test_samples = samples[:-n_test], samples[-n_test:]

    assembler = FeatureAssembler()
    normalization, X_train = assembler.fit_transform(train_samples)
    y_train = assembler.labels(train_samples)
    X_test = assembler.transform(test_samples, normalization)
    y_test = assembler.labels(test_samples)

    rows: Dict[str, Dict[str, float]] = {}
    for model_class in model_classes or MODEL_CLASSES:
        model = model_class(config.trainer, random_state=generator.seed)
        logger.info("Evaluating %s on %d train / %d test samples", model.name, len(train_samples), len(test_samples))

        start_time = time.time()
        model.fit(X_train, y_train)
        train_time = time.time() - start_time

        start_time = time.time()
        probabilities = model.predict_proba(X_test)
        predict_time = time.time() - start_time

        metrics = compute_metrics(y_test, probabilities)
        rows[model.name] = {
            'accuracy': metrics.accuracy,
            'auc': metrics.auc,
            'f1': metrics.f1,
            'log_loss': metrics.log_loss,
            'train_time': train_time,
            'predict_time': predict_time,
        }

    results = pd.DataFrame.from_dict(rows, orient='index')

    if output_dir:
        os.makedirs(os.path.join(output_dir, "figures"), exist_ok=True)
        with open(os.path.join(output_dir, "comparison.json"), 'w') as f:
            json.dump({'config': config.to_dict(), 'models': rows}, f, indent=2)
        plot_performance_comparison(results, save_path=os.path.join(output_dir, "figures", "metrics.png"))
        plot_training_time_comparison(results, save_path=os.path.join(output_dir, "figures", "train_time.png"))
        create_summary_report(results, output_dir)

    return results


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    comparison = run_model_comparison(
        PipelineConfig.from_dict({"sampleCount": 1000, "seed": 42}),
        output_dir="results/model_comparison",
    )
    print(comparison.to_string(float_format=lambda v: f"{v:.4f}"))

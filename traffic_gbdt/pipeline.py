"""
End-to-end pipeline

TrafficPipeline chains the stages:
SampleGenerator -> FeatureAssembler (fit + transform) -> GBDTTrainer (fit)
-> Evaluator. The fitted result, FittedPipeline, bundles the
normalization model with the ensemble and is what evaluation and
single-sample prediction consume.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .config import PipelineConfig, TrainerConfig
from .data.features import FeatureAssembler, NormalizationModel
from .data.samples import SampleInput, TrafficSample
from .data.synthetic import SampleGenerator
from .evaluation.evaluator import Evaluator
from .evaluation.metrics import EvaluationMetrics
from .exceptions import ModelStateError
from .models.gbdt_components.ensemble import Ensemble, require_ensemble
from .models.gbdt_components.gbdt_core import GBDTTrainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FittedPipeline:
    """
    Normalization model + ensemble, applied together to raw samples

    Attributes:
    -----------
    normalization : NormalizationModel
    ensemble : Ensemble
    """

    normalization: NormalizationModel
    ensemble: Ensemble

    def __post_init__(self):
        if self.normalization is None:
            raise ModelStateError("FittedPipeline needs a fitted normalization model")
        require_ensemble(self.ensemble)
        if self.normalization.n_features != self.ensemble.n_features:
            raise ModelStateError(
                f"Normalization has {self.normalization.n_features} features, "
                f"ensemble expects {self.ensemble.n_features}"
            )

    @property
    def assembler(self) -> FeatureAssembler:
        return FeatureAssembler(self.normalization.feature_names)

    def transform(self, samples: SampleInput) -> np.ndarray:
        return self.assembler.transform(samples, self.normalization)

    def decision_function(self, samples: SampleInput) -> np.ndarray:
        return self.ensemble.decision_function(self.transform(samples))

    def predict_proba(self, samples: SampleInput) -> np.ndarray:
        return self.ensemble.predict_proba(self.transform(samples))

    def to_dict(self) -> Dict[str, Any]:
        return {"normalization": self.normalization.to_dict(), "ensemble": self.ensemble.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FittedPipeline":
        try:
            normalization = NormalizationModel.from_dict(data["normalization"])
            ensemble = Ensemble.from_dict(data["ensemble"])
        except KeyError as exc:
            raise ModelStateError(f"Malformed pipeline description, missing {exc}") from exc
        return cls(normalization=normalization, ensemble=ensemble)

    def save(self, file_path: str) -> None:
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f)
        logger.info("Saved fitted pipeline to %s", file_path)

    @classmethod
    def load(cls, file_path: str) -> "FittedPipeline":
        with open(file_path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


class TrafficPipeline:
    """
    Fits normalization and the boosted-tree model on labeled samples

    Parameters:
    -----------
    trainer_config : TrainerConfig, optional
        Training settings (defaults: 100 trees, 20 leaves, learning rate 0.1)
    assembler : FeatureAssembler, optional
        Feature assembler; defaults to all seven traffic features
    """

    def __init__(self,
                 trainer_config: Optional[TrainerConfig] = None,
                 assembler: Optional[FeatureAssembler] = None):
        self.trainer_config = (trainer_config or TrainerConfig()).validate()
        self.assembler = assembler or FeatureAssembler()
        self.trainer: Optional[GBDTTrainer] = None

    def fit(self, samples: SampleInput) -> FittedPipeline:
        normalization, features = self.assembler.fit_transform(samples)
        labels = self.assembler.labels(samples)
        self.trainer = GBDTTrainer.from_config(self.trainer_config)
        ensemble = self.trainer.fit(features, labels)
        return FittedPipeline(normalization=normalization, ensemble=ensemble)


@dataclass(frozen=True)
class ExperimentResult:
    samples: List[TrafficSample]
    pipeline: FittedPipeline
    metrics: EvaluationMetrics
    train_loss_history: List[float]
    trainer: GBDTTrainer


def run_experiment(config: Optional[PipelineConfig] = None) -> ExperimentResult:
    """
    Generate samples, train, and evaluate in-sample

    This is the harness's default scenario: the model is evaluated on the
    same synthetic samples it was trained on.
    """
    config = (config or PipelineConfig()).validate()
    generator_config = config.generator

    samples = SampleGenerator().generate(
        generator_config.sample_count,
        generator_config.anomaly_probability,
        generator_config.seed,
    )
    pipeline = TrafficPipeline(config.trainer)
    fitted = pipeline.fit(samples)
    metrics = Evaluator().evaluate_samples(fitted, samples)
    return ExperimentResult(
        samples=samples,
        pipeline=fitted,
        metrics=metrics,
        train_loss_history=list(pipeline.trainer.train_loss_history_),
        trainer=pipeline.trainer,
    )

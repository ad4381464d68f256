"""
traffic_gbdt

Offline training and evaluation harness for network-traffic anomaly
detection with a from-scratch gradient-boosted decision tree classifier.
"""

from .config import GeneratorConfig, PipelineConfig, TrainerConfig, load_config, save_config
from .exceptions import ConfigError, DataError, ModelStateError, TrafficGBDTError
from .data import (
    FEATURE_NAMES,
    FeatureAssembler,
    NormalizationModel,
    SampleGenerator,
    TrafficSample,
    generate_traffic_samples,
)
from .models import Ensemble, GBDTClassifier, GBDTTrainer, RegressionTree, TreeGrower
from .evaluation import EvaluationMetrics, Evaluator
from .pipeline import ExperimentResult, FittedPipeline, TrafficPipeline, run_experiment
from .inference import PredictionResult, PredictionService, predict

__version__ = "0.1.0"

__all__ = [
    'GeneratorConfig',
    'PipelineConfig',
    'TrainerConfig',
    'load_config',
    'save_config',
    'ConfigError',
    'DataError',
    'ModelStateError',
    'TrafficGBDTError',
    'FEATURE_NAMES',
    'FeatureAssembler',
    'NormalizationModel',
    'SampleGenerator',
    'TrafficSample',
    'generate_traffic_samples',
    'Ensemble',
    'GBDTClassifier',
    'GBDTTrainer',
    'RegressionTree',
    'TreeGrower',
    'EvaluationMetrics',
    'Evaluator',
    'ExperimentResult',
    'FittedPipeline',
    'TrafficPipeline',
    'run_experiment',
    'PredictionResult',
    'PredictionService',
    'predict',
]

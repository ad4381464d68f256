"""
Configuration

Dataclass-based configuration for sample generation and GBDT training.
Configs can be loaded from / saved to JSON; both snake_case keys and the
camelCase option names (numberOfTrees, learningRate, ...) are accepted.
"""

import json
import numbers
import os
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from .exceptions import ConfigError

GROWTH_STRATEGIES = ("leafwise", "depthwise")

_CAMEL_CASE_ALIASES = {
    "numberOfTrees": "number_of_trees",
    "numberOfLeaves": "number_of_leaves",
    "learningRate": "learning_rate",
    "minLeafSamples": "min_leaf_samples",
    "maxDepth": "max_depth",
    "l2Regularization": "l2_regularization",
    "nJobs": "n_jobs",
    "growthStrategy": "growth_strategy",
    "anomalyProbability": "anomaly_probability",
    "sampleCount": "sample_count",
}


def is_real_number(value: Any) -> bool:
    """True for int/float values (numpy scalars included), False for bools and strings."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass
class GeneratorConfig:
    """
    Synthetic sample generation settings

    Attributes:
    -----------
    sample_count : int
        Number of samples to draw
    anomaly_probability : float
        Bernoulli probability that a sample is an anomaly
    seed : int or None
        Seed for the random generator (None = non-reproducible)
    """

    sample_count: int = 100
    anomaly_probability: float = 0.2
    seed: Optional[int] = None

    def validate(self) -> "GeneratorConfig":
        if not isinstance(self.sample_count, int) or self.sample_count <= 0:
            raise ConfigError(f"sample_count must be a positive integer, got {self.sample_count!r}")
        if not is_real_number(self.anomaly_probability) or not 0.0 <= self.anomaly_probability <= 1.0:
            raise ConfigError(
                f"anomaly_probability must be in [0, 1], got {self.anomaly_probability!r}"
            )
        return self


@dataclass
class TrainerConfig:
    """
    GBDT training settings

    Attributes:
    -----------
    number_of_trees : int
        Number of boosting rounds
    number_of_leaves : int
        Maximum number of leaves per tree
    learning_rate : float
        Shrinkage applied to every tree's output
    min_leaf_samples : int
        Minimum number of samples in a leaf
    max_depth : int or None
        Depth bound for a single tree (None = bounded by leaves only)
    l2_regularization : float
        Constant added to Hessian sums in gains and leaf values
    n_jobs : int
        Worker threads used by the split search
    growth_strategy : str
        "leafwise" or "depthwise"
    """

    number_of_trees: int = 100
    number_of_leaves: int = 20
    learning_rate: float = 0.1
    min_leaf_samples: int = 1
    max_depth: Optional[int] = None
    l2_regularization: float = 1e-6
    n_jobs: int = 1
    growth_strategy: str = "leafwise"

    def validate(self) -> "TrainerConfig":
        if not isinstance(self.number_of_trees, int) or self.number_of_trees <= 0:
            raise ConfigError(f"number_of_trees must be a positive integer, got {self.number_of_trees!r}")
        if not isinstance(self.number_of_leaves, int) or self.number_of_leaves <= 0:
            raise ConfigError(f"number_of_leaves must be a positive integer, got {self.number_of_leaves!r}")
        if not is_real_number(self.learning_rate) or not self.learning_rate > 0:
            raise ConfigError(f"learning_rate must be positive, got {self.learning_rate!r}")
        if not isinstance(self.min_leaf_samples, int) or self.min_leaf_samples < 1:
            raise ConfigError(f"min_leaf_samples must be >= 1, got {self.min_leaf_samples!r}")
        if self.max_depth is not None and (not isinstance(self.max_depth, int) or self.max_depth < 1):
            raise ConfigError(f"max_depth must be None or >= 1, got {self.max_depth!r}")
        if not is_real_number(self.l2_regularization) or self.l2_regularization < 0:
            raise ConfigError(f"l2_regularization must be >= 0, got {self.l2_regularization!r}")
        if not isinstance(self.n_jobs, int) or self.n_jobs < 1:
            raise ConfigError(f"n_jobs must be a positive integer, got {self.n_jobs!r}")
        if self.growth_strategy not in GROWTH_STRATEGIES:
            raise ConfigError(
                f"growth_strategy must be one of {GROWTH_STRATEGIES}, got {self.growth_strategy!r}"
            )
        return self


@dataclass
class PipelineConfig:
    """Generator and trainer settings for one end-to-end run."""

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    trainer: TrainerConfig = field(default_factory=TrainerConfig)

    def validate(self) -> "PipelineConfig":
        self.generator.validate()
        self.trainer.validate()
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"generator": asdict(self.generator), "trainer": asdict(self.trainer)}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "PipelineConfig":
        """
        Build a config from a nested or flat dictionary

        A flat dictionary mixes generator and trainer keys at the top level,
        e.g. {"numberOfTrees": 50, "anomalyProbability": 0.3, "seed": 1}.
        """
        if "generator" in raw or "trainer" in raw:
            generator_raw = _normalize_keys(raw.get("generator", {}))
            trainer_raw = _normalize_keys(raw.get("trainer", {}))
        else:
            flat = _normalize_keys(raw)
            generator_raw = {k: v for k, v in flat.items() if k in _field_names(GeneratorConfig)}
            trainer_raw = {k: v for k, v in flat.items() if k in _field_names(TrainerConfig)}
            unknown = set(flat) - set(generator_raw) - set(trainer_raw)
            if unknown:
                raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

        config = cls(
            generator=_build(GeneratorConfig, generator_raw),
            trainer=_build(TrainerConfig, trainer_raw),
        )
        return config.validate()


def _field_names(config_cls) -> set:
    return {f.name for f in fields(config_cls)}


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {_CAMEL_CASE_ALIASES.get(key, key): value for key, value in raw.items()}


def _build(config_cls, raw: Dict[str, Any]):
    unknown = set(raw) - _field_names(config_cls)
    if unknown:
        raise ConfigError(f"Unknown {config_cls.__name__} keys: {sorted(unknown)}")
    return config_cls(**raw)


def load_config(file_path: str) -> PipelineConfig:
    """Load and validate a JSON configuration file."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {file_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration root must be an object, got {type(raw).__name__}")
    return PipelineConfig.from_dict(raw)


def save_config(config: PipelineConfig, file_path: str) -> None:
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)

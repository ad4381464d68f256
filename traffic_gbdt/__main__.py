"""
Command-line entry point

    python -m traffic_gbdt [--samples 100] [--trees 100] [--leaves 20] ...

Generates synthetic traffic, trains the classifier, evaluates it on the
training samples and prints accuracy / AUC / F1.
"""

import argparse
import logging
import sys

from .config import PipelineConfig, load_config
from .data.samples import TrafficSample
from .exceptions import TrafficGBDTError
from .inference.prediction import PredictionService
from .pipeline import run_experiment
from .utils.logging import configure_logging

logger = logging.getLogger(__name__)

DEMO_SAMPLES = [
    # typical normal flow
    TrafficSample(packet_count=150, avg_packet_size=500, packet_duration=100,
                  interval_between_packets=60, packet_frequency=4,
                  total_data_sent=3000, source_destination_ratio=1.0),
    # bursty, oversized flow
    TrafficSample(packet_count=800, avg_packet_size=2000, packet_duration=300,
                  interval_between_packets=15, packet_frequency=10,
                  total_data_sent=10000, source_destination_ratio=3.0),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="traffic_gbdt", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--config", help="JSON configuration file (command-line options override it)")
    parser.add_argument("--samples", type=int, help="number of synthetic samples")
    parser.add_argument("--anomaly-probability", type=float, help="probability of an anomalous sample")
    parser.add_argument("--seed", type=int, help="random seed for sample generation")
    parser.add_argument("--trees", type=int, help="number of boosting rounds")
    parser.add_argument("--leaves", type=int, help="maximum leaves per tree")
    parser.add_argument("--learning-rate", type=float, help="shrinkage per tree")
    parser.add_argument("--min-leaf-samples", type=int, help="minimum samples per leaf")
    parser.add_argument("--growth-strategy", choices=["leafwise", "depthwise"])
    parser.add_argument("--n-jobs", type=int, help="threads used by the split search")
    parser.add_argument("--save-model", help="write the fitted pipeline to this JSON file")
    parser.add_argument("--demo-predictions", action="store_true", help="score two example flows")
    parser.add_argument("--summary", action="store_true", help="print the training summary")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    config = load_config(args.config) if args.config else PipelineConfig()
    overrides = [
        (config.generator, "sample_count", args.samples),
        (config.generator, "anomaly_probability", args.anomaly_probability),
        (config.generator, "seed", args.seed),
        (config.trainer, "number_of_trees", args.trees),
        (config.trainer, "number_of_leaves", args.leaves),
        (config.trainer, "learning_rate", args.learning_rate),
        (config.trainer, "min_leaf_samples", args.min_leaf_samples),
        (config.trainer, "growth_strategy", args.growth_strategy),
        (config.trainer, "n_jobs", args.n_jobs),
    ]
    for section, name, value in overrides:
        if value is not None:
            setattr(section, name, value)
    return config.validate()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = config_from_args(args)
        result = run_experiment(config)
    except TrafficGBDTError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(result.metrics.format_report())

    if args.summary:
        result.trainer.print_training_summary()

    if args.save_model:
        result.pipeline.save(args.save_model)

    if args.demo_predictions:
        service = PredictionService(result.pipeline)
        print("Predictions:")
        for sample, prediction in zip(DEMO_SAMPLES, service.predict_many(DEMO_SAMPLES)):
            verdict = "Normal" if prediction.label else "Anomaly"
            print(f"PacketCount: {sample.packet_count}, AveragePacketSize: {sample.avg_packet_size}")
            print(f"Prediction: {verdict}, Score: {prediction.score:.4f}, Probability: {prediction.probability:.2%}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

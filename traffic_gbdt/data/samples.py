"""
Traffic Sample Records

This module defines the TrafficSample record, the fixed feature order
shared by every stage, and helpers for moving samples in and out of
pandas DataFrames / CSV files.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..exceptions import DataError

FEATURE_NAMES = (
    "packet_count",
    "avg_packet_size",
    "packet_duration",
    "interval_between_packets",
    "packet_frequency",
    "total_data_sent",
    "source_destination_ratio",
)

LABEL_COLUMN = "label"


@dataclass(frozen=True)
class TrafficSample:
    """
    One per-flow observation

    Attributes:
    -----------
    packet_count : int
        Number of packets in the flow
    avg_packet_size : int
        Average packet size (bytes)
    packet_duration : int
        Duration (ms)
    interval_between_packets : int
        Mean inter-packet gap (ms)
    packet_frequency : int
        Packets per second
    total_data_sent : int
        Total volume (bytes)
    source_destination_ratio : float
        Ratio of source to destination volume
    label : bool or None
        True = normal, False = anomaly, None = unlabeled (inference only)
    """

    packet_count: int
    avg_packet_size: int
    packet_duration: int
    interval_between_packets: int
    packet_frequency: int
    total_data_sent: int
    source_destination_ratio: float
    label: Optional[bool] = None

    def feature_values(self) -> List[float]:
        return [float(getattr(self, name)) for name in FEATURE_NAMES]


SampleInput = Union[Sequence[TrafficSample], pd.DataFrame]


def samples_to_frame(samples: Iterable[TrafficSample]) -> pd.DataFrame:
    """Convert samples to a DataFrame with FEATURE_NAMES columns plus `label`."""
    records = [
        {**{name: getattr(s, name) for name in FEATURE_NAMES}, LABEL_COLUMN: s.label}
        for s in samples
    ]
    return pd.DataFrame.from_records(records, columns=list(FEATURE_NAMES) + [LABEL_COLUMN])


def samples_from_frame(frame: pd.DataFrame) -> List[TrafficSample]:
    """
    Build TrafficSample records from a DataFrame

    The frame must contain every column in FEATURE_NAMES. The `label`
    column is optional; missing values become unlabeled samples.
    """
    missing = [name for name in FEATURE_NAMES if name not in frame.columns]
    if missing:
        raise DataError(f"DataFrame is missing feature columns: {missing}")

    has_label = LABEL_COLUMN in frame.columns
    samples = []
    for row in frame.itertuples(index=False):
        values = row._asdict()
        label = values.get(LABEL_COLUMN) if has_label else None
        if label is not None and pd.isna(label):
            label = None
        if label is not None and label not in (0, 1):
            raise DataError(f"Labels must be 0/1 or True/False, got {label!r}")
        samples.append(
            TrafficSample(
                packet_count=int(values["packet_count"]),
                avg_packet_size=int(values["avg_packet_size"]),
                packet_duration=int(values["packet_duration"]),
                interval_between_packets=int(values["interval_between_packets"]),
                packet_frequency=int(values["packet_frequency"]),
                total_data_sent=int(values["total_data_sent"]),
                source_destination_ratio=float(values["source_destination_ratio"]),
                label=None if label is None else bool(label),
            )
        )
    return samples


def load_samples_csv(file_path: str) -> List[TrafficSample]:
    return samples_from_frame(pd.read_csv(file_path))


def save_samples_csv(samples: Iterable[TrafficSample], file_path: str) -> None:
    samples_to_frame(samples).to_csv(file_path, index=False)


def feature_matrix(samples: SampleInput) -> np.ndarray:
    """
    Stack raw feature values into a (n_samples, n_features) float array
    in FEATURE_NAMES order.
    """
    if isinstance(samples, pd.DataFrame):
        missing = [name for name in FEATURE_NAMES if name not in samples.columns]
        if missing:
            raise DataError(f"DataFrame is missing feature columns: {missing}")
        try:
            return samples.loc[:, list(FEATURE_NAMES)].to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise DataError(f"Non-numeric feature values: {exc}") from exc

    rows = [s.feature_values() for s in samples]
    if not rows:
        return np.empty((0, len(FEATURE_NAMES)), dtype=np.float64)
    return np.asarray(rows, dtype=np.float64)


def label_vector(samples: SampleInput) -> np.ndarray:
    """
    Extract labels as a 0/1 float array (1 = normal)

    Raises DataError if any sample is unlabeled.
    """
    if isinstance(samples, pd.DataFrame):
        if LABEL_COLUMN not in samples.columns:
            raise DataError("DataFrame has no 'label' column")
        labels = samples[LABEL_COLUMN]
        if labels.isna().any():
            raise DataError(f"{int(labels.isna().sum())} samples are missing a label")
        if pd.api.types.is_bool_dtype(labels):
            return labels.to_numpy(dtype=np.float64)
        invalid = ~labels.isin([0, 1])
        if invalid.any():
            bad = sorted({repr(v) for v in labels[invalid].unique()})
            raise DataError(f"Labels must be 0/1 or True/False, got {', '.join(bad)}")
        return labels.astype(np.float64).to_numpy()

    labels = [s.label for s in samples]
    n_missing = sum(1 for label in labels if label is None)
    if n_missing:
        raise DataError(f"{n_missing} samples are missing a label")
    return np.asarray(labels, dtype=np.float64)

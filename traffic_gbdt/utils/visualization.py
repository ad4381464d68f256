"""
Experiment result saving and plotting utilities

Plots for a single training run (loss curve, ROC curve, feature
importance) and for baseline comparisons (metric heatmap, training time),
plus a markdown summary report.
"""

import datetime
import json
import os
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from ..evaluation.metrics import roc_auc, roc_curve_points


def create_results_directory(base_dir: str = "results") -> str:
    """
    Create a timestamped results directory with a figures/ subdirectory

    Returns:
    --------
    results_dir : str
        Path of the created directory
    """
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    results_dir = os.path.join(base_dir, f"experiment_{timestamp}")
    os.makedirs(os.path.join(results_dir, "figures"), exist_ok=True)
    return results_dir


def save_experiment_config(config: Dict, results_dir: str) -> None:
    with open(os.path.join(results_dir, "experiment_config.json"), 'w') as f:
        json.dump(config, f, indent=2)


def _finish(save_path: Optional[str]) -> None:
    if save_path:
        directory = os.path.dirname(save_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close()


def plot_training_loss(loss_history: Sequence[float],
                       title: str = "Training Log-Loss per Boosting Round",
                       save_path: Optional[str] = None) -> None:
    """
    Parameters:
    -----------
    loss_history : sequence of float
        Loss after initialization (round 0) and after every tree
    """
    plt.figure(figsize=(10, 6))
    plt.plot(np.arange(len(loss_history)), loss_history, marker='.', linewidth=1)
    plt.xlabel('Boosting round')
    plt.ylabel('Log-loss')
    plt.title(title)
    plt.grid(True, linestyle='--', alpha=0.7)
    _finish(save_path)


def plot_roc_curve(y_true: np.ndarray, scores: np.ndarray,
                   title: str = "ROC Curve",
                   save_path: Optional[str] = None) -> None:
    fpr, tpr = roc_curve_points(y_true, scores)
    auc = roc_auc(y_true, scores)

    plt.figure(figsize=(7, 7))
    plt.plot(fpr, tpr, label=f"AUC = {auc:.4f}")
    plt.plot([0, 1], [0, 1], linestyle='--', color='grey')
    plt.xlabel('False positive rate')
    plt.ylabel('True positive rate')
    plt.title(title)
    plt.legend(loc='lower right')
    _finish(save_path)


def plot_feature_importance(feature_names: Sequence[str], importance: np.ndarray,
                            title: str = "Split-Gain Feature Importance",
                            save_path: Optional[str] = None) -> None:
    df = pd.DataFrame({'feature': list(feature_names), 'importance': np.asarray(importance)})
    df = df.sort_values('importance', ascending=False)

    plt.figure(figsize=(10, 6))
    sns.barplot(data=df, x='importance', y='feature', color='steelblue')
    plt.title(title)
    plt.tight_layout()
    _finish(save_path)


def plot_performance_comparison(results: pd.DataFrame,
                                metrics: Sequence[str] = ('accuracy', 'auc', 'f1'),
                                title: str = "Model Performance Comparison",
                                save_path: Optional[str] = None) -> None:
    """
    Heatmap of metric values

    Parameters:
    -----------
    results : pd.DataFrame
        One row per model (index = model name), one column per metric
    """
    plt.figure(figsize=(10, 6))
    sns.heatmap(results.loc[:, list(metrics)], annot=True, fmt=".4f", cmap="YlGnBu")
    plt.title(title)
    plt.tight_layout()
    _finish(save_path)


def plot_training_time_comparison(results: pd.DataFrame,
                                  title: str = "Model Training Time Comparison",
                                  save_path: Optional[str] = None) -> None:
    plt.figure(figsize=(10, 6))
    sns.barplot(x=results.index.tolist(), y=results['train_time'].tolist(), color='steelblue')
    plt.ylabel('Training time (s)')
    plt.title(title)
    plt.tight_layout()
    _finish(save_path)


def create_summary_report(results: pd.DataFrame, results_dir: str) -> str:
    """
    Write summary_report.md with one table row per model

    Returns:
    --------
    report_path : str
    """
    report = [
        "# Traffic Anomaly Detection: Model Comparison",
        f"Run at: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n",
        "| Model | Accuracy | AUC | F1 | Train time (s) |",
        "| --- | --- | --- | --- | --- |",
    ]
    for model_name, row in results.iterrows():
        report.append(f"| {model_name} | {row['accuracy']:.4f} | {row['auc']:.4f} | "
                      f"{row['f1']:.4f} | {row['train_time']:.4f} |")

    report_path = os.path.join(results_dir, "summary_report.md")
    with open(report_path, 'w') as f:
        f.write('\n'.join(report))
    return report_path

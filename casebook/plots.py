# casebook/plots.py

"""
matplotlib figures for both walkthroughs.

Every function builds and returns a Figure; nothing is saved to disk and
nothing calls plt.show(). The walkthroughs and CLIs decide when to show.
"""

from __future__ import annotations

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.figure import Figure
from sklearn.pipeline import Pipeline

from .data import CLASS_NAMES
from .data_churn import ChurnFrame, churn_rate_by
from .vision import TrainHistory


# ---------- Image walkthrough ----------

def plot_image_grid(
    images: np.ndarray,
    labels: Sequence[int],
    n: int = 25,
    ncols: int = 5,
) -> Figure:
    """First `n` images with their class names underneath."""
    n = min(n, len(images))
    nrows = int(np.ceil(n / ncols))
    fig = plt.figure(figsize=(2 * ncols, 2 * nrows))
    for i in range(n):
        ax = fig.add_subplot(nrows, ncols, i + 1)
        ax.set_xticks([])
        ax.set_yticks([])
        ax.grid(False)
        ax.imshow(images[i], cmap=plt.cm.binary)
        ax.set_xlabel(CLASS_NAMES[int(labels[i])])
    fig.tight_layout()
    return fig


def plot_image(
    ax,
    image: np.ndarray,
    probabilities: np.ndarray,
    true_label: int,
) -> None:
    """Draw one image; the caption is blue when the prediction is right, red when wrong."""
    predicted = int(np.argmax(probabilities))
    color = "blue" if predicted == int(true_label) else "red"

    ax.set_xticks([])
    ax.set_yticks([])
    ax.grid(False)
    ax.imshow(image, cmap=plt.cm.binary)
    ax.set_xlabel(
        f"{CLASS_NAMES[predicted]} {100 * np.max(probabilities):2.0f}% "
        f"({CLASS_NAMES[int(true_label)]})",
        color=color,
    )


def plot_value_array(ax, probabilities: np.ndarray, true_label: int) -> None:
    """Bar chart of class probabilities; predicted bar red, true bar blue."""
    ax.set_xticks(range(len(CLASS_NAMES)))
    ax.set_yticks([])
    ax.grid(False)
    bars = ax.bar(range(len(CLASS_NAMES)), probabilities, color="#777777")
    ax.set_ylim([0, 1])
    bars[int(np.argmax(probabilities))].set_color("red")
    bars[int(true_label)].set_color("blue")


def plot_prediction_grid(
    images: np.ndarray,
    probabilities: np.ndarray,
    true_labels: Sequence[int],
    nrows: int = 5,
    ncols: int = 3,
) -> Figure:
    """Image + probability bars side by side for the first nrows*ncols images."""
    n = min(nrows * ncols, len(images))
    fig = plt.figure(figsize=(2 * 2 * ncols, 2 * nrows))
    for i in range(n):
        plot_image(fig.add_subplot(nrows, 2 * ncols, 2 * i + 1), images[i], probabilities[i], true_labels[i])
        plot_value_array(fig.add_subplot(nrows, 2 * ncols, 2 * i + 2), probabilities[i], true_labels[i])
    fig.tight_layout()
    return fig


def plot_training_history(history: TrainHistory) -> Figure:
    epochs = range(1, history.epochs + 1)
    fig, (ax_loss, ax_acc) = plt.subplots(1, 2, figsize=(10, 4))
    ax_loss.plot(epochs, history.loss, marker="o")
    ax_loss.set_title("Training loss")
    ax_loss.set_xlabel("Epoch")
    ax_acc.plot(epochs, history.accuracy, marker="o", color="tab:green")
    ax_acc.set_title("Training accuracy")
    ax_acc.set_xlabel("Epoch")
    fig.tight_layout()
    return fig


# ---------- Churn walkthrough ----------

def plot_churn_by(frame: ChurnFrame, column: str, pos_label: str = "Yes") -> Figure:
    """Churn rate per level of a categorical column."""
    rates = churn_rate_by(frame, column, pos_label=pos_label)
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(rates.index.astype(str), rates.values, color="tab:orange")
    ax.set_ylabel("Churn rate")
    ax.set_title(f"Churn rate by {column}")
    ax.tick_params(axis="x", rotation=30)
    fig.tight_layout()
    return fig


def plot_numeric_by_churn(frame: ChurnFrame, column: str, bins: int = 30) -> Figure:
    """Overlaid histograms of a numeric column, one per outcome level."""
    df = frame.data
    fig, ax = plt.subplots(figsize=(6, 4))
    for label, group in df.groupby(frame.outcome):
        ax.hist(group[column], bins=bins, alpha=0.5, label=f"{frame.outcome}={label}")
    ax.set_xlabel(column)
    ax.set_ylabel("Customers")
    ax.legend()
    fig.tight_layout()
    return fig


def plot_confusion_matrix(table: pd.DataFrame, title: str = "Confusion matrix") -> Figure:
    """Heatmap of a confusion_table() result (rows prediction, columns truth)."""
    fig, ax = plt.subplots(figsize=(4.5, 4))
    im = ax.imshow(table.values, cmap="Blues")
    ax.set_xticks(range(table.shape[1]))
    ax.set_xticklabels(table.columns.astype(str))
    ax.set_yticks(range(table.shape[0]))
    ax.set_yticklabels(table.index.astype(str))
    ax.set_xlabel("Truth")
    ax.set_ylabel("Prediction")
    ax.set_title(title)
    threshold = table.values.max() / 2 if table.size else 0
    for i in range(table.shape[0]):
        for j in range(table.shape[1]):
            value = table.values[i, j]
            ax.text(j, i, str(value), ha="center", va="center",
                    color="white" if value > threshold else "black")
    fig.colorbar(im, ax=ax)
    fig.tight_layout()
    return fig


def plot_feature_importance(pipeline: Pipeline, top_n: int = 15) -> Figure:
    """Impurity importances of a fitted random-forest churn pipeline."""
    model = pipeline.named_steps["model"]
    if not hasattr(model, "feature_importances_"):
        raise ValueError(f"{type(model).__name__} has no feature importances")

    names = pipeline.named_steps["preprocess"].get_feature_names_out()
    order = np.argsort(model.feature_importances_)[::-1][:top_n]

    fig, ax = plt.subplots(figsize=(7, 0.35 * len(order) + 1))
    ax.barh([names[i] for i in order][::-1], model.feature_importances_[order][::-1])
    ax.set_xlabel("Importance")
    ax.set_title(f"Top {len(order)} features")
    fig.tight_layout()
    return fig


def plot_resample_metrics(results: pd.DataFrame, metric: Optional[str] = None) -> Figure:
    """Per-fold estimates from fit_resamples(), one box per metric."""
    if metric is not None:
        results = results[results["metric"] == metric]
    metrics = list(dict.fromkeys(results["metric"]))
    fig, ax = plt.subplots(figsize=(1.6 * max(len(metrics), 1) + 2, 4))
    ax.boxplot([results.loc[results["metric"] == m, "estimate"] for m in metrics])
    ax.set_xticks(range(1, len(metrics) + 1))
    ax.set_xticklabels(metrics)
    ax.set_ylabel("Estimate")
    ax.set_title("Cross-validation metrics")
    fig.tight_layout()
    return fig

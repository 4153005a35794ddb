# casebook/metrics.py

from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
)


def confusion_table(
    truth: Sequence,
    estimate: Sequence,
    labels: Optional[Sequence] = None,
) -> pd.DataFrame:
    """
    Confusion matrix as a DataFrame: rows are predictions, columns are truth.

    The cell total equals the number of scored rows.
    """
    truth = np.asarray(truth)
    estimate = np.asarray(estimate)
    if labels is None:
        labels = np.unique(np.concatenate([truth, estimate]))
    labels = list(labels)

    # sklearn lays out (truth, prediction); transpose to prediction-major.
    cm = confusion_matrix(truth, estimate, labels=labels).T
    return pd.DataFrame(
        cm,
        index=pd.Index(labels, name="Prediction"),
        columns=pd.Index(labels, name="Truth"),
    )


def classification_metrics(
    truth: Sequence,
    estimate: Sequence,
    pos_label="Yes",
) -> Dict[str, float]:
    """Accuracy plus precision / recall / F1 for the positive class."""
    return {
        "accuracy": float(accuracy_score(truth, estimate)),
        "precision": float(precision_score(truth, estimate, pos_label=pos_label, zero_division=0)),
        "recall": float(recall_score(truth, estimate, pos_label=pos_label, zero_division=0)),
        "f_meas": float(f1_score(truth, estimate, pos_label=pos_label, zero_division=0)),
    }


def metrics_frame(metrics: Dict[str, float]) -> pd.DataFrame:
    """Long-format table: one row per metric."""
    return pd.DataFrame(
        {"metric": list(metrics.keys()), "estimate": list(metrics.values())}
    )

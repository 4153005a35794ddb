# casebook/predict.py

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline
from torch import nn

from .data import CLASS_NAMES
from .data_churn import OUTCOME
from .vision import predict_proba


@dataclass
class ImagePrediction:
    labels: np.ndarray         # (N,) argmax class per image
    probabilities: np.ndarray  # (N, n_classes), rows sum to 1

    @property
    def confidence(self) -> np.ndarray:
        """Probability assigned to the predicted class."""
        return self.probabilities[np.arange(len(self.labels)), self.labels]

    def names(self):
        return [class_name(label) for label in self.labels]


def class_name(label: int) -> str:
    if not 0 <= int(label) < len(CLASS_NAMES):
        raise ValueError(f"Label out of range: {label}")
    return CLASS_NAMES[int(label)]


def predict_images(model: nn.Module, images: np.ndarray) -> ImagePrediction:
    """
    Run a logits-emitting image model and return softmax probabilities
    together with the predicted labels.
    """
    probabilities = predict_proba(model, images)
    return ImagePrediction(
        labels=probabilities.argmax(axis=1),
        probabilities=probabilities,
    )


def predict_churn(
    pipeline: Pipeline,
    data: pd.DataFrame,
    pos_label="Yes",
    outcome: str = OUTCOME,
) -> pd.DataFrame:
    """
    Class and positive-class probability for each row of `data`.

    `data` may still contain the outcome column; it is ignored.
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"Expected pandas DataFrame, got {type(data)}")

    classes = list(pipeline.classes_)
    if pos_label not in classes:
        raise ValueError(f"pos_label {pos_label!r} not among fitted classes {classes}")

    X = data.drop(columns=[outcome]) if outcome in data.columns else data
    proba = pipeline.predict_proba(X)[:, classes.index(pos_label)]

    return pd.DataFrame(
        {
            ".pred_class": pipeline.predict(X),
            f".pred_{pos_label}": proba,
        },
        index=data.index,
    )

# casebook/models.py

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict

from torch import nn
from sklearn.compose import ColumnTransformer, make_column_selector
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from .config import RANDOM_SEED
from .data import CLASS_NAMES, IMAGE_SHAPE
from .recipe import StringToCategory


class ModelFamily(str, Enum):
    LOGREG = "logreg"
    RANDOM_FOREST = "random_forest"
    DENSE_NET = "dense_net"


@dataclass
class ModelSpec:
    """
    High-level description of a model.
    - family: what kind of stack it is
    - task_type: 'tabular_classification' or 'image_classification'
    - extra: free-form dict (e.g. default number of CV folds)
    """
    family: ModelFamily
    task_type: str = "tabular_classification"
    extra: Dict[str, Any] = field(default_factory=dict)


def get_model_spec(name: str) -> ModelSpec:
    """
    Map a short, user-facing model name to a full spec.
    This is where you define *all* supported models.
    """
    # Baseline for the churn walkthrough: no resampling, fit once on train
    if name == "logreg":
        return ModelSpec(family=ModelFamily.LOGREG, extra={"n_folds": 0})

    # Random forest is evaluated with 10-fold CV before the final fit
    if name in ("rf", "random_forest"):
        return ModelSpec(
            family=ModelFamily.RANDOM_FOREST,
            extra={"n_folds": 10, "n_estimators": 100},
        )

    # Flatten -> Dense(128, relu) -> Dense(10) logits
    if name in ("dense", "dense_net"):
        return ModelSpec(
            family=ModelFamily.DENSE_NET,
            task_type="image_classification",
            extra={"hidden_units": 128, "n_classes": len(CLASS_NAMES)},
        )

    raise ValueError(f"Unknown model name: {name}")


def build_image_classifier(
    hidden_units: int = 128,
    n_classes: int = len(CLASS_NAMES),
    image_shape=IMAGE_SHAPE,
) -> nn.Module:
    """Small dense network; the last layer emits raw logits (no softmax)."""
    n_pixels = image_shape[0] * image_shape[1]
    return nn.Sequential(
        nn.Flatten(),
        nn.Linear(n_pixels, hidden_units),
        nn.ReLU(),
        nn.Linear(hidden_units, n_classes),
    )


def create_local_model(model_name: str):
    """
    Create an untrained model object: an sklearn estimator for the tabular
    models, a torch module for the image model.
    """
    spec = get_model_spec(model_name)

    if spec.family == ModelFamily.LOGREG:
        return LogisticRegression(max_iter=1000)

    if spec.family == ModelFamily.RANDOM_FOREST:
        return RandomForestClassifier(
            n_estimators=spec.extra["n_estimators"],
            random_state=RANDOM_SEED,
        )

    if spec.family == ModelFamily.DENSE_NET:
        return build_image_classifier(
            hidden_units=spec.extra["hidden_units"],
            n_classes=spec.extra["n_classes"],
        )

    raise ValueError(f"Unhandled model family: {spec.family}")


def build_churn_pipeline(model_name: str) -> Pipeline:
    """
    recipe -> encoding -> estimator.

    The recipe step lives inside the pipeline so that every fit (final fit
    or a single CV fold) learns category levels from its own training rows.
    """
    spec = get_model_spec(model_name)
    if spec.task_type != "tabular_classification":
        raise ValueError(f"Model '{model_name}' is not a tabular classifier")

    encoder = ColumnTransformer(
        transformers=[
            ("num", StandardScaler(), make_column_selector(dtype_include="number")),
            (
                "cat",
                OneHotEncoder(handle_unknown="ignore", sparse_output=False),
                make_column_selector(dtype_include="category"),
            ),
        ]
    )

    return Pipeline(
        steps=[
            ("recipe", StringToCategory()),
            ("preprocess", encoder),
            ("model", create_local_model(model_name)),
        ]
    )

# casebook/resample.py

"""
V-fold cross-validation over a tidy DataFrame.

Each fold is an (analysis, assessment) pair of row positions. Pipelines are
cloned per fold so nothing learned on one fold leaks into another; only the
metrics table is carried across iterations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.model_selection import KFold, StratifiedKFold
from sklearn.pipeline import Pipeline

from .config import RANDOM_SEED
from .metrics import classification_metrics
from .report import log


@dataclass(frozen=True)
class Fold:
    id: str
    analysis_idx: np.ndarray
    assessment_idx: np.ndarray

    def analysis(self, data: pd.DataFrame) -> pd.DataFrame:
        return data.iloc[self.analysis_idx]

    def assessment(self, data: pd.DataFrame) -> pd.DataFrame:
        return data.iloc[self.assessment_idx]


def vfold_cv(
    data: pd.DataFrame,
    v: int = 10,
    seed: int = RANDOM_SEED,
    strata: Optional[str] = None,
) -> List[Fold]:
    """
    Split `data` into v folds. The same seed always yields the same folds.
    """
    if v < 2:
        raise ValueError(f"v must be at least 2, got {v}")
    if v > len(data):
        raise ValueError(f"v={v} exceeds the number of rows ({len(data)})")

    positions = np.arange(len(data))
    if strata is not None:
        splitter = StratifiedKFold(n_splits=v, shuffle=True, random_state=seed)
        splits = splitter.split(positions, data[strata].to_numpy())
    else:
        splitter = KFold(n_splits=v, shuffle=True, random_state=seed)
        splits = splitter.split(positions)

    return [
        Fold(id=f"Fold{i:02d}", analysis_idx=analysis, assessment_idx=assessment)
        for i, (analysis, assessment) in enumerate(splits, start=1)
    ]


def fit_resamples(
    make_pipeline: Callable[[], Pipeline],
    folds: List[Fold],
    data: pd.DataFrame,
    outcome: str,
    pos_label="Yes",
) -> pd.DataFrame:
    """
    Fit a fresh pipeline on each fold's analysis rows and score its
    assessment rows. Returns one row per (fold, metric).
    """
    rows = []
    template = make_pipeline()

    for fold in folds:
        analysis = fold.analysis(data)
        assessment = fold.assessment(data)

        pipeline = clone(template)
        pipeline.fit(analysis.drop(columns=[outcome]), analysis[outcome])
        estimate = pipeline.predict(assessment.drop(columns=[outcome]))

        metrics = classification_metrics(assessment[outcome], estimate, pos_label=pos_label)
        log(
            f"{fold.id}: n_analysis={len(analysis)} n_assessment={len(assessment)} "
            f"accuracy={metrics['accuracy']:.4f}"
        )
        for name, value in metrics.items():
            rows.append({"id": fold.id, "metric": name, "estimate": value})

    return pd.DataFrame(rows, columns=["id", "metric", "estimate"])


def collect_metrics(results: pd.DataFrame) -> pd.DataFrame:
    """Average each metric over folds: metric, mean, n, std_err."""
    grouped = results.groupby("metric", sort=False)["estimate"]
    summary = grouped.agg(["mean", "count", "std"]).reset_index()
    summary = summary.rename(columns={"count": "n"})
    summary["std_err"] = summary["std"].fillna(0.0) / np.sqrt(summary["n"])
    return summary[["metric", "mean", "n", "std_err"]]

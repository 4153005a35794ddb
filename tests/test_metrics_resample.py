"""Tests for confusion/metric tables and v-fold resampling."""

import numpy as np
import pandas as pd
import pytest

from casebook.data_churn import train_test_churn
from casebook.metrics import classification_metrics, confusion_table, metrics_frame
from casebook.models import build_churn_pipeline
from casebook.resample import collect_metrics, fit_resamples, vfold_cv


TRUTH = ["Yes", "No", "Yes", "No", "No", "Yes"]
ESTIMATE = ["Yes", "No", "No", "Yes", "No", "Yes"]


def test_confusion_table_orientation_and_total():
    table = confusion_table(TRUTH, ESTIMATE, labels=["No", "Yes"])

    assert table.index.name == "Prediction"
    assert table.columns.name == "Truth"
    assert table.values.sum() == len(TRUTH)
    # predicted Yes, truly No
    assert table.loc["Yes", "No"] == 1
    # predicted No, truly Yes
    assert table.loc["No", "Yes"] == 1
    assert table.loc["Yes", "Yes"] == 2


def test_confusion_table_infers_labels():
    table = confusion_table([0, 1, 2], [0, 2, 2])
    assert list(table.index) == [0, 1, 2]
    assert table.values.sum() == 3


def test_classification_metrics_values():
    m = classification_metrics(TRUTH, ESTIMATE, pos_label="Yes")
    assert m["accuracy"] == pytest.approx(4 / 6)
    assert m["precision"] == pytest.approx(2 / 3)
    assert m["recall"] == pytest.approx(2 / 3)
    assert m["f_meas"] == pytest.approx(2 / 3)


def test_classification_metrics_no_positive_predictions():
    m = classification_metrics(["Yes", "No"], ["No", "No"], pos_label="Yes")
    assert m["precision"] == 0.0
    assert m["recall"] == 0.0


def test_metrics_frame_is_long_format():
    df = metrics_frame({"accuracy": 0.5, "recall": 0.25})
    assert list(df.columns) == ["metric", "estimate"]
    assert list(df["metric"]) == ["accuracy", "recall"]


def test_vfold_partitions_data():
    data = pd.DataFrame({"x": range(53)})
    folds = vfold_cv(data, v=10, seed=3)

    assert len(folds) == 10
    assert folds[0].id == "Fold01" and folds[-1].id == "Fold10"

    all_assessment = np.concatenate([f.assessment_idx for f in folds])
    assert sorted(all_assessment.tolist()) == list(range(53))
    for fold in folds:
        assert set(fold.analysis_idx).isdisjoint(fold.assessment_idx)
        assert len(fold.analysis_idx) + len(fold.assessment_idx) == 53


def test_vfold_is_reproducible():
    data = pd.DataFrame({"x": range(40)})
    a = vfold_cv(data, v=5, seed=11)
    b = vfold_cv(data, v=5, seed=11)
    for fa, fb in zip(a, b):
        assert np.array_equal(fa.assessment_idx, fb.assessment_idx)


def test_vfold_stratified(churn_frame):
    folds = vfold_cv(churn_frame.data, v=4, strata="Churn")
    overall = (churn_frame.data["Churn"] == "Yes").mean()
    for fold in folds:
        rate = (fold.assessment(churn_frame.data)["Churn"] == "Yes").mean()
        assert abs(rate - overall) < 0.1


@pytest.mark.parametrize("v", [0, 1, 100])
def test_vfold_rejects_bad_v(v):
    with pytest.raises(ValueError):
        vfold_cv(pd.DataFrame({"x": range(20)}), v=v)


def test_fit_resamples_and_collect(churn_frame):
    splits = train_test_churn(churn_frame)
    folds = vfold_cv(splits.train, v=3)

    results = fit_resamples(
        lambda: build_churn_pipeline("logreg"),
        folds,
        splits.train,
        outcome="Churn",
    )

    assert list(results.columns) == ["id", "metric", "estimate"]
    assert len(results) == 3 * 4
    assert set(results["id"]) == {"Fold01", "Fold02", "Fold03"}

    summary = collect_metrics(results)
    assert list(summary.columns) == ["metric", "mean", "n", "std_err"]
    assert set(summary["metric"]) == {"accuracy", "precision", "recall", "f_meas"}
    assert (summary["n"] == 3).all()
    acc = summary.set_index("metric").loc["accuracy", "mean"]
    assert 0.0 <= acc <= 1.0

"""Tests for the churn CSV loader, cleaning and split."""

import pytest

from casebook.data_churn import (
    ID_COLUMN,
    OUTCOME,
    churn_rate_by,
    explore,
    load_churn_raw,
    make_churn_frame,
    train_test_churn,
)

from conftest import N_BLANK_TOTALS, N_CUSTOMERS


def test_missing_csv_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_churn_raw(tmp_path / "nope.csv")


def test_blank_total_charges_rows_are_dropped(churn_csv):
    frame = make_churn_frame(churn_csv)

    assert frame.n_raw == N_CUSTOMERS
    assert frame.n_dropped == N_BLANK_TOTALS
    assert frame.n_rows == N_CUSTOMERS - N_BLANK_TOTALS
    assert frame.data.isna().sum().sum() == 0
    assert frame.data["TotalCharges"].dtype.kind == "f"


def test_identifier_column_is_dropped(churn_frame):
    assert ID_COLUMN not in churn_frame.data.columns
    assert churn_frame.outcome == OUTCOME


def test_split_sizes_sum_to_frame(churn_frame):
    splits = train_test_churn(churn_frame, test_size=0.2)

    assert len(splits.train) + len(splits.test) == churn_frame.n_rows
    assert set(splits.train.index).isdisjoint(splits.test.index)
    assert OUTCOME not in splits.X_train.columns
    assert len(splits.y_test) == len(splits.test)


def test_split_is_reproducible(churn_frame):
    a = train_test_churn(churn_frame, seed=7)
    b = train_test_churn(churn_frame, seed=7)
    assert list(a.test.index) == list(b.test.index)


def test_split_is_stratified(churn_frame):
    splits = train_test_churn(churn_frame, test_size=0.25, stratify=True)
    overall = (churn_frame.data[OUTCOME] == "Yes").mean()
    test_rate = (splits.y_test == "Yes").mean()
    assert abs(overall - test_rate) < 0.05


@pytest.mark.parametrize("test_size", [0.0, 1.0, -0.1, 1.5])
def test_invalid_test_size(churn_frame, test_size):
    with pytest.raises(ValueError):
        train_test_churn(churn_frame, test_size=test_size)


def test_churn_rate_by_contract(churn_frame):
    rates = churn_rate_by(churn_frame, "Contract")
    assert set(rates.index) == {"Month-to-month", "One year", "Two year"}
    assert rates.index[0] == "Month-to-month"
    assert ((rates >= 0) & (rates <= 1)).all()


def test_churn_rate_by_unknown_column(churn_frame):
    with pytest.raises(ValueError):
        churn_rate_by(churn_frame, "NotAColumn")


def test_explore_prints_summary(churn_frame, capsys):
    explore(churn_frame)
    out = capsys.readouterr().out
    assert f"Dropped for missing values: {N_BLANK_TOTALS}" in out
    assert "Churn rate by Contract type" in out

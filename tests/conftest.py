"""Shared fixtures: a small synthetic Telco-like table and random images."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from casebook.data import ImageSplits
from casebook.data_churn import clean_churn


N_CUSTOMERS = 240
N_BLANK_TOTALS = 6


def make_raw_churn(n: int = N_CUSTOMERS, n_blank: int = N_BLANK_TOTALS, seed: int = 0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)

    contract = rng.choice(["Month-to-month", "One year", "Two year"], size=n, p=[0.5, 0.3, 0.2])
    tenure = rng.integers(1, 72, size=n)
    monthly = rng.uniform(20, 110, size=n).round(2)
    churn_prob = np.where(contract == "Month-to-month", 0.55, 0.1)
    churn = np.where(rng.uniform(size=n) < churn_prob, "Yes", "No")

    total = (tenure * monthly).round(2).astype(str).astype(object)
    total[:n_blank] = " "

    return pd.DataFrame(
        {
            "customerID": [f"{i:04d}-ABCDE" for i in range(n)],
            "gender": rng.choice(["Female", "Male"], size=n),
            "SeniorCitizen": rng.integers(0, 2, size=n),
            "Partner": rng.choice(["Yes", "No"], size=n),
            "tenure": tenure,
            "InternetService": rng.choice(["DSL", "Fiber optic", "No"], size=n),
            "Contract": contract,
            "PaymentMethod": rng.choice(
                ["Electronic check", "Mailed check", "Bank transfer (automatic)"], size=n
            ),
            "MonthlyCharges": monthly,
            "TotalCharges": total,
            "Churn": churn,
        }
    )


@pytest.fixture
def raw_churn():
    return make_raw_churn()


@pytest.fixture
def churn_csv(tmp_path, raw_churn):
    path = tmp_path / "telco.csv"
    raw_churn.to_csv(path, index=False)
    return path


@pytest.fixture
def churn_frame(raw_churn):
    return clean_churn(raw_churn)


@pytest.fixture
def image_splits():
    rng = np.random.default_rng(1)
    return ImageSplits(
        train_images=rng.integers(0, 256, size=(120, 28, 28), dtype=np.uint8),
        train_labels=np.tile(np.arange(10), 12).astype(np.int64),
        test_images=rng.integers(0, 256, size=(40, 28, 28), dtype=np.uint8),
        test_labels=np.tile(np.arange(10), 4).astype(np.int64),
    )

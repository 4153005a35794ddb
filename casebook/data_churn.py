# casebook/data_churn.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from sklearn.model_selection import train_test_split

from .config import CHURN_CSV_PATH, RANDOM_SEED
from .report import banner


OUTCOME = "Churn"
ID_COLUMN = "customerID"

NUMERIC_FEATURES = ["SeniorCitizen", "tenure", "MonthlyCharges", "TotalCharges"]


# ---------- Simple containers ----------

@dataclass
class ChurnFrame:
    data: pd.DataFrame       # predictors + outcome, one row per customer
    outcome: str             # name of the label column ("Yes" = churned)
    n_raw: int               # rows in the CSV
    n_dropped: int           # rows discarded for missing values

    @property
    def n_rows(self) -> int:
        return len(self.data)


@dataclass
class ChurnSplits:
    train: pd.DataFrame
    test: pd.DataFrame
    outcome: str

    @property
    def X_train(self) -> pd.DataFrame:
        return self.train.drop(columns=[self.outcome])

    @property
    def y_train(self) -> pd.Series:
        return self.train[self.outcome]

    @property
    def X_test(self) -> pd.DataFrame:
        return self.test.drop(columns=[self.outcome])

    @property
    def y_test(self) -> pd.Series:
        return self.test[self.outcome]


# ---------- Loaders ----------

def load_churn_raw(path: Union[str, Path, None] = None) -> pd.DataFrame:
    """
    Load the raw Telco customer churn table.
    """
    csv_path = Path(path) if path is not None else CHURN_CSV_PATH
    if not csv_path.exists():
        raise FileNotFoundError(f"Churn CSV not found: {csv_path}")
    return pd.read_csv(csv_path)


# ---------- Cleaning ----------

def clean_churn(raw: pd.DataFrame) -> ChurnFrame:
    """
    Turn the raw table into a modeling frame.

    - TotalCharges is stored as text; blank entries (customers with zero
      tenure) are coerced to missing.
    - Rows with any missing value are discarded, not imputed.
    - The customer identifier is dropped; it carries no signal.
    """
    df = raw.copy()

    if "TotalCharges" in df.columns:
        df["TotalCharges"] = pd.to_numeric(df["TotalCharges"], errors="coerce")

    n_raw = len(df)
    df = df.dropna().reset_index(drop=True)

    if ID_COLUMN in df.columns:
        df = df.drop(columns=[ID_COLUMN])

    if OUTCOME not in df.columns:
        raise ValueError(f"Outcome column '{OUTCOME}' missing from churn data")

    return ChurnFrame(data=df, outcome=OUTCOME, n_raw=n_raw, n_dropped=n_raw - len(df))


def make_churn_frame(path: Union[str, Path, None] = None) -> ChurnFrame:
    return clean_churn(load_churn_raw(path))


def train_test_churn(
    frame: Optional[ChurnFrame] = None,
    test_size: float = 0.2,
    stratify: bool = True,
    seed: int = RANDOM_SEED,
) -> ChurnSplits:
    """
    Split churn data into train/test sets.

    The outcome stays inside both frames (a tidy split); ChurnSplits exposes
    X_/y_ views for sklearn.
    """
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")

    if frame is None:
        frame = make_churn_frame()

    df = frame.data
    stratify_vec = df[frame.outcome] if stratify else None

    train, test = train_test_split(
        df,
        test_size=test_size,
        random_state=seed,
        stratify=stratify_vec,
    )

    return ChurnSplits(train=train, test=test, outcome=frame.outcome)


# ---------- Exploration ----------

def explore(frame: ChurnFrame) -> None:
    """Print a summary of the cleaned churn table."""
    df = frame.data

    banner("Telco churn data")
    print(f"Rows in CSV: {frame.n_raw}")
    print(f"Dropped for missing values: {frame.n_dropped}")
    print(f"Shape: {df.shape[0]} rows, {df.shape[1]} columns\n")

    counts = df[frame.outcome].value_counts()
    print("Target distribution:")
    for label, count in counts.items():
        print(f"  {str(label):<4s} {count:>6d} ({count / len(df):.1%})")
    print()

    numeric = [c for c in NUMERIC_FEATURES if c in df.columns]
    if numeric:
        print("Numeric features:")
        for col in numeric:
            print(
                f"  {col:>16s}:  min={df[col].min():.1f}  "
                f"median={df[col].median():.1f}  max={df[col].max():.1f}"
            )
        print()

    if "Contract" in df.columns:
        print("Churn rate by Contract type:")
        rates = churn_rate_by(frame, "Contract")
        for contract, rate in rates.items():
            print(f"  {contract:>16s}: {rate:.1%}")
        print()


def churn_rate_by(frame: ChurnFrame, column: str, pos_label: str = "Yes") -> pd.Series:
    """Share of churned customers within each level of `column`."""
    df = frame.data
    if column not in df.columns:
        raise ValueError(f"Unknown column: {column}")
    is_churn = (df[frame.outcome] == pos_label).astype(float)
    return is_churn.groupby(df[column]).mean().sort_values(ascending=False)

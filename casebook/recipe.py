# casebook/recipe.py

"""
Preprocessing recipe for the churn walkthrough.

A recipe is fit ("prepped") on the training partition only and then applied
("baked") unchanged to any partition. Category levels therefore always come
from training data; values first seen at bake time become missing instead of
introducing a new level.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted


def _string_columns(df: pd.DataFrame) -> List[str]:
    # bool counts as numeric to pandas; treat it as a two-level factor
    return [
        c for c in df.columns
        if pd.api.types.is_bool_dtype(df[c]) or not pd.api.types.is_numeric_dtype(df[c])
    ]


class StringToCategory(BaseEstimator, TransformerMixin):
    """
    Cast string (non-numeric) columns to pandas categoricals with levels learned in fit().

    columns=None selects every non-numeric or bool column seen in fit().
    """

    def __init__(self, columns: Optional[List[str]] = None):
        self.columns = columns

    def fit(self, X: pd.DataFrame, y=None):
        if not isinstance(X, pd.DataFrame):
            raise TypeError(f"Expected pandas DataFrame, got {type(X)}")

        cols = list(self.columns) if self.columns is not None else _string_columns(X)
        missing = [c for c in cols if c not in X.columns]
        if missing:
            raise ValueError(f"Columns not found in training data: {missing}")

        self.categories_: Dict[str, List] = {
            col: sorted(X[col].dropna().astype(str).unique()) for col in cols
        }
        self.feature_names_in_ = X.columns.to_numpy(dtype=object)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, "categories_")
        if not isinstance(X, pd.DataFrame):
            raise TypeError(f"Expected pandas DataFrame, got {type(X)}")

        out = X.copy()
        for col, levels in self.categories_.items():
            if col in out.columns:
                values = out[col].astype(str)
                # unseen values are masked to missing before the cast
                values = values.where(values.isin(levels))
                out[col] = pd.Categorical(values, categories=levels)
        return out

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "categories_")
        return self.feature_names_in_


class Recipe:
    """
    Named preprocessing spec: outcome plus string-to-category step.

        rec = Recipe("Churn").prep(splits.train)
        baked_train = rec.bake(splits.train)
        baked_test = rec.bake(splits.test)
    """

    def __init__(self, outcome: str, predictors: Optional[List[str]] = None):
        self.outcome = outcome
        self.predictors = predictors
        self._step = StringToCategory(columns=predictors)
        self._outcome_step = StringToCategory(columns=[outcome])

    @property
    def is_prepped(self) -> bool:
        return hasattr(self._step, "categories_")

    @property
    def levels(self) -> Dict[str, List]:
        """Learned levels per column, outcome included."""
        check_is_fitted(self._step, "categories_")
        return {**self._step.categories_, **self._outcome_step.categories_}

    def prep(self, training: pd.DataFrame) -> "Recipe":
        if self.outcome not in training.columns:
            raise ValueError(f"Outcome column '{self.outcome}' not in training data")
        predictors = training.drop(columns=[self.outcome])
        self._step.fit(predictors)
        self._outcome_step.fit(training[[self.outcome]])
        return self

    def bake(self, new_data: pd.DataFrame) -> pd.DataFrame:
        """Apply the prepped steps; the outcome is cast too when present."""
        check_is_fitted(self._step, "categories_")
        has_outcome = self.outcome in new_data.columns
        predictors = new_data.drop(columns=[self.outcome]) if has_outcome else new_data
        baked = self._step.transform(predictors)
        if has_outcome:
            baked[self.outcome] = self._outcome_step.transform(new_data[[self.outcome]])[self.outcome]
        return baked

    def __repr__(self) -> str:
        state = "prepped" if self.is_prepped else "not prepped"
        return f"Recipe(outcome={self.outcome!r}, {state})"

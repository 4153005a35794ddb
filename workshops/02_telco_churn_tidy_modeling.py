"""
Walkthrough 02: customer churn with a tidy modeling workflow.

Split -> recipe (prepped on train, baked on train and test) -> baseline
logistic regression -> 10-fold cross-validated random forest.

Expects the IBM Telco churn CSV at artifacts/datasets/ or CASEBOOK_CHURN_CSV.
"""

# %% Imports
import matplotlib.pyplot as plt

from casebook.data_churn import explore, make_churn_frame, train_test_churn
from casebook.metrics import classification_metrics, confusion_table, metrics_frame
from casebook.models import build_churn_pipeline
from casebook.plots import (
    plot_churn_by,
    plot_confusion_matrix,
    plot_feature_importance,
    plot_numeric_by_churn,
    plot_resample_metrics,
)
from casebook.predict import predict_churn
from casebook.recipe import Recipe
from casebook.report import print_frame, print_metrics
from casebook.resample import collect_metrics, fit_resamples, vfold_cv

# %% Load and clean
# TotalCharges has 11 blank entries; those rows are dropped, as is customerID.
frame = make_churn_frame()
explore(frame)

plot_churn_by(frame, "Contract")
plot_churn_by(frame, "PaymentMethod")
plot_numeric_by_churn(frame, "tenure")

# %% Train/test split (80/20, stratified on Churn)
splits = train_test_churn(frame, test_size=0.2)
print(f"Train: {len(splits.train)}  Test: {len(splits.test)}  Total: {frame.n_rows}")

# %% Recipe: string columns -> categoricals, levels learned from train only
rec = Recipe(outcome=splits.outcome).prep(splits.train)
print(rec)
baked_train = rec.bake(splits.train)
baked_test = rec.bake(splits.test)
print(baked_train.dtypes.value_counts())
print(baked_test.head())

# %% Baseline: logistic regression
logreg = build_churn_pipeline("logreg")
logreg.fit(splits.X_train, splits.y_train)

logreg_pred = predict_churn(logreg, splits.test)
print(logreg_pred.head())

logreg_cm = confusion_table(splits.y_test, logreg_pred[".pred_class"], labels=["No", "Yes"])
print_frame(logreg_cm, "Logistic regression: confusion matrix")
print_frame(
    metrics_frame(classification_metrics(splits.y_test, logreg_pred[".pred_class"])),
    "Logistic regression: test metrics",
)
plot_confusion_matrix(logreg_cm, title="Logistic regression")

# %% Random forest, 10-fold cross-validation on the training set
folds = vfold_cv(splits.train, v=10)
rf_results = fit_resamples(
    lambda: build_churn_pipeline("rf"),
    folds,
    splits.train,
    outcome=splits.outcome,
)
print_frame(collect_metrics(rf_results), "Random forest: resampled metrics")
plot_resample_metrics(rf_results)

# %% Random forest, final fit on the full training set
rf = build_churn_pipeline("rf")
rf.fit(splits.X_train, splits.y_train)
rf_pred = rf.predict(splits.X_test)

rf_cm = confusion_table(splits.y_test, rf_pred, labels=["No", "Yes"])
print_frame(rf_cm, "Random forest: confusion matrix")
print_metrics(classification_metrics(splits.y_test, rf_pred), "Random forest: test metrics")
plot_confusion_matrix(rf_cm, title="Random forest")
plot_feature_importance(rf)

plt.show()

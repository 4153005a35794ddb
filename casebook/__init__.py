# casebook/__init__.py

"""
casebook: two narrative ML walkthroughs as a small library.

- Fashion-MNIST image classification with a dense PyTorch network.
- Telco customer churn with a train-only preprocessing recipe, a baseline
  logistic regression and a cross-validated random forest.
"""

from . import config, data, data_churn, metrics, models, recipe, resample, train

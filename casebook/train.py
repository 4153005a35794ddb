# casebook/train.py

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from .data import load_fashion_mnist, scale_images, CLASS_NAMES
from .data_churn import make_churn_frame, train_test_churn
from .metrics import classification_metrics, confusion_table
from .models import build_churn_pipeline, create_local_model, get_model_spec
from .resample import collect_metrics, fit_resamples, vfold_cv
from .report import banner, log
from .vision import evaluate_image_classifier, fit_image_classifier, predict_proba


DATASETS = ("fashion_mnist", "telco_churn")


@dataclass
class TrainConfig:
    # What dataset to train on
    # - "fashion_mnist": 10-class grayscale images (dense network)
    # - "telco_churn": Telco customer churn table (logreg / rf)
    dataset: str = "telco_churn"

    # Model choice (resolved via models.py)
    model_name: str = "logreg"

    # Churn only:
    test_size: float = 0.2
    n_folds: Optional[int] = None   # None -> model spec default (rf: 10, logreg: 0)
    pos_label: str = "Yes"
    data_path: Optional[str] = None

    # Fashion-MNIST only:
    epochs: int = 10
    batch_size: int = 32
    learning_rate: float = 1e-3
    progress: bool = True


def _train_fashion_mnist(config: TrainConfig) -> Dict[str, Any]:
    """
    Image path: scale pixels, fit the dense network for `epochs`, then score
    the held-out test partition.
    """
    spec = get_model_spec(config.model_name)
    if spec.task_type != "image_classification":
        raise ValueError(f"Model '{config.model_name}' cannot train on fashion_mnist")

    splits = load_fashion_mnist()
    train_images = scale_images(splits.train_images)
    test_images = scale_images(splits.test_images)

    model = create_local_model(config.model_name)

    banner("Training dense network")
    history = fit_image_classifier(
        model,
        train_images,
        splits.train_labels,
        epochs=config.epochs,
        batch_size=config.batch_size,
        learning_rate=config.learning_rate,
        progress=config.progress,
    )

    metrics = evaluate_image_classifier(model, test_images, splits.test_labels)
    log(f"test loss: {metrics['loss']:.4f}  test accuracy: {metrics['accuracy']:.4f}")

    predicted = predict_proba(model, test_images).argmax(axis=1)
    cm = confusion_table(splits.test_labels, predicted, labels=list(range(len(CLASS_NAMES))))

    return {
        "model": model,
        "metrics": metrics,
        "extra": {
            "dataset": "fashion_mnist",
            "n_train_images": int(len(train_images)),
            "n_test_images": int(len(test_images)),
            "history": history.as_dict(),
            "confusion_matrix": cm.values.tolist(),
        },
    }


def _train_telco_churn(config: TrainConfig) -> Dict[str, Any]:
    """
    Tabular path:
      - load, drop missing rows and the id column, split train/test
      - optionally estimate performance with v-fold CV on the training set
      - fit recipe + model on the full training set, score the test set
    """
    spec = get_model_spec(config.model_name)
    if spec.task_type != "tabular_classification":
        raise ValueError(f"Model '{config.model_name}' cannot train on telco_churn")

    frame = make_churn_frame(config.data_path)
    splits = train_test_churn(frame, test_size=config.test_size, stratify=True)
    log(
        f"rows: {frame.n_raw} raw, {frame.n_dropped} dropped, "
        f"{len(splits.train)} train / {len(splits.test)} test"
    )

    n_folds = config.n_folds if config.n_folds is not None else spec.extra.get("n_folds", 0)

    resample_summary = None
    if n_folds:
        banner(f"{n_folds}-fold cross-validation ({config.model_name})")
        folds = vfold_cv(splits.train, v=n_folds)
        results = fit_resamples(
            lambda: build_churn_pipeline(config.model_name),
            folds,
            splits.train,
            outcome=splits.outcome,
            pos_label=config.pos_label,
        )
        summary = collect_metrics(results)
        resample_summary = {
            row.metric: {"mean": float(row.mean), "n": int(row.n), "std_err": float(row.std_err)}
            for row in summary.itertuples(index=False)
        }

    banner(f"Final fit ({config.model_name})")
    model = build_churn_pipeline(config.model_name)
    model.fit(splits.X_train, splits.y_train)

    y_pred = model.predict(splits.X_test)
    metrics = classification_metrics(splits.y_test, y_pred, pos_label=config.pos_label)
    cm = confusion_table(splits.y_test, y_pred, labels=list(model.classes_))

    return {
        "model": model,
        "metrics": metrics,
        "extra": {
            "dataset": "telco_churn",
            "n_raw_rows": int(frame.n_raw),
            "n_dropped_rows": int(frame.n_dropped),
            "n_train_rows": int(len(splits.train)),
            "n_test_rows": int(len(splits.test)),
            "n_folds": int(n_folds),
            "resamples": resample_summary,
            "confusion_matrix": {
                "labels": [str(c) for c in cm.columns],
                "counts": cm.values.tolist(),
            },
        },
    }


def train(config: TrainConfig) -> Dict[str, Any]:
    """
    High-level training entrypoint.

    - Selects dataset ("fashion_mnist" vs "telco_churn")
    - Trains the chosen model and scores the held-out split
    - Returns a dict with model, config, metrics and extra details.
      Nothing is written to disk.
    """
    if config.dataset == "fashion_mnist":
        result = _train_fashion_mnist(config)
    elif config.dataset == "telco_churn":
        result = _train_telco_churn(config)
    else:
        raise ValueError(f"Unknown dataset: {config.dataset}")

    return {
        "model": result["model"],
        "config": asdict(config),
        "metrics": result["metrics"],
        "extra": result.get("extra", {}),
    }

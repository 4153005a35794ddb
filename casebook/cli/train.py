# casebook/cli/train.py

import argparse
import json

from casebook.train import DATASETS, TrainConfig, train


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run one of the casebook walkthroughs end to end."
    )

    parser.add_argument(
        "--dataset",
        choices=DATASETS,
        default="telco_churn",
        help="Which dataset to train on.",
    )

    parser.add_argument(
        "--model-name",
        default=None,
        help="Model name (defined in casebook.models: logreg, rf, dense). "
             "Defaults to logreg for telco_churn and dense for fashion_mnist.",
    )

    # Churn-only arguments (ignored for fashion_mnist)
    parser.add_argument(
        "--test-size",
        type=float,
        default=0.2,
        help="Fraction of data to use as test split (telco_churn only).",
    )
    parser.add_argument(
        "--folds",
        type=int,
        default=None,
        help="Cross-validation folds; 0 disables resampling (telco_churn only).",
    )
    parser.add_argument(
        "--pos-label",
        default="Yes",
        help="Outcome level treated as the positive class for precision/recall/F1 (telco_churn only).",
    )
    parser.add_argument(
        "--data-path",
        default=None,
        help="Path to the Telco churn CSV (telco_churn only).",
    )

    # Image-only arguments (ignored for telco_churn)
    parser.add_argument("--epochs", type=int, default=10, help="Training epochs (fashion_mnist only).")
    parser.add_argument("--batch-size", type=int, default=32, help="Mini-batch size (fashion_mnist only).")
    parser.add_argument("--learning-rate", type=float, default=1e-3, help="Adam learning rate (fashion_mnist only).")

    parser.add_argument(
        "--plots",
        action="store_true",
        help="Show result figures after training.",
    )

    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> TrainConfig:
    model_name = args.model_name
    if model_name is None:
        model_name = "dense" if args.dataset == "fashion_mnist" else "logreg"

    return TrainConfig(
        dataset=args.dataset,
        model_name=model_name,
        test_size=args.test_size,
        n_folds=args.folds,
        pos_label=args.pos_label,
        data_path=args.data_path,
        epochs=args.epochs,
        batch_size=args.batch_size,
        learning_rate=args.learning_rate,
    )


def show_plots(results) -> None:
    import matplotlib.pyplot as plt
    import pandas as pd

    from casebook import plots
    from casebook.vision import TrainHistory

    extra = results["extra"]
    if extra["dataset"] == "fashion_mnist":
        plots.plot_training_history(TrainHistory(**extra["history"]))
    else:
        cm = extra["confusion_matrix"]
        table = pd.DataFrame(cm["counts"], index=cm["labels"], columns=cm["labels"])
        plots.plot_confusion_matrix(table, title=f"{results['config']['model_name']} (test set)")
        if hasattr(results["model"].named_steps["model"], "feature_importances_"):
            plots.plot_feature_importance(results["model"])
    plt.show()


def main(argv=None):
    args = parse_args(argv)
    cfg = config_from_args(args)

    results = train(cfg)

    summary = {k: v for k, v in results.items() if k != "model"}
    print(json.dumps(summary, indent=2))

    if args.plots:
        show_plots(results)


if __name__ == "__main__":
    main()

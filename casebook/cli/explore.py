# casebook/cli/explore.py

import argparse

from casebook.data import describe_images, load_fashion_mnist
from casebook.data_churn import explore, make_churn_frame
from casebook.train import DATASETS


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print a summary of a casebook dataset."
    )
    parser.add_argument("--dataset", choices=DATASETS, default="telco_churn")
    parser.add_argument(
        "--data-path",
        default=None,
        help="Path to the Telco churn CSV (telco_churn only).",
    )
    parser.add_argument(
        "--plots",
        action="store_true",
        help="Show exploratory figures.",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.dataset == "fashion_mnist":
        splits = load_fashion_mnist()
        describe_images(splits)
        if args.plots:
            import matplotlib.pyplot as plt
            from casebook.plots import plot_image_grid

            plot_image_grid(splits.train_images, splits.train_labels)
            plt.show()
        return

    frame = make_churn_frame(args.data_path)
    explore(frame)
    if args.plots:
        import matplotlib.pyplot as plt
        from casebook.plots import plot_churn_by, plot_numeric_by_churn

        plot_churn_by(frame, "Contract")
        plot_churn_by(frame, "InternetService")
        plot_numeric_by_churn(frame, "tenure")
        plot_numeric_by_churn(frame, "MonthlyCharges")
        plt.show()


if __name__ == "__main__":
    main()

# casebook/report.py

"""
Console output helpers shared by the walkthroughs and the CLIs.

Everything goes to stdout with print(); the walkthroughs are meant to be
read top to bottom like a notebook transcript.
"""

from typing import Mapping

import pandas as pd


def log(msg: str) -> None:
    """Prefixed progress line."""
    print(f"[casebook] {msg}")


def banner(title: str) -> None:
    print(f"=== {title} ===")


def print_metrics(metrics: Mapping[str, float], title: str = "Metrics") -> None:
    """Print a metric -> value mapping as an aligned two-column table."""
    banner(title)
    width = max((len(k) for k in metrics), default=0)
    for name, value in metrics.items():
        if value is None:
            print(f"  {name:<{width}s}  n/a")
        else:
            print(f"  {name:<{width}s}  {value:.4f}")
    print()


def print_frame(df: pd.DataFrame, title: str) -> None:
    banner(title)
    print(df.to_string())
    print()


# casebook/config.py

from pathlib import Path
import os

# Root of the project; overridable via env for containers/CI
PROJECT_ROOT = Path(
    os.getenv("CASEBOOK_ROOT", Path(__file__).resolve().parents[1])
)

# Base artifacts directory (downloaded and local datasets)
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"

# Datasets directory (CSV files, torchvision downloads)
DATASETS_DIR = ARTIFACTS_DIR / "datasets"

# Telco customer churn CSV (IBM sample data)
CHURN_CSV_PATH = Path(
    os.getenv("CASEBOOK_CHURN_CSV", DATASETS_DIR / "WA_Fn-UseC_-Telco-Customer-Churn.csv")
)

# Global random seed (overridable via env)
RANDOM_SEED = int(os.getenv("CASEBOOK_RANDOM_SEED", "42"))

# Torch device for the image walkthrough ("cpu", "cuda", "mps", ...)
DEVICE = os.getenv("CASEBOOK_DEVICE", "cpu")

# casebook/data.py

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from torchvision.datasets import FashionMNIST

from .config import DATASETS_DIR
from .report import banner


# Label order used by Fashion-MNIST (index == integer label)
CLASS_NAMES = [
    "T-shirt/top",
    "Trouser",
    "Pullover",
    "Dress",
    "Coat",
    "Sandal",
    "Shirt",
    "Sneaker",
    "Bag",
    "Ankle boot",
]

IMAGE_SHAPE = (28, 28)


@dataclass(frozen=True)
class ImageSplits:
    train_images: np.ndarray  # (N, 28, 28) uint8
    train_labels: np.ndarray  # (N,) int64
    test_images: np.ndarray
    test_labels: np.ndarray


def load_fashion_mnist(
    root: Union[str, Path] = DATASETS_DIR,
    download: bool = True,
) -> ImageSplits:
    """
    Load the Fashion-MNIST train/test partitions as numpy arrays.

    torchvision caches the archives under <root>/FashionMNIST/, so only the
    first call touches the network.
    """
    root = Path(root)
    train_ds = FashionMNIST(root=str(root), train=True, download=download)
    test_ds = FashionMNIST(root=str(root), train=False, download=download)

    return ImageSplits(
        train_images=train_ds.data.numpy(),
        train_labels=train_ds.targets.numpy().astype(np.int64),
        test_images=test_ds.data.numpy(),
        test_labels=test_ds.targets.numpy().astype(np.int64),
    )


def scale_images(images: np.ndarray) -> np.ndarray:
    """Map 0-255 pixel intensities onto [0, 1] as float32."""
    return np.asarray(images, dtype=np.float32) / 255.0


def describe_images(splits: ImageSplits) -> None:
    """Print shapes and per-class counts, like the first cells of the notebook."""
    banner("Fashion-MNIST")
    print(f"Train images: {splits.train_images.shape}  labels: {splits.train_labels.shape}")
    print(f"Test images:  {splits.test_images.shape}  labels: {splits.test_labels.shape}")
    print(
        f"Pixel range: {int(splits.train_images.min())}..{int(splits.train_images.max())}"
    )
    print()

    train_counts = np.bincount(splits.train_labels, minlength=len(CLASS_NAMES))
    test_counts = np.bincount(splits.test_labels, minlength=len(CLASS_NAMES))
    print("Images per class (train / test):")
    for label, name in enumerate(CLASS_NAMES):
        print(f"  {label}  {name:<12s} {train_counts[label]:>6d} / {test_counts[label]:>5d}")
    print()

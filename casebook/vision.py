# casebook/vision.py

"""
Training/evaluation helpers for the image walkthrough.

These are thin wrappers around a standard PyTorch loop: Adam, cross-entropy
on logits, mini-batches from a DataLoader. Images come in as (N, 28, 28)
arrays already scaled to [0, 1].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np
import torch
from torch import nn
from torch.utils.data import DataLoader, TensorDataset
from tqdm import tqdm

from .config import DEVICE, RANDOM_SEED
from .report import log


@dataclass
class TrainHistory:
    loss: List[float] = field(default_factory=list)
    accuracy: List[float] = field(default_factory=list)

    @property
    def epochs(self) -> int:
        return len(self.loss)

    def as_dict(self) -> Dict[str, List[float]]:
        return {"loss": list(self.loss), "accuracy": list(self.accuracy)}


def _to_dataset(images: np.ndarray, labels: np.ndarray) -> TensorDataset:
    if len(images) != len(labels):
        raise ValueError(
            f"images and labels differ in length: {len(images)} vs {len(labels)}"
        )
    if len(images) == 0:
        raise ValueError("No images given")
    x = torch.as_tensor(np.asarray(images, dtype=np.float32))
    y = torch.as_tensor(np.asarray(labels, dtype=np.int64))
    return TensorDataset(x, y)


def fit_image_classifier(
    model: nn.Module,
    images: np.ndarray,
    labels: np.ndarray,
    epochs: int = 10,
    batch_size: int = 32,
    learning_rate: float = 1e-3,
    seed: int = RANDOM_SEED,
    device: str = DEVICE,
    progress: bool = True,
) -> TrainHistory:
    """
    Fit `model` in place and return per-epoch training loss / accuracy.
    """
    if epochs < 1:
        raise ValueError(f"epochs must be >= 1, got {epochs}")
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    torch.manual_seed(seed)
    generator = torch.Generator().manual_seed(seed)
    loader = DataLoader(
        _to_dataset(images, labels),
        batch_size=batch_size,
        shuffle=True,
        generator=generator,
    )

    model.to(device)
    optimizer = torch.optim.Adam(model.parameters(), lr=learning_rate)
    criterion = nn.CrossEntropyLoss()
    history = TrainHistory()

    for epoch in range(1, epochs + 1):
        model.train()
        total_loss = 0.0
        correct = 0
        seen = 0

        batches = tqdm(loader, desc=f"Epoch {epoch}/{epochs}", disable=not progress)
        for x, y in batches:
            x, y = x.to(device), y.to(device)

            optimizer.zero_grad()
            logits = model(x)
            loss = criterion(logits, y)
            loss.backward()
            optimizer.step()

            total_loss += loss.item() * x.shape[0]
            correct += (logits.argmax(dim=1) == y).sum().item()
            seen += x.shape[0]
            batches.set_postfix({"loss": f"{loss.item():.4f}"})

        history.loss.append(total_loss / seen)
        history.accuracy.append(correct / seen)
        log(
            f"epoch {epoch}/{epochs} - loss: {history.loss[-1]:.4f}"
            f" - accuracy: {history.accuracy[-1]:.4f}"
        )

    return history


@torch.no_grad()
def evaluate_image_classifier(
    model: nn.Module,
    images: np.ndarray,
    labels: np.ndarray,
    batch_size: int = 256,
    device: str = DEVICE,
) -> Dict[str, float]:
    """Mean cross-entropy and accuracy on a held-out partition."""
    loader = DataLoader(_to_dataset(images, labels), batch_size=batch_size)
    criterion = nn.CrossEntropyLoss(reduction="sum")

    model.to(device)
    model.eval()
    total_loss = 0.0
    correct = 0
    for x, y in loader:
        x, y = x.to(device), y.to(device)
        logits = model(x)
        total_loss += criterion(logits, y).item()
        correct += (logits.argmax(dim=1) == y).sum().item()

    n = len(labels)
    return {"loss": total_loss / n, "accuracy": correct / n}


def probability_model(model: nn.Module) -> nn.Module:
    """Attach a softmax so the network outputs class probabilities."""
    return nn.Sequential(model, nn.Softmax(dim=1))


@torch.no_grad()
def predict_proba(
    model: nn.Module,
    images: np.ndarray,
    batch_size: int = 256,
    device: str = DEVICE,
) -> np.ndarray:
    """(N, n_classes) probabilities for a logits-emitting model."""
    images = np.asarray(images, dtype=np.float32)
    if images.ndim == 2:
        images = images[np.newaxis, ...]
    if len(images) == 0:
        raise ValueError("No images given")

    prob_model = probability_model(model).to(device)
    prob_model.eval()

    chunks = []
    for start in range(0, len(images), batch_size):
        x = torch.as_tensor(images[start:start + batch_size]).to(device)
        chunks.append(prob_model(x).cpu().numpy())
    return np.concatenate(chunks, axis=0)

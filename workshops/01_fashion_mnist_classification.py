"""
Walkthrough 01: classify clothing images with a small dense network.

Run top to bottom, or cell by cell (# %%) in an editor that understands
cell markers. Fashion-MNIST is downloaded into artifacts/datasets/ on first use.
"""

# %% Imports
import matplotlib.pyplot as plt
import numpy as np

from casebook.data import CLASS_NAMES, describe_images, load_fashion_mnist, scale_images
from casebook.models import create_local_model
from casebook.plots import (
    plot_image,
    plot_image_grid,
    plot_prediction_grid,
    plot_training_history,
    plot_value_array,
)
from casebook.predict import predict_images
from casebook.vision import evaluate_image_classifier, fit_image_classifier

# %% Load the data
# 60,000 training and 10,000 test images, 28x28 pixels, labels 0-9.
splits = load_fashion_mnist()
describe_images(splits)

# %% Look at one raw image; pixel values run from 0 to 255
fig, ax = plt.subplots()
im = ax.imshow(splits.train_images[0])
fig.colorbar(im, ax=ax)
ax.grid(False)

# %% Scale to [0, 1] before feeding the network
train_images = scale_images(splits.train_images)
test_images = scale_images(splits.test_images)

plot_image_grid(train_images, splits.train_labels, n=25)

# %% Build the model: Flatten -> Dense(128, relu) -> Dense(10) logits
model = create_local_model("dense")
print(model)

# %% Train
history = fit_image_classifier(model, train_images, splits.train_labels, epochs=10)
plot_training_history(history)

# %% Evaluate accuracy on the test set
# Test accuracy usually lands a little below training accuracy (overfitting).
test_metrics = evaluate_image_classifier(model, test_images, splits.test_labels)
print(f"Test accuracy: {test_metrics['accuracy']:.4f}")

# %% Make predictions
# The network outputs logits; predict_images attaches a softmax.
predictions = predict_images(model, test_images)
print("Probabilities for the first test image:", np.round(predictions.probabilities[0], 3))
print(
    f"Predicted: {CLASS_NAMES[predictions.labels[0]]}  "
    f"actual: {CLASS_NAMES[splits.test_labels[0]]}"
)

# %% Verify a couple of single predictions
for i in (0, 12):
    fig, (ax_img, ax_bar) = plt.subplots(1, 2, figsize=(6, 3))
    plot_image(ax_img, test_images[i], predictions.probabilities[i], splits.test_labels[i])
    plot_value_array(ax_bar, predictions.probabilities[i], splits.test_labels[i])

# %% Several images with their predictions; correct in blue, incorrect in red
plot_prediction_grid(test_images, predictions.probabilities, splits.test_labels, nrows=5, ncols=3)

# %% Use the trained model on a single image
single = predict_images(model, test_images[1])
print("Single image prediction:", CLASS_NAMES[single.labels[0]])
fig, ax = plt.subplots(figsize=(6, 3))
plot_value_array(ax, single.probabilities[0], splits.test_labels[1])
ax.set_xticks(range(len(CLASS_NAMES)))
ax.set_xticklabels(CLASS_NAMES, rotation=45)

plt.show()

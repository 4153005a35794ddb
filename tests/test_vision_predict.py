"""Tests for the torch training loop and the prediction helpers."""

import numpy as np
import pytest

from casebook.data import CLASS_NAMES, describe_images, scale_images
from casebook.data_churn import train_test_churn
from casebook.models import build_churn_pipeline, build_image_classifier
from casebook.predict import class_name, predict_churn, predict_images
from casebook.vision import (
    evaluate_image_classifier,
    fit_image_classifier,
    predict_proba,
    probability_model,
)


def test_scale_images_range(image_splits):
    scaled = scale_images(image_splits.train_images)
    assert scaled.dtype == np.float32
    assert scaled.min() >= 0.0 and scaled.max() <= 1.0


def test_describe_images(image_splits, capsys):
    describe_images(image_splits)
    out = capsys.readouterr().out
    assert "(120, 28, 28)" in out
    assert "Ankle boot" in out


def test_fit_records_one_entry_per_epoch(image_splits):
    model = build_image_classifier()
    history = fit_image_classifier(
        model,
        scale_images(image_splits.train_images),
        image_splits.train_labels,
        epochs=2,
        batch_size=16,
        progress=False,
    )
    assert history.epochs == 2
    assert len(history.accuracy) == 2
    assert all(0.0 <= a <= 1.0 for a in history.accuracy)
    assert set(history.as_dict()) == {"loss", "accuracy"}


def test_fit_learns_a_separable_problem():
    rng = np.random.default_rng(0)
    labels = np.repeat([0, 1], 50)
    images = rng.uniform(0, 0.1, size=(100, 28, 28)).astype(np.float32)
    images[labels == 1, :14, :] += 0.9

    model = build_image_classifier()
    history = fit_image_classifier(model, images, labels, epochs=5, batch_size=10, progress=False)
    assert history.accuracy[-1] > 0.9

    metrics = evaluate_image_classifier(model, images, labels)
    assert metrics["accuracy"] > 0.9
    assert metrics["loss"] >= 0.0


def test_fit_rejects_zero_epochs(image_splits):
    with pytest.raises(ValueError):
        fit_image_classifier(
            build_image_classifier(),
            scale_images(image_splits.train_images),
            image_splits.train_labels,
            epochs=0,
        )


def test_fit_rejects_mismatched_lengths(image_splits):
    with pytest.raises(ValueError):
        fit_image_classifier(
            build_image_classifier(),
            scale_images(image_splits.train_images),
            image_splits.train_labels[:-1],
            epochs=1,
            progress=False,
        )


def test_probability_rows_sum_to_one(image_splits):
    model = build_image_classifier()
    proba = predict_proba(model, scale_images(image_splits.test_images), batch_size=7)
    assert proba.shape == (40, 10)
    assert np.allclose(proba.sum(axis=1), 1.0, atol=1e-5)


def test_probability_model_appends_softmax():
    model = build_image_classifier()
    prob = probability_model(model)
    assert prob[0] is model


def test_predict_images(image_splits):
    model = build_image_classifier()
    pred = predict_images(model, scale_images(image_splits.test_images))

    assert pred.labels.shape == (40,)
    assert np.array_equal(pred.labels, pred.probabilities.argmax(axis=1))
    assert np.allclose(pred.confidence, pred.probabilities.max(axis=1))
    assert all(name in CLASS_NAMES for name in pred.names())


def test_predict_single_image(image_splits):
    model = build_image_classifier()
    pred = predict_images(model, scale_images(image_splits.test_images[0]))
    assert pred.probabilities.shape == (1, 10)


def test_class_name():
    assert class_name(0) == "T-shirt/top"
    assert class_name(9) == "Ankle boot"
    with pytest.raises(ValueError):
        class_name(10)


def test_predict_churn_columns(churn_frame):
    splits = train_test_churn(churn_frame)
    pipeline = build_churn_pipeline("logreg").fit(splits.X_train, splits.y_train)

    out = predict_churn(pipeline, splits.test)

    assert list(out.columns) == [".pred_class", ".pred_Yes"]
    assert out.index.equals(splits.test.index)
    assert out[".pred_Yes"].between(0, 1).all()


def test_predict_churn_bad_pos_label(churn_frame):
    splits = train_test_churn(churn_frame)
    pipeline = build_churn_pipeline("logreg").fit(splits.X_train, splits.y_train)
    with pytest.raises(ValueError):
        predict_churn(pipeline, splits.test, pos_label="Maybe")


def test_predict_churn_requires_dataframe(churn_frame):
    splits = train_test_churn(churn_frame)
    pipeline = build_churn_pipeline("logreg").fit(splits.X_train, splits.y_train)
    with pytest.raises(TypeError):
        predict_churn(pipeline, splits.X_test.to_numpy())


def test_empty_inputs_are_rejected():
    model = build_image_classifier()
    empty_images = np.zeros((0, 28, 28), dtype=np.float32)
    empty_labels = np.zeros((0,), dtype=np.int64)

    with pytest.raises(ValueError, match="No images"):
        evaluate_image_classifier(model, empty_images, empty_labels)
    with pytest.raises(ValueError, match="No images"):
        predict_proba(model, empty_images)
    with pytest.raises(ValueError, match="No images"):
        fit_image_classifier(model, empty_images, empty_labels, epochs=1, progress=False)

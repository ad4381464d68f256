import numpy as np
import pytest
from sklearn.base import clone
from sklearn.model_selection import cross_val_score

from traffic_gbdt.exceptions import DataError
from traffic_gbdt.models import GBDTClassifier


def test_string_labels_round_trip(separable_data):
    X, y = separable_data
    labels = np.where(y == 1, "normal", "anomaly")
    clf = GBDTClassifier(number_of_trees=5, number_of_leaves=4).fit(X, labels)
    assert list(clf.classes_) == ["anomaly", "normal"]
    assert np.array_equal(clf.predict(X), labels)
    assert clf.score(X, labels) == 1.0


def test_predict_proba_shape(separable_data):
    X, y = separable_data
    clf = GBDTClassifier(number_of_trees=3).fit(X, y)
    proba = clf.predict_proba(X)
    assert proba.shape == (X.shape[0], 2)
    np.testing.assert_allclose(proba.sum(axis=1), 1.0)
    assert clf.feature_importances_.shape == (3,)
    assert clf.n_features_in_ == 3


def test_clone_and_cross_validation(separable_data):
    X, y = separable_data
    clf = GBDTClassifier(number_of_trees=5, number_of_leaves=4)
    assert clone(clf).get_params() == clf.get_params()
    scores = cross_val_score(clf, X, y, cv=3)
    assert np.all(scores >= 0.9)


def test_multiclass_rejected():
    X = np.random.default_rng(0).random((9, 2))
    with pytest.raises(DataError):
        GBDTClassifier().fit(X, [0, 1, 2] * 3)

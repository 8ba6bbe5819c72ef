"""Tests for the stratified splitter."""

import numpy as np
import pandas as pd
import pytest

from sensor_ml.errors import EmptyColumnError, InvalidFractionError, SchemaError
from sensor_ml.split import DataSplit, stratified_split, training_size


def _two_level_frame() -> pd.DataFrame:
    return pd.DataFrame({
        'x': np.arange(20, dtype=float),
        'label': ['a'] * 12 + ['b'] * 8,
    })


def test_partition_covers_all_rows_without_overlap():
    df = _two_level_frame()

    split = stratified_split(df, 'label', 0.6, seed=1)

    combined = np.concatenate([split.train_rows, split.test_rows])
    assert sorted(combined.tolist()) == list(range(len(df)))
    assert len(np.intersect1d(split.train_rows, split.test_rows)) == 0


def test_per_label_proportions(sensor_frame):
    split = stratified_split(sensor_frame, 'classe', 0.7, seed=42)
    train, test = split.apply(sensor_frame)

    assert train['classe'].value_counts().to_dict() == {level: 21 for level in 'ABCDE'}
    assert test['classe'].value_counts().to_dict() == {level: 9 for level in 'ABCDE'}


def test_same_seed_same_partition():
    df = _two_level_frame()

    assert stratified_split(df, 'label', 0.5, seed=7) == stratified_split(df, 'label', 0.5, seed=7)


def test_different_seed_changes_partition(sensor_frame):
    first = stratified_split(sensor_frame, 'classe', 0.5, seed=1)
    second = stratified_split(sensor_frame, 'classe', 0.5, seed=2)

    assert first != second


def test_does_not_touch_global_random_state():
    np.random.seed(123)
    expected = np.random.random()
    np.random.seed(123)

    stratified_split(_two_level_frame(), 'label', 0.5, seed=0)

    assert np.random.random() == expected


def test_categorical_label_with_unused_level():
    df = pd.DataFrame({
        'x': range(6),
        'label': pd.Categorical(['a', 'a', 'b', 'b', 'b', 'b'], categories=['a', 'b', 'c']),
    })

    split = stratified_split(df, 'label', 0.5, seed=0)

    assert len(split.train_rows) == 3
    assert len(split.test_rows) == 3


def test_missing_labels_rejected():
    df = pd.DataFrame({'x': range(4), 'label': ['a', 'a', None, None]})

    with pytest.raises(EmptyColumnError, match="2 missing values"):
        stratified_split(df, 'label', 0.5, seed=0)


def test_apply_returns_rows_in_original_order():
    df = _two_level_frame()

    train, test = stratified_split(df, 'label', 0.75, seed=3).apply(df)

    assert train.index.is_monotonic_increasing
    assert test.index.is_monotonic_increasing


@pytest.mark.parametrize('fraction', [0, 1, -0.2, 1.5, 'half', None])
def test_invalid_fraction(fraction):
    with pytest.raises(InvalidFractionError):
        stratified_split(_two_level_frame(), 'label', fraction, seed=0)


def test_empty_table():
    df = pd.DataFrame({'label': pd.Series([], dtype=object)})

    with pytest.raises(EmptyColumnError):
        stratified_split(df, 'label', 0.5, seed=0)


def test_missing_label_column():
    with pytest.raises(SchemaError):
        stratified_split(_two_level_frame(), 'classe', 0.5, seed=0)


@pytest.mark.parametrize('group_size, fraction, expected', [
    (10, 0.7, 7),
    (3, 0.7, 3),
    (100, 0.07, 7),
    (1, 0.5, 1),
    (9, 0.5, 5),
])
def test_training_size_uses_ceiling(group_size, fraction, expected):
    assert training_size(group_size, fraction) == expected


def test_split_equality_ignores_other_types():
    split = DataSplit(train_rows=np.array([0]), test_rows=np.array([1]))

    assert split != (np.array([0]), np.array([1]))

"""Tests for column filtering and label normalization."""

import numpy as np
import pandas as pd
import pytest

from sensor_ml.config import SOURCE_COLUMNS_ATTR
from sensor_ml.errors import SchemaError
from sensor_ml.preprocessing import (
    drop_invalid_text_columns,
    drop_metadata_columns,
    drop_missing_columns,
    filter_columns,
    normalize_label,
    select_numeric_predictors,
)

EXPECTED_COLUMNS = ['roll_belt', 'yaw_belt', 'noise_a', 'noise_b', 'gyros_belt_x', 'classe']


class TestDropMissingColumns:
    def test_keeps_only_fully_populated_column(self):
        df = pd.DataFrame({'full': [1.0, 2.0, 3.0], 'gappy': [1.0, np.nan, 3.0]})

        result = drop_missing_columns(df)

        assert list(result.columns) == ['full']
        assert len(result) == 3

    def test_text_missing_values_are_dropped(self):
        df = pd.DataFrame({'name': ['a', None, 'c'], 'value': [1, 2, 3]})

        assert list(drop_missing_columns(df).columns) == ['value']


class TestDropInvalidTextColumns:
    def test_sentinel_and_blank_columns_removed(self):
        df = pd.DataFrame({
            'sentinel': ['1.2', '#DIV/0!', '0.4'],
            'blank': ['x', '', 'y'],
            'clean_text': ['no', 'yes', 'no'],
            'number': [1.0, 2.0, 3.0],
        })

        result = drop_invalid_text_columns(df)

        assert list(result.columns) == ['clean_text', 'number']

    def test_custom_sentinels(self):
        df = pd.DataFrame({'a': ['ok', 'ERR'], 'b': ['ok', '#DIV/0!']})

        result = drop_invalid_text_columns(df, sentinels=('ERR',))

        assert list(result.columns) == ['b']


class TestDropMetadataColumns:
    def test_drops_leading_columns(self):
        df = pd.DataFrame({name: [0] for name in ['id', 'ts', 'x', 'y']})

        result = drop_metadata_columns(df, count=2)

        assert list(result.columns) == ['x', 'y']
        assert result.attrs[SOURCE_COLUMNS_ATTR] == ['id', 'ts', 'x', 'y']

    def test_uses_original_positions(self):
        df = pd.DataFrame({name: [0] for name in ['x', 'y']})
        df.attrs[SOURCE_COLUMNS_ATTR] = ['id', 'ts', 'x', 'y']

        result = drop_metadata_columns(df, count=2)

        assert list(result.columns) == ['x', 'y']

    def test_zero_count_keeps_everything(self):
        df = pd.DataFrame({'a': [1], 'b': [2]})

        assert list(drop_metadata_columns(df, count=0).columns) == ['a', 'b']


class TestFilterColumns:
    def test_sensor_table(self, sensor_frame):
        result = filter_columns(sensor_frame)

        assert list(result.columns) == EXPECTED_COLUMNS
        assert len(result) == len(sensor_frame)

    def test_idempotent(self, sensor_frame):
        once = filter_columns(sensor_frame)
        twice = filter_columns(once)

        pd.testing.assert_frame_equal(once, twice)

    def test_idempotent_when_metadata_column_was_already_missing(self):
        df = pd.DataFrame({
            'id': [1, 2, 3],
            'ts': [np.nan, 1.0, 2.0],
            'a': [0.1, 0.2, 0.3],
            'b': [1.0, 2.0, 3.0],
        })

        once = filter_columns(df, metadata_columns=2)
        twice = filter_columns(once, metadata_columns=2)

        assert list(once.columns) == ['a', 'b']
        pd.testing.assert_frame_equal(once, twice)

    def test_removed_column_does_not_reappear(self):
        df = pd.DataFrame({
            'meta': ['r1', 'r2'],
            'gappy_text': ['#DIV/0!', None],
            'value': [1.0, 2.0],
        })

        result = filter_columns(df, metadata_columns=1)

        assert list(result.columns) == ['value']

    def test_everything_filtered_is_valid(self):
        df = pd.DataFrame({'a': [np.nan, 1.0], 'b': ['', 'x']})

        result = filter_columns(df, metadata_columns=0)

        assert result.shape == (2, 0)

    def test_does_not_modify_input(self, sensor_frame):
        columns = list(sensor_frame.columns)

        filter_columns(sensor_frame)

        assert list(sensor_frame.columns) == columns


class TestNormalizeLabel:
    def test_levels_sorted_regardless_of_order(self):
        df = pd.DataFrame({'label': ['y', 'n', 'y', 'm']})

        normalize_label(df, 'label')

        assert list(df['label'].cat.categories) == ['m', 'n', 'y']
        assert df['label'].tolist() == ['y', 'n', 'y', 'm']

    def test_levels_come_from_observed_values(self):
        df = pd.DataFrame({'label': pd.Categorical(['B', 'A'], categories=['A', 'B', 'Z'])})

        normalize_label(df, 'label')

        assert list(df['label'].cat.categories) == ['A', 'B']

    def test_returns_same_table(self):
        df = pd.DataFrame({'label': ['b', 'a']})

        assert normalize_label(df, 'label') is df

    def test_missing_column_raises(self):
        df = pd.DataFrame({'other': [1]})

        with pytest.raises(SchemaError, match="classe"):
            normalize_label(df, 'classe')


def test_select_numeric_predictors_excludes_label_and_text():
    df = pd.DataFrame({'a': [1.0], 'b': ['x'], 'label': [1]})

    assert select_numeric_predictors(df, 'label') == ['a']

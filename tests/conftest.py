"""Shared pytest fixtures for all tests."""

import numpy as np
import pandas as pd
import pytest

LEVELS = ['A', 'B', 'C', 'D', 'E']
ROWS_PER_CLASS = 30

METADATA = ['X', 'user_name', 'raw_timestamp_part_1', 'raw_timestamp_part_2',
            'cvtd_timestamp', 'new_window', 'num_window']


def _sensor_frame(rows_per_class: int = ROWS_PER_CLASS, seed: int = 0) -> pd.DataFrame:
    """Synthetic recording table shaped like the weight-lifting data.

    roll_belt separates the classes on its own; yaw_belt adds a second,
    uncorrelated signal. noise_a and noise_b are perfect linear copies of
    each other. kurtosis_roll_belt carries sentinel/blank text and
    max_roll_belt is mostly missing.
    """
    rng = np.random.default_rng(seed)
    n = rows_per_class * len(LEVELS)
    class_index = np.repeat(np.arange(len(LEVELS)), rows_per_class)

    noise_a = rng.normal(size=n)
    kurtosis = rng.normal(size=n).round(3).astype(str).astype(object)
    kurtosis[::7] = '#DIV/0!'
    kurtosis[3::11] = ''
    max_roll = np.full(n, np.nan)
    max_roll[::25] = rng.normal(size=len(max_roll[::25]))

    return pd.DataFrame({
        'X': np.arange(1, n + 1),
        'user_name': rng.choice(['carlitos', 'pedro', 'adelmo'], size=n),
        'raw_timestamp_part_1': 1322489600 + np.arange(n),
        'raw_timestamp_part_2': rng.integers(0, 999999, size=n),
        'cvtd_timestamp': '28/11/2011 14:13',
        'new_window': np.where(np.arange(n) % 20 == 0, 'yes', 'no'),
        'num_window': np.arange(n) // 5,
        'roll_belt': class_index + rng.normal(scale=0.15, size=n),
        'yaw_belt': (class_index - 2) ** 2 + rng.normal(scale=0.15, size=n),
        'noise_a': noise_a,
        'noise_b': -3.0 * noise_a + 0.5,
        'gyros_belt_x': rng.normal(size=n),
        'kurtosis_roll_belt': kurtosis,
        'max_roll_belt': max_roll,
        'classe': np.array(LEVELS)[class_index],
    })


@pytest.fixture
def sensor_frame() -> pd.DataFrame:
    """In-memory synthetic training table."""
    return _sensor_frame()


@pytest.fixture
def clean_frame() -> pd.DataFrame:
    """Training table after column filtering, with a categorical label."""
    df = _sensor_frame()[['roll_belt', 'yaw_belt', 'noise_a', 'noise_b', 'gyros_belt_x', 'classe']].copy()
    df['classe'] = pd.Categorical(df['classe'], categories=LEVELS)
    return df


@pytest.fixture
def training_csv(tmp_path) -> str:
    """Synthetic training table written as CSV, missing values as NA."""
    path = tmp_path / 'pml-training.csv'
    _sensor_frame().to_csv(path, index=False, na_rep='NA')
    return str(path)


@pytest.fixture
def testing_csv(tmp_path) -> str:
    """Unlabelled external table with a problem_id column."""
    df = _sensor_frame(rows_per_class=2, seed=7).drop(columns=['classe'])
    df['problem_id'] = np.arange(1, len(df) + 1)
    path = tmp_path / 'pml-testing.csv'
    df.to_csv(path, index=False, na_rep='NA')
    return str(path)

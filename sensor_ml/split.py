"""Stratified train/test partitioning with an explicit seed."""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from .errors import EmptyColumnError, InvalidFractionError, SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataSplit:
    """Disjoint row positions for the training and testing partitions."""
    train_rows: np.ndarray
    test_rows: np.ndarray

    def apply(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Return the (train, test) tables selected from ``df``."""
        return df.iloc[self.train_rows], df.iloc[self.test_rows]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataSplit):
            return NotImplemented
        return (np.array_equal(self.train_rows, other.train_rows)
                and np.array_equal(self.test_rows, other.test_rows))


def training_size(group_size: int, train_fraction: float) -> int:
    """Rows of a label group that go to training: ceil(p * n).

    The product is rounded to 9 decimals first so that values such as
    0.07 * 100 do not spill over to the next integer.
    """
    return math.ceil(round(train_fraction * group_size, 9))


def stratified_split(df: pd.DataFrame, label_column: str, train_fraction: float,
                     seed: int) -> DataSplit:
    """Partition rows so every label keeps roughly ``train_fraction`` of its rows in training.

    Labels are visited in sorted level order. For each
    one, a permutation drawn from ``numpy.random.default_rng(seed)`` decides
    which of its rows come first; the first ``training_size`` rows go to
    training. Same seed and input always give the same partition.
    """
    try:
        fraction = float(train_fraction)
    except (TypeError, ValueError):
        raise InvalidFractionError(f"Training fraction must be a number, got {train_fraction!r}") from None
    if not 0 < fraction < 1:
        raise InvalidFractionError(f"Training fraction must be in (0, 1), got {fraction}")

    if label_column not in df.columns:
        raise SchemaError(f"Label column '{label_column}' not found in dataset")
    if len(df) == 0:
        raise EmptyColumnError(f"Label column '{label_column}' has no rows")

    missing_labels = int(df[label_column].isna().sum())
    if missing_labels:
        raise EmptyColumnError(f"Label column '{label_column}' has {missing_labels} missing values")

    codes, _ = pd.factorize(df[label_column], sort=True)

    rng = np.random.default_rng(seed)
    train_parts = []
    for code in np.unique(codes):
        rows = np.flatnonzero(codes == code)
        n_train = training_size(len(rows), fraction)
        train_parts.append(rng.permutation(rows)[:n_train])

    train_rows = np.sort(np.concatenate(train_parts))
    test_rows = np.setdiff1d(np.arange(len(df)), train_rows)

    logger.info("Stratified split: %d training rows, %d testing rows", len(train_rows), len(test_rows))
    return DataSplit(train_rows=train_rows, test_rows=test_rows)


# ---------------------------------------------------------------------------
# Features implemented in this module
# - DataSplit: disjoint row positions with a helper to slice a table
# - Per-label ceiling rule for training partition sizes
# - Seeded, stratified partitioning with input validation
# ---------------------------------------------------------------------------

"""Exploratory helpers: dataset summaries and the correlation filter.

The correlation filter removes every numeric predictor whose absolute
Pearson correlation with any other predictor exceeds the threshold. Both
members of a correlated pair go; there is no keep-one heuristic.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from .config import DatasetSummary
from .errors import NoNumericColumnsError
from .preprocessing import select_numeric_predictors, text_columns

logger = logging.getLogger(__name__)


def summarize_dataset(df: pd.DataFrame, label_column: Optional[str] = None) -> DatasetSummary:
    """Compact shape, missingness and class distribution stats using pandas built-ins."""
    missing = df.isnull().sum()

    class_distribution = {}
    if label_column is not None and label_column in df.columns:
        counts = df[label_column].value_counts(sort=False).sort_index()
        class_distribution = {str(level): int(count) for level, count in counts.items()}

    return {
        'rows': int(df.shape[0]),
        'cols': int(df.shape[1]),
        'missing_cells': int(missing.sum()),
        'columns_with_missing': int((missing > 0).sum()),
        'text_columns': len(text_columns(df)),
        'numeric_columns': len(df.select_dtypes(include=['number']).columns),
        'class_distribution': class_distribution,
    }


def absolute_correlation_matrix(df: pd.DataFrame) -> pd.DataFrame:
    """Absolute pairwise Pearson correlations with the diagonal set to zero."""
    corr = df.corr(method='pearson').abs()
    return corr.mask(np.eye(len(corr), dtype=bool), 0.0)


def find_correlated_columns(corr: pd.DataFrame, threshold: float = 0.8) -> List[str]:
    """Columns correlated above ``threshold`` with at least one other column.

    NaN correlations (constant columns) never exceed the threshold.
    """
    flagged = (corr > threshold).any(axis=0)
    return [col for col in corr.columns if flagged[col]]


def filter_correlated_columns(df: pd.DataFrame, label_column: Optional[str] = None,
                              threshold: float = 0.8) -> Tuple[pd.DataFrame, List[str]]:
    """Drop highly correlated numeric predictors from ``df``.

    Only numeric columns other than the label feed the correlation matrix;
    everything else is carried through untouched.

    Returns:
        The filtered table and the list of dropped columns, in table order.
    """
    predictors = select_numeric_predictors(df, label_column)
    if not predictors:
        raise NoNumericColumnsError("No numeric predictor columns to correlate")

    corr = absolute_correlation_matrix(df[predictors])
    dropped = find_correlated_columns(corr, threshold)

    logger.info("Correlation filter (threshold %.2f) dropped %d of %d predictors",
                threshold, len(dropped), len(predictors))
    if dropped:
        logger.debug("Correlated columns: %s", dropped)
    return df.drop(columns=dropped), dropped


# ---------------------------------------------------------------------------
# Features implemented in this module
# - summarize_dataset: shape, missingness, column types, class distribution
# - absolute Pearson correlation matrix with zeroed diagonal
# - flag every column above the threshold (both members of a pair)
# - correlation filter over numeric predictors with label exclusion
# ---------------------------------------------------------------------------

"""Column cleaning and label normalization for raw sensor tables.

The column filter runs three stages over progressively narrowing column
sets: missing values, then sentinel/blank text, then the leading metadata
columns. A column removed by an earlier stage is never reconsidered.
"""

import logging
from typing import List, Optional, Sequence

import pandas as pd
from pandas.api.types import CategoricalDtype, is_object_dtype, is_string_dtype

from .config import SOURCE_COLUMNS_ATTR
from .errors import SchemaError

logger = logging.getLogger(__name__)

def text_columns(df: pd.DataFrame) -> List[str]:
    """Names of object- or string-typed columns."""
    return [col for col in df.columns if is_object_dtype(df[col]) or is_string_dtype(df[col])]


def drop_missing_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep only columns without a single missing value."""
    complete = df.notna().all(axis=0)
    dropped = complete.index[~complete].tolist()
    if dropped:
        logger.debug("Dropping %d columns with missing values", len(dropped))
    return df.loc[:, complete.values]


def drop_invalid_text_columns(df: pd.DataFrame, sentinels: Sequence[str] = ('#DIV/0!',)) -> pd.DataFrame:
    """Drop text columns holding a sentinel error string or a blank field.

    Numeric columns cannot hold either, so only text-typed columns are
    inspected.
    """
    invalid_values = list(sentinels) + ['']
    invalid = [col for col in text_columns(df) if df[col].isin(invalid_values).any()]
    if invalid:
        logger.debug("Dropping %d columns with sentinel or blank values", len(invalid))
    return df.drop(columns=invalid)


def drop_metadata_columns(df: pd.DataFrame, count: int = 7) -> pd.DataFrame:
    """Drop columns that sat among the first ``count`` columns of the source file.

    Positions refer to the original column order recorded by the loader (or
    the table's own order when nothing was recorded), so columns already
    removed by earlier stages do not shift the window.
    """
    source_columns = list(df.attrs.get(SOURCE_COLUMNS_ATTR, df.columns))
    metadata = set(source_columns[:count])
    result = df.drop(columns=[col for col in df.columns if col in metadata])
    result.attrs[SOURCE_COLUMNS_ATTR] = source_columns
    return result


def filter_columns(df: pd.DataFrame, metadata_columns: int = 7,
                   sentinels: Sequence[str] = ('#DIV/0!',)) -> pd.DataFrame:
    """Apply the three column filters in order and return a new table.

    Idempotent: the original column order travels with the result, so a
    second pass finds nothing left to remove. An empty result is returned
    as is.
    """
    source_columns = list(df.attrs.get(SOURCE_COLUMNS_ATTR, df.columns))

    filtered = drop_missing_columns(df)
    filtered = drop_invalid_text_columns(filtered, sentinels)
    filtered = filtered.copy()
    filtered.attrs[SOURCE_COLUMNS_ATTR] = source_columns
    filtered = drop_metadata_columns(filtered, metadata_columns)

    logger.info("Column filter kept %d of %d columns", filtered.shape[1], df.shape[1])
    if filtered.shape[1] == 0:
        logger.warning("Column filter removed every column")
    return filtered


def normalize_label(df: pd.DataFrame, label_column: str) -> pd.DataFrame:
    """Convert the label column, in place, to a categorical of its sorted observed values."""
    if label_column not in df.columns:
        raise SchemaError(f"Label column '{label_column}' not found in dataset")

    values = df[label_column]
    if isinstance(values.dtype, CategoricalDtype):
        values = values.astype(object)
    levels = sorted(pd.unique(values.dropna()))

    df[label_column] = values.astype(CategoricalDtype(categories=levels))
    logger.debug("Label '%s' levels: %s", label_column, levels)
    return df


def select_numeric_predictors(df: pd.DataFrame, label_column: Optional[str] = None) -> List[str]:
    """Names of numeric columns, excluding the label."""
    numeric = df.select_dtypes(include=['number']).columns
    return [col for col in numeric if col != label_column]


# ---------------------------------------------------------------------------
# Features implemented in this module
# - Drop columns with missing values, then sentinel/blank text columns
# - Strip leading metadata columns by their original position
# - Composite, idempotent column filter
# - Label normalization to a sorted categorical
# - Numeric predictor selection for downstream correlation filtering
# ---------------------------------------------------------------------------

"""Utility helpers for loading, validation, and JSON safety."""

import logging
import os
from typing import Union, Dict, Any, Iterable, Sequence

import numpy as np
import pandas as pd

from .config import PipelineConfig, SOURCE_COLUMNS_ATTR
from .errors import SchemaError

logger = logging.getLogger(__name__)

JSONSafe = Union[int, float, list, Dict[str, Any], str, None]

ALLOWED_EXTENSIONS = {'csv', 'txt'}


def load_dataset(path: str, na_values: Sequence[str] = ('NA',),
                 blank_is_missing: bool = False) -> pd.DataFrame:
    """Read a comma-separated dataset whose first row is the header.

    Only the tokens in ``na_values`` are read as missing. Empty fields stay
    empty strings unless ``blank_is_missing`` is set, so the blank filter in
    preprocessing can catch them.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset not found: {path}")

    header = pd.read_csv(path, header=None, nrows=1, dtype=str, keep_default_na=False)
    names = header.iloc[0].tolist() if len(header) else []
    duplicated = sorted({name for name in names if names.count(name) > 1})
    if duplicated:
        raise SchemaError(f"Duplicated column names in {path}: {duplicated}")

    missing_tokens = list(na_values)
    if blank_is_missing:
        missing_tokens.append('')

    df = pd.read_csv(path, na_values=missing_tokens, keep_default_na=False, low_memory=False)
    df.attrs[SOURCE_COLUMNS_ATTR] = list(df.columns)
    logger.info("Loaded %s: %d rows x %d columns", path, df.shape[0], df.shape[1])
    return df


def validate_dataset_path(path: str) -> tuple[bool, str]:
    """Check that a dataset path exists and has a supported extension."""
    if not path:
        return False, "No dataset path given"

    if not ('.' in path and path.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS):
        return False, "Invalid file type. Only CSV and TXT files are supported."

    if not os.path.isfile(path):
        return False, f"File not found: {path}"

    return True, "File validation passed"


def validate_pipeline_config(config: PipelineConfig) -> Dict[str, Any]:
    """Validate a pipeline configuration before running it."""
    errors = []

    for path in filter(None, [config.training_path, config.testing_path]):
        is_valid, message = validate_dataset_path(path)
        if not is_valid:
            errors.append(message)
    if not config.training_path:
        errors.append("A training dataset is required")

    if not config.label_column:
        errors.append("Label column must be named")

    try:
        fraction = float(config.train_fraction)
        if not 0 < fraction < 1:
            errors.append("Training fraction must be between 0 and 1")
    except (ValueError, TypeError):
        errors.append("Training fraction must be a valid number")

    if config.metadata_columns < 0:
        errors.append("Metadata column count cannot be negative")

    if not 0 <= config.correlation_threshold <= 1:
        errors.append("Correlation threshold must be between 0 and 1")

    if config.tree_count < 1:
        errors.append("Tree count must be at least 1")

    if config.cv_folds == 1 or config.cv_folds < 0:
        errors.append("Cross-validation folds must be 0 (disabled) or at least 2")

    return {
        'valid': len(errors) == 0,
        'errors': errors
    }


def safe_json_convert(obj: Any) -> JSONSafe:
    """Convert arbitrary Python/NumPy/pandas objects to JSON-safe values.

    Rules:
    - numpy scalars/arrays → native ints/floats/lists
    - NaN/None → None
    - DataFrames → {row: {column: value}}; Series → {index: value}
    - mappings/iterables → recursively converted
    - anything else → str(obj)
    """
    if obj is None:
        return None

    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        return None if np.isnan(obj) else float(obj)
    if isinstance(obj, (int, str)):
        return obj

    if isinstance(obj, np.ndarray):
        return [safe_json_convert(x) for x in obj.tolist()]

    if isinstance(obj, pd.DataFrame):
        return {str(row): {str(col): safe_json_convert(value) for col, value in values.items()}
                for row, values in obj.iterrows()}
    if isinstance(obj, pd.Series):
        return {str(k): safe_json_convert(v) for k, v in obj.items()}

    if isinstance(obj, bytes):
        return obj.decode('utf-8', errors='ignore')

    if isinstance(obj, dict):
        return {str(k): safe_json_convert(v) for k, v in obj.items()}

    if isinstance(obj, Iterable):
        return [safe_json_convert(x) for x in obj]

    return str(obj)


# ---------------------------------------------------------------------------
# Features implemented in this module
# - load_dataset: header-checked CSV loading with configurable missing tokens
# - validate_dataset_path: file presence and extension checks
# - validate_pipeline_config: guardrails for pipeline inputs
# - safe_json_convert: normalize numpy/pandas objects to JSON-safe values
# ---------------------------------------------------------------------------

"""Configuration and typed result structures for the sensor pipeline."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Any, Tuple, TypedDict

import pandas as pd

# Column order as read from disk, kept on DataFrame.attrs
SOURCE_COLUMNS_ATTR = 'source_columns'


@dataclass
class PipelineConfig:
    """Configuration object for one run of the classification pipeline."""
    training_path: str
    testing_path: Optional[str] = None
    label_column: str = 'classe'
    metadata_columns: int = 7
    sentinels: Tuple[str, ...] = ('#DIV/0!',)
    na_values: Tuple[str, ...] = ('NA',)
    blank_is_missing: bool = False
    train_fraction: float = 0.7
    random_state: int = 42
    correlation_threshold: float = 0.8
    tree_count: int = 100
    cv_folds: int = 0
    compare_classifiers: bool = False
    external_id_column: Optional[str] = 'problem_id'
    n_jobs: Optional[int] = None


class ClassifierMetrics(TypedDict, total=False):
    """Type-safe structure for classifier metrics."""
    Accuracy: float
    Error_Rate: float
    Precision: float
    Recall: float
    F1: float
    OOB_Error: float
    Training_Time: float


class DatasetSummary(TypedDict):
    """Type-safe structure for dataset summaries."""
    rows: int
    cols: int
    missing_cells: int
    columns_with_missing: int
    text_columns: int
    numeric_columns: int
    class_distribution: Dict[str, int]


class PipelineResults(TypedDict, total=False):
    """Type-safe structure for a full pipeline run."""
    model: Any
    raw_summary: DatasetSummary
    clean_summary: DatasetSummary
    kept_columns: List[str]
    correlated_columns: List[str]
    train_rows: int
    test_rows: int
    oob_error: Optional[float]
    cross_validation: Dict[str, float]
    comparison: Dict[str, Any]
    feature_importance: Dict[str, float]
    evaluation: Any
    external_evaluation: Any
    external_predictions: Optional[pd.Series]


def calculate_split_percentages(train_fraction: float) -> tuple[int, int]:
    """Calculate train/test split percentages."""
    train_percent = int(round(train_fraction * 100))
    test_percent = 100 - train_percent
    return train_percent, test_percent


# ---------------------------------------------------------------------------
# Features implemented in this module
# - PipelineConfig dataclass for every tunable pipeline parameter
# - Typed dictionaries for metrics, dataset summaries, and pipeline results
# - Utility to convert the training fraction into train/test percentages
# ---------------------------------------------------------------------------

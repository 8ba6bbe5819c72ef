"""
Sensor activity classification utilities.
Column cleaning, stratified splitting, correlation filtering, and
tree-ensemble training/evaluation on top of pandas and scikit-learn.
"""

from .config import PipelineConfig, ClassifierMetrics, PipelineResults, calculate_split_percentages
from .errors import (
    PipelineError, SchemaError, SchemaMismatchError, InvalidFractionError,
    EmptyColumnError, NoNumericColumnsError, TrainingError
)
from .preprocessing import filter_columns, normalize_label
from .split import DataSplit, stratified_split
from .eda import filter_correlated_columns, summarize_dataset
from .models import FittedModel, fit_classifier, predict, cross_validate, feature_importance
from .evaluation import EvaluationResult, confusion_table, evaluate, score_predictions
from .pipeline import run_pipeline
from .utils import load_dataset, safe_json_convert, validate_pipeline_config

__all__ = [
    'PipelineConfig',
    'ClassifierMetrics',
    'PipelineResults',
    'calculate_split_percentages',
    'PipelineError',
    'SchemaError',
    'SchemaMismatchError',
    'InvalidFractionError',
    'EmptyColumnError',
    'NoNumericColumnsError',
    'TrainingError',
    'filter_columns',
    'normalize_label',
    'DataSplit',
    'stratified_split',
    'filter_correlated_columns',
    'summarize_dataset',
    'FittedModel',
    'fit_classifier',
    'predict',
    'cross_validate',
    'feature_importance',
    'EvaluationResult',
    'confusion_table',
    'evaluate',
    'score_predictions',
    'run_pipeline',
    'load_dataset',
    'safe_json_convert',
    'validate_pipeline_config'
]

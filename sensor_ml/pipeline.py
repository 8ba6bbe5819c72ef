"""End-to-end run: load, clean, split, filter, train, evaluate, predict."""

import logging
from typing import Optional

import pandas as pd

from .config import PipelineConfig, PipelineResults
from .eda import filter_correlated_columns, summarize_dataset
from .evaluation import evaluate
from .models import (
    compare_classifiers,
    cross_validate,
    feature_importance,
    FittedModel,
    fit_classifier,
    predict,
)
from .preprocessing import filter_columns, normalize_label
from .split import stratified_split
from .utils import load_dataset

logger = logging.getLogger(__name__)


def prepare_training_table(df: pd.DataFrame, config: PipelineConfig) -> pd.DataFrame:
    """Column filter followed by label normalization."""
    clean = filter_columns(df, metadata_columns=config.metadata_columns, sentinels=config.sentinels)
    return normalize_label(clean, config.label_column)


def predict_external(model: FittedModel, df: pd.DataFrame, id_column: Optional[str] = None) -> pd.Series:
    """Predict an external table, indexed by ``id_column`` when it is present."""
    predictions = predict(model, df)
    if id_column and id_column in df.columns:
        predictions.index = pd.Index(df[id_column].to_numpy(), name=id_column)
    return predictions


def run_pipeline(config: PipelineConfig) -> PipelineResults:
    """Run every stage of the report and collect its outputs."""
    logger.info("Starting pipeline with label: %s", config.label_column)

    raw = load_dataset(config.training_path, na_values=config.na_values,
                       blank_is_missing=config.blank_is_missing)
    raw_summary = summarize_dataset(raw, config.label_column)

    clean = prepare_training_table(raw, config)
    clean_summary = summarize_dataset(clean, config.label_column)
    logger.info("Clean table: %d rows x %d columns, classes %s",
                clean_summary['rows'], clean_summary['cols'], clean_summary['class_distribution'])

    split = stratified_split(clean, config.label_column, config.train_fraction, config.random_state)
    train_df, test_df = split.apply(clean)

    # Correlations come from the training partition only
    train_df, correlated = filter_correlated_columns(train_df, config.label_column,
                                                     config.correlation_threshold)
    test_df = test_df.drop(columns=correlated)

    model = fit_classifier(train_df, config.label_column, tree_count=config.tree_count,
                           random_state=config.random_state, n_jobs=config.n_jobs)

    results: PipelineResults = {
        'model': model,
        'raw_summary': raw_summary,
        'clean_summary': clean_summary,
        'kept_columns': list(train_df.columns),
        'correlated_columns': correlated,
        'train_rows': len(train_df),
        'test_rows': len(test_df),
        'oob_error': model.oob_error,
        'feature_importance': feature_importance(model, top=20),
        'external_evaluation': None,
        'external_predictions': None,
    }

    if config.cv_folds:
        results['cross_validation'] = cross_validate(
            train_df, config.label_column, tree_count=config.tree_count,
            folds=config.cv_folds, random_state=config.random_state, n_jobs=config.n_jobs)

    if config.compare_classifiers:
        results['comparison'] = compare_classifiers(
            train_df, test_df, config.label_column, tree_count=config.tree_count,
            random_state=config.random_state, n_jobs=config.n_jobs)

    results['evaluation'] = evaluate(model, test_df, config.label_column)

    if config.testing_path:
        external = load_dataset(config.testing_path, na_values=config.na_values,
                                blank_is_missing=config.blank_is_missing)
        if config.label_column in external.columns:
            normalize_label(external, config.label_column)
            results['external_evaluation'] = evaluate(model, external, config.label_column)
        results['external_predictions'] = predict_external(model, external, config.external_id_column)
        logger.info("Predicted %d external rows", len(external))

    return results


# ---------------------------------------------------------------------------
# Features implemented in this module
# - prepare_training_table: column filter + label normalization
# - predict_external: predictions indexed by an optional id column
# - run_pipeline: full report run with optional CV and classifier comparison
# ---------------------------------------------------------------------------

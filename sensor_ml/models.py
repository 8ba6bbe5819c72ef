"""Classifier fitting and prediction on cleaned sensor tables.

Wraps scikit-learn estimators behind a small fit/predict contract. The
pipeline only ever holds a FittedModel and calls predict on it.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import joblib
import numpy as np
import pandas as pd
from pandas.api.types import CategoricalDtype
from sklearn.base import ClassifierMixin
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.model_selection import StratifiedKFold, cross_val_score

from .errors import SchemaError, SchemaMismatchError, TrainingError

logger = logging.getLogger(__name__)


def _random_forest(tree_count: int, random_state: int, n_jobs: Optional[int]) -> ClassifierMixin:
    return RandomForestClassifier(n_estimators=tree_count, oob_score=True, bootstrap=True,
                                  random_state=random_state, n_jobs=n_jobs)


def _gradient_boosting(tree_count: int, random_state: int, n_jobs: Optional[int]) -> ClassifierMixin:
    return GradientBoostingClassifier(n_estimators=tree_count, random_state=random_state)


MODELS: Dict[str, Callable[[int, int, Optional[int]], ClassifierMixin]] = {
    'random_forest': _random_forest,
    'gradient_boosting': _gradient_boosting,
}


@dataclass
class FittedModel:
    """A trained estimator plus what is needed to apply it to new tables."""
    estimator: ClassifierMixin
    kind: str
    label_column: str
    feature_columns: List[str]
    levels: List[Any]
    oob_error: Optional[float] = None
    training_time: float = 0.0


def _feature_columns(df: pd.DataFrame, label_column: str) -> List[str]:
    features = [col for col in df.columns if col != label_column]
    if not features:
        raise TrainingError("No feature columns left to train on")

    non_numeric = [col for col in features if col not in df.select_dtypes(include=['number']).columns]
    if non_numeric:
        raise TrainingError(f"Feature columns must be numeric, found: {non_numeric}")
    return features


def _label_levels(labels: pd.Series) -> List[Any]:
    if isinstance(labels.dtype, CategoricalDtype):
        return list(labels.cat.categories)
    return sorted(pd.unique(labels.dropna()))


def fit_classifier(train_df: pd.DataFrame, label_column: str, tree_count: int = 100,
                   kind: str = 'random_forest', random_state: int = 42,
                   n_jobs: Optional[int] = None) -> FittedModel:
    """Fit a tree ensemble on every non-label column of ``train_df``.

    Random forests are fitted with out-of-bag scoring, and their OOB error
    is stored on the returned model.
    """
    if label_column not in train_df.columns:
        raise SchemaError(f"Label column '{label_column}' not found in training table")
    if kind not in MODELS:
        raise ValueError(f"Unknown classifier '{kind}'. Must be one of {sorted(MODELS)}")
    if tree_count < 1:
        raise TrainingError(f"Tree count must be at least 1, got {tree_count}")

    features = _feature_columns(train_df, label_column)
    labels = train_df[label_column]
    if labels.isna().any():
        raise TrainingError(f"Label column '{label_column}' has missing values")

    estimator = MODELS[kind](tree_count, random_state, n_jobs)
    start_time = time.time()
    try:
        estimator.fit(train_df[features], labels)
    except (ValueError, MemoryError) as e:
        raise TrainingError(f"Fitting {kind} failed: {e}") from e
    elapsed_time = time.time() - start_time

    oob_error = None
    if kind == 'random_forest':
        oob_error = float(1.0 - estimator.oob_score_)

    model = FittedModel(
        estimator=estimator,
        kind=kind,
        label_column=label_column,
        feature_columns=features,
        levels=_label_levels(labels),
        oob_error=oob_error,
        training_time=round(elapsed_time, 3),
    )
    logger.info("%s fitted on %d rows x %d features in %.2fs (OOB error: %s)",
                kind, len(train_df), len(features), elapsed_time,
                'n/a' if oob_error is None else f"{oob_error:.4f}")
    return model


def predict(model: FittedModel, df: pd.DataFrame) -> pd.Series:
    """Predict labels for ``df``; extra columns are ignored.

    Every feature the model was trained on must be present, numeric and
    fully populated.
    """
    missing = [col for col in model.feature_columns if col not in df.columns]
    if missing:
        raise SchemaMismatchError(f"Columns required by the model are missing: {missing}")

    features = df[model.feature_columns]
    numeric = set(features.select_dtypes(include=['number']).columns)
    non_numeric = [col for col in model.feature_columns if col not in numeric]
    if non_numeric:
        raise SchemaMismatchError(f"Columns required by the model are not numeric: {non_numeric}")
    incomplete = features.columns[features.isna().any().to_numpy()].tolist()
    if incomplete:
        raise SchemaMismatchError(f"Columns required by the model have missing values: {incomplete}")

    predicted = model.estimator.predict(features)
    return pd.Series(
        pd.Categorical(predicted, categories=model.levels),
        index=df.index,
        name=model.label_column,
    )


def cross_validate(train_df: pd.DataFrame, label_column: str, tree_count: int = 100,
                   folds: int = 5, random_state: int = 42,
                   n_jobs: Optional[int] = None) -> Dict[str, float]:
    """Stratified K-fold accuracy of a random forest on the training table."""
    if label_column not in train_df.columns:
        raise SchemaError(f"Label column '{label_column}' not found in training table")

    features = _feature_columns(train_df, label_column)
    cv = StratifiedKFold(n_splits=folds, shuffle=True, random_state=random_state)
    estimator = MODELS['random_forest'](tree_count, random_state, n_jobs)
    try:
        scores = cross_val_score(estimator, train_df[features], train_df[label_column],
                                 cv=cv, scoring='accuracy')
    except ValueError as e:
        raise TrainingError(f"Cross-validation failed: {e}") from e

    result = {
        'folds': folds,
        'mean_accuracy': float(np.mean(scores)),
        'std_accuracy': float(np.std(scores)),
    }
    logger.info("%d-fold cross-validation accuracy: %.4f (+/- %.4f)",
                folds, result['mean_accuracy'], result['std_accuracy'])
    return result


def feature_importance(model: FittedModel, top: Optional[int] = None) -> Dict[str, float]:
    """Feature importances of the fitted ensemble, largest first."""
    importances = getattr(model.estimator, 'feature_importances_', None)
    if importances is None:
        return {}

    ranked = sorted(zip(model.feature_columns, np.asarray(importances)),
                    key=lambda item: item[1], reverse=True)
    if top is not None:
        ranked = ranked[:top]
    return {str(feature): float(importance) for feature, importance in ranked}


def compare_classifiers(train_df: pd.DataFrame, test_df: pd.DataFrame, label_column: str,
                        tree_count: int = 100, random_state: int = 42,
                        n_jobs: Optional[int] = None) -> Dict[str, Any]:
    """Fit every registered classifier and score it on the testing table."""
    from .evaluation import evaluate

    models = {}
    results = {}
    for kind in MODELS:
        model = fit_classifier(train_df, label_column, tree_count=tree_count, kind=kind,
                               random_state=random_state, n_jobs=n_jobs)
        evaluation = evaluate(model, test_df, label_column)
        models[kind] = model
        results[kind] = evaluation.metrics(model)
        logger.info("%s completed - Accuracy: %.3f, Time: %.2fs",
                    kind, evaluation.accuracy, model.training_time)

    best_kind = max(results, key=lambda kind: results[kind].get('Accuracy', -np.inf))
    return {
        'models': models,
        'results': results,
        'best_model_name': best_kind,
    }


def save_model(model: FittedModel, path: str) -> None:
    """Persist a fitted model with joblib."""
    joblib.dump(model, path)
    logger.info("Model saved to %s", path)


def load_model(path: str) -> FittedModel:
    """Load a model written by save_model."""
    model = joblib.load(path)
    if not isinstance(model, FittedModel):
        raise TypeError(f"{path} does not contain a fitted model")
    return model


# ---------------------------------------------------------------------------
# Features implemented in this module
# - Registry of tree-ensemble classifiers (random forest, gradient boosting)
# - fit_classifier with OOB error capture and TrainingError wrapping
# - predict with required-column checks; extra columns ignored
# - Stratified K-fold cross-validation accuracy
# - Ranked feature importances and classifier comparison
# - joblib persistence helpers
# ---------------------------------------------------------------------------

"""Evaluation of fitted classifiers against labelled tables."""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import numpy as np
import pandas as pd
from pandas.api.types import CategoricalDtype
from sklearn.metrics import confusion_matrix, f1_score, precision_score, recall_score

from .config import ClassifierMetrics
from .errors import EmptyColumnError, SchemaError
from .models import FittedModel, predict

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Confusion counts and summary metrics for one set of predictions."""
    confusion: pd.DataFrame
    accuracy: float
    error_rate: float
    precision: float
    recall: float
    f1: float
    n_rows: int
    predictions: pd.Series

    def metrics(self, model: Optional[FittedModel] = None) -> ClassifierMetrics:
        metrics: ClassifierMetrics = {
            'Accuracy': self.accuracy,
            'Error_Rate': self.error_rate,
            'Precision': self.precision,
            'Recall': self.recall,
            'F1': self.f1,
        }
        if model is not None:
            metrics['Training_Time'] = model.training_time
            if model.oob_error is not None:
                metrics['OOB_Error'] = model.oob_error
        return metrics


def _levels(*vectors: pd.Series) -> List[Any]:
    levels = set()
    for values in vectors:
        if isinstance(values.dtype, CategoricalDtype):
            levels.update(values.cat.categories)
        levels.update(values.dropna())
    return sorted(levels)


def confusion_table(predicted: pd.Series, actual: pd.Series) -> pd.DataFrame:
    """Count (predicted, actual) pairs; rows are predicted levels, columns actual levels."""
    predicted = pd.Series(predicted).reset_index(drop=True)
    actual = pd.Series(actual).reset_index(drop=True)
    levels = _levels(predicted, actual)

    # sklearn puts actual levels on rows
    counts = confusion_matrix(actual.astype(object), predicted.astype(object), labels=levels)
    return pd.DataFrame(
        counts.T,
        index=pd.Index(levels, name='predicted'),
        columns=pd.Index(levels, name='actual'),
    )


def score_predictions(predicted: pd.Series, actual: pd.Series) -> EvaluationResult:
    """Accuracy, error rate, weighted precision/recall/F1 and the confusion table.

    Rows whose actual label is missing are left out of every metric.
    """
    predicted = pd.Series(predicted)
    actual = pd.Series(actual)
    if len(predicted) != len(actual):
        raise ValueError(f"Prediction length {len(predicted)} does not match label length {len(actual)}")
    known = actual.notna().to_numpy()
    if not known.all():
        logger.warning("Skipping %d rows without a known label", int((~known).sum()))
        predicted, actual = predicted[known], actual[known]
    if len(actual) == 0:
        raise EmptyColumnError("No rows with a known label to evaluate")

    y_pred = predicted.astype(object).to_numpy()
    y_true = actual.astype(object).to_numpy()

    accuracy = float(np.mean(y_pred == y_true))
    labels = _levels(predicted, actual)
    return EvaluationResult(
        confusion=confusion_table(predicted, actual),
        accuracy=accuracy,
        error_rate=1.0 - accuracy,
        precision=float(precision_score(y_true, y_pred, labels=labels, average='weighted', zero_division=0)),
        recall=float(recall_score(y_true, y_pred, labels=labels, average='weighted', zero_division=0)),
        f1=float(f1_score(y_true, y_pred, labels=labels, average='weighted', zero_division=0)),
        n_rows=len(actual),
        predictions=predicted,
    )


def evaluate(model: FittedModel, df: pd.DataFrame, label_column: Optional[str] = None) -> EvaluationResult:
    """Predict ``df`` with ``model`` and compare against its known labels."""
    label_column = label_column or model.label_column
    if label_column not in df.columns:
        raise SchemaError(f"Label column '{label_column}' not found in evaluation table")

    predicted = predict(model, df)
    result = score_predictions(predicted, df[label_column])
    logger.info("Evaluated %d rows: accuracy %.4f, error rate %.4f",
                result.n_rows, result.accuracy, result.error_rate)
    return result


# ---------------------------------------------------------------------------
# Features implemented in this module
# - EvaluationResult with a metrics view in the ClassifierMetrics shape
# - Confusion table over the sorted union of predicted and actual levels
# - Accuracy, error rate, weighted precision/recall/F1 from label vectors
# - evaluate: predict then score, with schema checks
# ---------------------------------------------------------------------------

"""
Command-line report for the sensor activity classifier.
Runs the full pipeline on a training CSV (and optionally an external test
CSV) and prints the cleaning summary, model diagnostics and predictions.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import pandas as pd

from sensor_ml import (
    PipelineConfig,
    PipelineError,
    calculate_split_percentages,
    run_pipeline,
    safe_json_convert,
    validate_pipeline_config,
)
from sensor_ml.config import PipelineResults
from sensor_ml.models import save_model


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train and evaluate a random forest on a sensor activity dataset."
    )
    parser.add_argument('training_csv', help="Labelled training dataset (CSV)")
    parser.add_argument('--test-csv', dest='testing_csv', default=None,
                        help="External dataset to predict (CSV)")
    parser.add_argument('--label', default='classe', help="Label column name (default: classe)")
    parser.add_argument('--metadata-columns', type=int, default=7,
                        help="Leading identifier/timestamp columns to drop (default: 7)")
    parser.add_argument('--sentinel', action='append', default=None,
                        help="Invalid-value marker in text columns; repeatable (default: #DIV/0!)")
    parser.add_argument('--blank-is-missing', action='store_true',
                        help="Read empty fields as missing values")
    parser.add_argument('--train-fraction', type=float, default=0.7,
                        help="Fraction of each class used for training (default: 0.7)")
    parser.add_argument('--seed', type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument('--threshold', type=float, default=0.8,
                        help="Absolute correlation threshold (default: 0.8)")
    parser.add_argument('--trees', type=int, default=100, help="Number of trees (default: 100)")
    parser.add_argument('--cv-folds', type=int, default=0,
                        help="Cross-validation folds, 0 to skip (default: 0)")
    parser.add_argument('--compare', action='store_true',
                        help="Also fit gradient boosting and compare accuracies")
    parser.add_argument('--id-column', default='problem_id',
                        help="Identifier column of the external dataset (default: problem_id)")
    parser.add_argument('--jobs', type=int, default=None, help="Parallel jobs for the forest")
    parser.add_argument('--model-out', default=None, help="Write the fitted model here (joblib)")
    parser.add_argument('--json', action='store_true', help="Print a JSON summary instead of text")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    """Map parsed command-line flags onto a PipelineConfig."""
    return PipelineConfig(
        training_path=args.training_csv,
        testing_path=args.testing_csv,
        label_column=args.label,
        metadata_columns=args.metadata_columns,
        sentinels=tuple(args.sentinel) if args.sentinel else ('#DIV/0!',),
        blank_is_missing=args.blank_is_missing,
        train_fraction=args.train_fraction,
        random_state=args.seed,
        correlation_threshold=args.threshold,
        tree_count=args.trees,
        cv_folds=args.cv_folds,
        compare_classifiers=args.compare,
        external_id_column=args.id_column,
        n_jobs=args.jobs,
    )


def summarize_results(results: PipelineResults) -> dict:
    """JSON-safe view of a pipeline run."""
    evaluation = results['evaluation']
    summary = {
        'raw_summary': results['raw_summary'],
        'clean_summary': results['clean_summary'],
        'correlated_columns': results['correlated_columns'],
        'kept_columns': results['kept_columns'],
        'train_rows': results['train_rows'],
        'test_rows': results['test_rows'],
        'oob_error': results['oob_error'],
        'metrics': evaluation.metrics(results['model']),
        'confusion': evaluation.confusion,
        'feature_importance': results['feature_importance'],
    }
    if 'cross_validation' in results:
        summary['cross_validation'] = results['cross_validation']
    if 'comparison' in results:
        summary['comparison'] = {
            'results': results['comparison']['results'],
            'best_model_name': results['comparison']['best_model_name'],
        }
    if results.get('external_evaluation') is not None:
        summary['external_metrics'] = results['external_evaluation'].metrics()
    if results.get('external_predictions') is not None:
        summary['external_predictions'] = results['external_predictions'].astype(object)
    return safe_json_convert(summary)


def print_report(results: PipelineResults, config: PipelineConfig) -> None:
    raw, clean = results['raw_summary'], results['clean_summary']
    train_percent, test_percent = calculate_split_percentages(config.train_fraction)
    evaluation = results['evaluation']

    print(f"Raw data: {raw['rows']} rows x {raw['cols']} columns "
          f"({raw['columns_with_missing']} columns with missing values)")
    print(f"Clean data: {clean['rows']} rows x {clean['cols']} columns")
    print(f"Classes: {clean['class_distribution']}")
    print(f"Split: {train_percent}% training ({results['train_rows']} rows), "
          f"{test_percent}% testing ({results['test_rows']} rows)")
    print(f"Correlated predictors removed ({len(results['correlated_columns'])}): "
          f"{', '.join(results['correlated_columns']) or 'none'}")
    if results['oob_error'] is not None:
        print(f"Out-of-bag error estimate: {results['oob_error']:.4f}")
    if 'cross_validation' in results:
        cv = results['cross_validation']
        print(f"{cv['folds']}-fold CV accuracy: {cv['mean_accuracy']:.4f} (+/- {cv['std_accuracy']:.4f})")
    if 'comparison' in results:
        for name, metrics in results['comparison']['results'].items():
            print(f"  {name}: accuracy {metrics['Accuracy']:.4f}")
        print(f"Best classifier: {results['comparison']['best_model_name']}")

    print("\nConfusion table (rows predicted, columns actual):")
    print(evaluation.confusion.to_string())
    print(f"Accuracy: {evaluation.accuracy:.4f}")
    print(f"Error rate: {evaluation.error_rate:.4f}")

    if results.get('external_evaluation') is not None:
        external = results['external_evaluation']
        print(f"External accuracy: {external.accuracy:.4f}, error rate: {external.error_rate:.4f}")
    if results.get('external_predictions') is not None:
        print("\nExternal predictions:")
        print(pd.DataFrame({'prediction': results['external_predictions']}).to_string())


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    config = config_from_args(args)

    validation = validate_pipeline_config(config)
    if not validation['valid']:
        for error in validation['errors']:
            print(f"ERROR: {error}", file=sys.stderr)
        return 2

    try:
        results = run_pipeline(config)
    except (PipelineError, FileNotFoundError) as e:
        logging.getLogger(__name__).error("Pipeline failed: %s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.model_out:
        save_model(results['model'], args.model_out)

    if args.json:
        print(json.dumps(summarize_results(results), indent=2))
    else:
        print_report(results, config)
    return 0


if __name__ == '__main__':
    sys.exit(main())

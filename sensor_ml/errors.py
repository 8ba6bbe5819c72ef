"""Exception hierarchy for the sensor classification pipeline."""


class PipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class SchemaError(PipelineError, KeyError):
    """A required column is missing or the header is malformed."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ''


class SchemaMismatchError(SchemaError):
    """An evaluation table lacks columns the fitted model was trained on."""


class InvalidFractionError(PipelineError, ValueError):
    """Training fraction outside the open interval (0, 1)."""


class EmptyColumnError(PipelineError, ValueError):
    """A column has no rows to work with."""


class NoNumericColumnsError(PipelineError, ValueError):
    """Correlation filtering was asked to run without numeric predictors."""


class TrainingError(PipelineError, RuntimeError):
    """The classifier could not be fitted."""


# ---------------------------------------------------------------------------
# Features implemented in this module
# - PipelineError base class for every pipeline failure
# - Schema errors for absent label/model columns
# - Input errors for split fractions, empty labels, and missing predictors
# - TrainingError wrapping estimator failures
# ---------------------------------------------------------------------------

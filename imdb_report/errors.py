"""
Error types raised by the report pipeline.
Missing values are not errors: they travel as NaN until the cleaning stage drops the record.
"""

from typing import Iterable, List


class ReportError(Exception):
	"""Base class for every failure the pipeline raises on purpose."""


class MalformedRowError(ReportError):
	"""A source row has a different field count than the header. Recovered by skipping the row."""

	def __init__(self, line_number: int, expected: int, actual: int):
		self.line_number = line_number
		self.expected = expected
		self.actual = actual
		super().__init__(f"line {line_number}: expected {expected} fields, got {actual}")


class ConfigurationError(ReportError):
	"""A required reference value or column is absent from its source. Fatal."""


class DegenerateInputError(ReportError):
	"""One or more predictors have no variance in the training partition."""

	def __init__(self, predictors: Iterable[str]):
		self.predictors: List[str] = list(predictors)
		super().__init__(f"predictors without variance in training data: {', '.join(self.predictors)}")


class PipelineStageError(ReportError):
	"""Wraps a stage failure with the stage name and the input it was working on."""

	def __init__(self, stage: str, source: str, cause: Exception):
		self.stage = stage
		self.source = source
		self.cause = cause
		super().__init__(f"stage '{stage}' failed on {source}: {cause}")

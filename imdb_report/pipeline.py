"""
Report pipeline.
Runs load -> inflation -> cleaning -> adjustment -> categories -> reports -> models -> evaluation,
each stage producing a new table from the previous one.
"""

from contextlib import contextmanager
from typing import Optional

from loguru import logger

from .adjustment import adjust_for_inflation, standardize
from .aggregation import attach_group_summary, run_reports
from .categories import categorize
from .cleaning import clean_movies, drop_incomplete
from .config import PipelineConfig
from .data_loader import DataLoader
from .errors import DegenerateInputError, PipelineStageError, ReportError
from .evaluation import predict_holdout, summarize_errors
from .inflation import build_inflation_factors
from .modeling import fit_forest, fit_linear_model, split_ordinal
from .models import ADJUSTED_BUDGET, ADJUSTED_GROSS, PipelineResult


@contextmanager
def stage(name: str, source: str):
	"""Re-raise any expected failure as a PipelineStageError naming the stage and its input."""
	logger.debug(f"[Pipeline] Stage '{name}' started on {source}")
	try:
		yield
	except (ReportError, ValueError, FileNotFoundError) as e:
		if isinstance(e, PipelineStageError):
			raise
		logger.error(f"[Pipeline] Stage '{name}' failed on {source}: {e}")
		raise PipelineStageError(name, source, e) from e


class ReportPipeline:
	"""
	Batch, single-threaded run of the whole report.
	Reporting tables are always produced; a degenerate modeling input only disables the modeling branch
	unless the config asks for strict modeling.
	"""

	def __init__(self, config: Optional[PipelineConfig] = None, loader: Optional[DataLoader] = None):
		self.config = config or PipelineConfig()
		self.loader = loader or DataLoader()

	def run(self) -> PipelineResult:
		cfg = self.config
		movies_src = str(cfg.movies_path)
		index_src = str(cfg.price_index_path)

		logger.info("[Pipeline] [1/8] Loading inputs...")
		with stage('load', movies_src):
			movies, movies_report = self.loader.load_movies(cfg.movies_path)
		with stage('load', index_src):
			price_index, index_report = self.loader.load_price_index(
				cfg.price_index_path, cfg.price_date_column, cfg.price_value_column
			)

		logger.info("[Pipeline] [2/8] Building inflation factors...")
		with stage('inflation', index_src):
			inflation = build_inflation_factors(
				price_index, cfg.reference_year, cfg.price_date_column, cfg.price_value_column
			)

		logger.info("[Pipeline] [3/8] Cleaning movies...")
		with stage('cleaning', movies_src):
			gaps = self.loader.count_missing(movies)
			if gaps:
				logger.info(f"[Pipeline] Missing values before cleaning: {gaps}")
			cleaned = clean_movies(movies, cfg.drop_columns)

		logger.info("[Pipeline] [4/8] Adjusting for inflation and standardizing...")
		with stage('adjustment', movies_src):
			adjusted = adjust_for_inflation(cleaned, inflation)
			standardized = standardize(adjusted, [ADJUSTED_BUDGET, ADJUSTED_GROSS])

		logger.info("[Pipeline] [5/8] Deriving categories...")
		with stage('categories', movies_src):
			categorized = categorize(standardized)

		logger.info("[Pipeline] [6/8] Aggregating reports...")
		with stage('aggregation', movies_src):
			reports = run_reports(categorized)
			actor_movies = attach_group_summary(categorized, reports['actor'], 'actor_1_name')

		result = PipelineResult(
			movies=movies,
			price_index=price_index,
			load_reports=[movies_report, index_report],
			inflation=inflation,
			cleaned=cleaned,
			standardized=standardized,
			categorized=categorized,
			reports=reports,
			actor_movies=actor_movies,
		)

		try:
			self._run_models(result)
		except PipelineStageError as e:
			if cfg.strict_modeling or not isinstance(e.cause, DegenerateInputError):
				raise
			result.modeling_error = str(e)
			logger.warning(f"[Pipeline] Modeling skipped, reporting tables are still available: {e}")

		logger.info("[Pipeline] Run complete")
		return result

	def _run_models(self, result: PipelineResult):
		cfg = self.config
		columns = sorted(set(cfg.linear_predictors) | set(cfg.forest_predictors) | {cfg.target})

		logger.info("[Pipeline] [7/8] Fitting models...")
		with stage('modeling', 'categorized movies'):
			table = drop_incomplete(result.categorized, columns)  # adjusted money is required from here on
			train, holdout = split_ordinal(table, cfg.train_size)
			result.linear = fit_linear_model(train, cfg.linear_predictors, cfg.target)
			result.forest = fit_forest(train, cfg.forest_predictors, cfg.target, cfg.n_trees, cfg.seed)

		logger.info("[Pipeline] [8/8] Scoring held-out records...")
		with stage('evaluation', 'held-out movies'):
			result.predictions = predict_holdout(result.forest, holdout)
			result.errors = summarize_errors(result.predictions)

"""
Data models for the IMDB score report.
Defines the column schema of the movie table and the records produced by each stage.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Dict, List, Optional, Any  # lists, dicts and optional values

import pandas as pd  # tables flowing between stages


# Declared type of every movie column we rely on; validated once at load time
STRING = 'string'
FLOAT = 'float'
DATE = 'date'

MOVIE_COLUMNS: Dict[str, str] = {
	'movie_title': STRING,  # identifier shown in predictions
	'director_name': STRING,  # primary director
	'actor_1_name': STRING,  # primary actor
	'genres': STRING,  # '|'-separated genre list
	'color': STRING,  # 'Color' or ' Black and White'
	'title_year': FLOAT,  # release year (float so it can carry NaN)
	'duration': FLOAT,  # minutes
	'budget': FLOAT,  # raw budget in release-year currency
	'gross': FLOAT,  # raw gross in release-year currency
	'actor_1_facebook_likes': FLOAT,
	'director_facebook_likes': FLOAT,
	'cast_total_facebook_likes': FLOAT,
	'movie_facebook_likes': FLOAT,
	'facenumber_in_poster': FLOAT,  # faces detected on the poster
	'num_voted_users': FLOAT,  # IMDB vote count
	'imdb_score': FLOAT,  # target, 0..10
}

# Columns added by the adjustment, normalization and categorical stages
ADJUSTMENT_COLUMN = 'inflation_adjustment'
ADJUSTED_BUDGET = 'adjusted_budget'
ADJUSTED_GROSS = 'adjusted_gross'
STANDARDIZED_SUFFIX = '_z'
RATING_TIER = 'rating_tier'
FACE_TIER = 'face_tier'
PRIMARY_GENRE = 'primary_genre'


@dataclass(frozen=True)
class InflationFactor:
	"""One calendar year of the price-index series relative to the reference year."""
	year: int  # calendar year
	mean_index: float  # arithmetic mean of the monthly index values
	adjustment: float  # reference-year mean / this year's mean


@dataclass
class LoadReport:
	"""
	Summary of reading one delimited file.
	Malformed rows are skipped, never partially loaded, and their line numbers kept here.
	"""
	path: str  # file that was read
	rows_loaded: int = 0  # rows that made it into the table
	skipped_rows: List[int] = field(default_factory=list)  # 1-based line numbers of malformed rows

	@property
	def skipped(self) -> int:
		return len(self.skipped_rows)


@dataclass(frozen=True)
class GroupSummary:
	"""Summary statistics of one group (year, actor, director or genre)."""
	key: Any  # group key value
	n_movies: int  # records in the group
	mean_score: float  # mean imdb_score of the group
	mean_secondary: Optional[float] = None  # mean of the report's second field, if any
	outlier: bool = False  # flagged for labelling in a chart


@dataclass(frozen=True)
class PredictionResult:
	"""Forest prediction for one held-out record."""
	record_id: str  # movie title
	predicted: float  # NaN when a predictor was undefined
	actual: float
	squared_error: float  # (actual - predicted) ** 2


@dataclass(frozen=True)
class ErrorSummary:
	n_scored: int  # held-out records with a defined prediction
	n_excluded: int  # held-out records skipped for undefined predictors
	mse: float
	rmse: float


@dataclass
class LinearModelReport:
	"""
	Ordinary least squares fit of the score against a fixed predictor set.
	`coefficients` has one row per term (intercept included) with columns
	coefficient, std_error, t_value, p_value.
	"""
	predictors: List[str]
	target: str
	coefficients: pd.DataFrame
	anova: pd.DataFrame  # sequential sum of squares per predictor
	f_statistic: float
	f_pvalue: float
	r_squared: float
	n_observations: int
	results: Any = None  # underlying statsmodels results object


@dataclass
class ForestModelReport:
	"""
	Random forest fit plus its diagnostics.
	`importance` is indexed by predictor with columns inc_mse, pct_inc_mse and inc_node_purity;
	`error_curve` holds the out-of-bag MSE after each tree count.
	"""
	predictors: List[str]
	target: str
	model: Any  # fitted sklearn RandomForestRegressor
	importance: pd.DataFrame
	error_curve: pd.DataFrame
	n_trees: int
	seed: int
	n_observations: int

	def predict(self, features: pd.DataFrame):
		"""Predict with the fitted forest; the model is never refit here."""
		return self.model.predict(features[self.predictors].to_numpy(dtype=float))


@dataclass
class PipelineResult:
	"""Everything a run produced, kept stage by stage for reporting and charts."""
	movies: pd.DataFrame  # raw movie table as loaded
	price_index: pd.DataFrame  # raw price-index table as loaded
	load_reports: List[LoadReport]
	inflation: pd.DataFrame  # one row per year
	cleaned: pd.DataFrame
	standardized: pd.DataFrame
	categorized: pd.DataFrame
	reports: Dict[str, pd.DataFrame]  # report name -> group summary table
	actor_movies: pd.DataFrame  # records joined with their primary actor's summary (group_ columns)
	linear: Optional[LinearModelReport] = None
	forest: Optional[ForestModelReport] = None
	predictions: Optional[pd.DataFrame] = None
	errors: Optional[ErrorSummary] = None
	modeling_error: Optional[str] = None  # set when modeling failed but reporting survived

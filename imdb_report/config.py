"""
Pipeline configuration.
All tunable constants live here; environment variables prefixed IMDB_REPORT_ override the defaults.
"""

import os  # environment overrides
from pathlib import Path  # filesystem-safe paths
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator  # validated settings

ENV_PREFIX = 'IMDB_REPORT_'

DEFAULT_DROP_COLUMNS = [
	'color',
	'director_facebook_likes',
	'actor_2_name',
	'actor_2_facebook_likes',
	'actor_3_name',
	'actor_3_facebook_likes',
	'num_critic_for_reviews',
	'num_user_for_reviews',
	'plot_keywords',
	'movie_imdb_link',
	'language',
	'country',
	'content_rating',
	'aspect_ratio',
]

DEFAULT_LINEAR_PREDICTORS = [
	'adjusted_budget_z',
	'duration',
	'num_voted_users',
	'facenumber_in_poster',
	'adjusted_gross_z',
]

DEFAULT_FOREST_PREDICTORS = [
	'adjusted_budget_z',
	'duration',
	'num_voted_users',
	'cast_total_facebook_likes',
	'facenumber_in_poster',
	'movie_facebook_likes',
	'adjusted_gross_z',
]


class PipelineConfig(BaseModel):
	"""Validated settings for one report run."""

	movies_path: Path = Path('data') / 'movie_metadata.csv'
	price_index_path: Path = Path('data') / 'cpi.csv'
	price_date_column: str = 'DATE'
	price_value_column: str = 'CPIAUCSL'
	reference_year: int = Field(2018, ge=1800, le=2200)
	drop_columns: List[str] = Field(default_factory=lambda: list(DEFAULT_DROP_COLUMNS))
	target: str = 'imdb_score'
	linear_predictors: List[str] = Field(default_factory=lambda: list(DEFAULT_LINEAR_PREDICTORS))
	forest_predictors: List[str] = Field(default_factory=lambda: list(DEFAULT_FOREST_PREDICTORS))
	train_size: int = Field(2000, ge=1)  # first N cleaned records train, the rest are held out
	n_trees: int = Field(500, ge=1)
	seed: int = 1  # forest and permutation-importance seed
	figures_dir: Optional[Path] = None  # write PNG charts here when set
	strict_modeling: bool = False  # re-raise modeling failures instead of recording them

	@field_validator('linear_predictors', 'forest_predictors')
	@classmethod
	def _non_empty(cls, value: List[str]) -> List[str]:
		if not value:
			raise ValueError('at least one predictor is required')
		if len(set(value)) != len(value):
			raise ValueError(f'duplicated predictors: {value}')
		return value

	@model_validator(mode='after')
	def _target_not_a_predictor(self) -> 'PipelineConfig':
		for predictors in (self.linear_predictors, self.forest_predictors):
			if self.target in predictors:
				raise ValueError(f"target '{self.target}' cannot also be a predictor")
		return self

	@classmethod
	def from_env(cls, root: Optional[Path] = None, **overrides) -> 'PipelineConfig':
		"""
		Build a config from IMDB_REPORT_* environment variables.
		Relative data paths resolve against `root` (the project root by default).
		"""
		root = Path(root) if root else Path(__file__).resolve().parents[1]
		values = {
			'movies_path': root / 'data' / 'movie_metadata.csv',
			'price_index_path': root / 'data' / 'cpi.csv',
		}
		env_fields = {
			'MOVIES_PATH': 'movies_path',
			'PRICE_INDEX_PATH': 'price_index_path',
			'PRICE_DATE_COLUMN': 'price_date_column',
			'PRICE_VALUE_COLUMN': 'price_value_column',
			'REFERENCE_YEAR': 'reference_year',
			'TRAIN_SIZE': 'train_size',
			'N_TREES': 'n_trees',
			'SEED': 'seed',
			'FIGURES_DIR': 'figures_dir',
		}
		for env_name, field_name in env_fields.items():
			raw = os.getenv(ENV_PREFIX + env_name)
			if raw:
				values[field_name] = raw  # pydantic coerces ints and paths
		values.update(overrides)
		config = cls(**values)
		# Anchor relative paths on the project root
		for name in ('movies_path', 'price_index_path', 'figures_dir'):
			path = getattr(config, name)
			if path is not None and not path.is_absolute():
				setattr(config, name, root / path)
		return config

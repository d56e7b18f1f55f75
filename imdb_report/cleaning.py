"""
Cleaning and projection stage.
Drops incomplete records entirely and removes columns the analysis does not use.
"""

from typing import Iterable, Optional

import pandas as pd

from loguru import logger

from .errors import ConfigurationError


def clean_movies(movies: pd.DataFrame, drop_columns: Iterable[str] = ()) -> pd.DataFrame:
	"""
	Remove every record with a missing value in ANY column, then drop `drop_columns`.
	A record is dropped even when its only missing field is one of the dropped columns.
	"""
	complete = movies.dropna(how='any')  # full-row omission
	logger.info(
		f"[Cleaning] Kept {len(complete)} of {len(movies)} records ({len(movies) - len(complete)} had missing fields)"
	)

	drop_columns = list(drop_columns)
	present = [name for name in drop_columns if name in complete.columns]
	absent = [name for name in drop_columns if name not in complete.columns]
	if absent:
		logger.debug(f"[Cleaning] Columns to drop not in table: {absent}")

	cleaned = complete.drop(columns=present).reset_index(drop=True)
	logger.info(f"[Cleaning] Dropped {len(present)} columns; {cleaned.shape[1]} remain")
	return cleaned


def drop_incomplete(table: pd.DataFrame, columns: Optional[Iterable[str]] = None) -> pd.DataFrame:
	"""
	Drop records missing any of `columns` (all columns when None).
	Used downstream when derived fields, such as inflation-adjusted money, become required.
	"""
	subset = list(columns) if columns is not None else None
	absent = [name for name in subset or [] if name not in table.columns]
	if absent:
		raise ConfigurationError(f"required columns not in table (dropped or never loaded): {absent}")
	complete = table.dropna(how='any', subset=subset)
	if len(complete) != len(table):
		logger.debug(f"[Cleaning] Dropped {len(table) - len(complete)} records missing {subset or 'any field'}")
	return complete.reset_index(drop=True)

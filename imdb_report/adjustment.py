"""
Adjustment and normalization stage.
Joins yearly inflation factors onto the movies, converts money to reference-year terms,
then z-score standardizes the adjusted columns.
"""

from typing import Iterable

import numpy as np
import pandas as pd

from loguru import logger

from .models import ADJUSTMENT_COLUMN, ADJUSTED_BUDGET, ADJUSTED_GROSS, STANDARDIZED_SUFFIX


def join_on_key(
	left: pd.DataFrame,
	right: pd.DataFrame,
	left_key: str,
	right_key: str,
	how: str = 'left',
) -> pd.DataFrame:
	"""
	Join two distinct tables on a named key column from each side.
	The right table must hold at most one row per key, so the left row count and order are preserved.
	When the key names differ the right key column is not carried into the result.
	"""
	if left is right:
		raise ValueError("join_on_key needs two distinct tables; got the same table on both sides")
	if left_key not in left.columns:
		raise ValueError(f"left table has no column '{left_key}'")
	if right_key not in right.columns:
		raise ValueError(f"right table has no column '{right_key}'")

	right = right[right[right_key].notna()]  # a missing key never matches
	duplicated = right[right_key][right[right_key].duplicated()].unique()
	if len(duplicated):
		raise ValueError(f"right table has duplicated keys in '{right_key}': {list(duplicated[:5])}")

	overlap = (set(left.columns) & set(right.columns)) - {left_key, right_key}
	if overlap:
		raise ValueError(f"columns present on both sides of the join: {sorted(overlap)}")

	joined = left.merge(right, how=how, left_on=left_key, right_on=right_key, sort=False)
	if left_key != right_key:
		joined = joined.drop(columns=[right_key])
	return joined


def adjust_for_inflation(movies: pd.DataFrame, factors: pd.DataFrame) -> pd.DataFrame:
	"""
	Attach each record's release-year factor and compute adjusted budget and gross.
	Records whose year has no factor keep NaN adjusted values; nothing is dropped here.
	"""
	factor_table = factors[['year', 'adjustment']].rename(columns={'adjustment': ADJUSTMENT_COLUMN})
	factor_table = factor_table.astype({'year': movies['title_year'].dtype})  # float years on the movie side
	adjusted = join_on_key(movies, factor_table, left_key='title_year', right_key='year')

	adjusted[ADJUSTED_BUDGET] = adjusted['budget'] * adjusted[ADJUSTMENT_COLUMN]
	adjusted[ADJUSTED_GROSS] = adjusted['gross'] * adjusted[ADJUSTMENT_COLUMN]

	unmatched = int(adjusted[ADJUSTMENT_COLUMN].isna().sum())
	if unmatched:
		years = sorted(adjusted.loc[adjusted[ADJUSTMENT_COLUMN].isna(), 'title_year'].dropna().unique())
		logger.warning(f"[Adjustment] {unmatched} records have no inflation factor (years {years[:10]})")
	logger.info(f"[Adjustment] Adjusted budget and gross for {len(adjusted) - unmatched} of {len(adjusted)} records")
	return adjusted


def remove_inflation(adjusted, factor):
	"""Undo an adjustment: divide reference-year money by the factor it was multiplied with."""
	return adjusted / factor


def standardize(
	table: pd.DataFrame,
	columns: Iterable[str] = (ADJUSTED_BUDGET, ADJUSTED_GROSS),
	suffix: str = STANDARDIZED_SUFFIX,
) -> pd.DataFrame:
	"""
	Add a z-score column `<name><suffix>` for each column, computed independently
	over all defined values of the whole column (sample standard deviation).
	Missing values stay missing. A column with fewer than two values or no spread yields all-NaN scores.
	"""
	standardized = table.copy()
	for name in columns:
		values = table[name].astype(float)
		defined = values.dropna()
		sd = defined.std(ddof=1) if len(defined) > 1 else np.nan
		if not np.isfinite(sd) or sd == 0:
			logger.warning(f"[Adjustment] Cannot standardize '{name}': {len(defined)} values, sd={sd}")
			standardized[name + suffix] = np.nan
			continue
		mean = defined.mean()
		standardized[name + suffix] = (values - mean) / sd
		logger.debug(f"[Adjustment] Standardized '{name}' | mean={mean:.4g} sd={sd:.4g} n={len(defined)}")
	return standardized

"""
Inflation index module.
Reduces a monthly price-index series to one adjustment factor per calendar year.
"""

from typing import List

import pandas as pd

from loguru import logger

from .errors import ConfigurationError
from .models import InflationFactor


def build_inflation_factors(
	price_index: pd.DataFrame,
	reference_year: int,
	date_column: str = 'DATE',
	value_column: str = 'CPIAUCSL',
) -> pd.DataFrame:
	"""
	Average the index per calendar year and express each year relative to `reference_year`.
	Returns a table with columns year, mean_index, adjustment (one row per year, sorted).
	Raises ConfigurationError when the reference year has no index values.
	"""
	usable = price_index[[date_column, value_column]].dropna()  # rows with both a date and a value
	dropped = len(price_index) - len(usable)
	if dropped:
		logger.debug(f"[Inflation] Ignoring {dropped} price-index rows without a date or value")

	years = pd.to_datetime(usable[date_column]).dt.year.astype(int)
	means = usable[value_column].astype(float).groupby(years).mean().sort_index()

	if reference_year not in means.index:
		raise ConfigurationError(
			f"reference year {reference_year} not found in price index (years {_year_span(means.index)})"
		)

	reference_mean = means.loc[reference_year]
	factors = pd.DataFrame({
		'year': means.index.to_numpy(dtype=int),
		'mean_index': means.to_numpy(dtype=float),
		'adjustment': (reference_mean / means).to_numpy(dtype=float),
	})
	logger.info(
		f"[Inflation] Built {len(factors)} yearly factors ({_year_span(means.index)}) relative to {reference_year}"
	)
	return factors


def factors_as_records(factors: pd.DataFrame) -> List[InflationFactor]:
	"""Convert the factor table into InflationFactor records."""
	return [
		InflationFactor(year=int(row.year), mean_index=float(row.mean_index), adjustment=float(row.adjustment))
		for row in factors.itertuples(index=False)
	]


def _year_span(years) -> str:
	if len(years) == 0:
		return 'none'
	return f"{min(years)}-{max(years)}"

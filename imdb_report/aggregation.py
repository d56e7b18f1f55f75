"""
Aggregation and reporting module.
Groups records by one categorical key, averages numeric fields per group and flags outliers
with report-specific thresholds.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from loguru import logger

from .adjustment import join_on_key
from .models import GroupSummary, PRIMARY_GENRE


@dataclass(frozen=True)
class OutlierRule:
	"""
	Flags a group when `column` (a summary column) is >= `above` or <= `below`.
	Either threshold may be omitted.
	"""
	column: str
	above: Optional[float] = None
	below: Optional[float] = None

	def flag(self, summary: pd.DataFrame) -> pd.Series:
		values = summary[self.column]
		flags = pd.Series(False, index=summary.index)
		if self.above is not None:
			flags |= values >= self.above
		if self.below is not None:
			flags |= values <= self.below
		return flags


@dataclass(frozen=True)
class ReportSpec:
	"""One grouping report: key column, fields to average and the outlier thresholds."""
	name: str
	key: str
	fields: List[str] = field(default_factory=lambda: ['imdb_score'])
	outlier: Optional[OutlierRule] = None
	min_movies: int = 1  # groups with fewer records are left out


REPORTS: Dict[str, ReportSpec] = {
	'year': ReportSpec(name='year', key='title_year'),
	'actor': ReportSpec(
		name='actor',
		key='actor_1_name',
		fields=['imdb_score', 'actor_1_facebook_likes'],
		outlier=OutlierRule(column='mean_actor_1_facebook_likes', above=100000),
	),
	'director': ReportSpec(
		name='director',
		key='director_name',
		outlier=OutlierRule(column='mean_imdb_score', above=8.0, below=4.0),
	),
	'genre': ReportSpec(name='genre', key=PRIMARY_GENRE),
}


def summarize_groups(
	table: pd.DataFrame,
	key: str,
	fields: Sequence[str] = ('imdb_score',),
	outlier: Optional[OutlierRule] = None,
	min_movies: int = 1,
) -> pd.DataFrame:
	"""
	Partition `table` by exact equality of `key` and average each field.
	Returns columns: key, n_movies, mean_<field> for each field, outlier.
	Records with a missing key are not grouped. Row order carries no meaning.
	"""
	fields = list(fields)
	grouped = table.dropna(subset=[key]).groupby(key, sort=True)
	summary = grouped[fields].mean()
	summary.columns = [f"mean_{name}" for name in fields]
	summary.insert(0, 'n_movies', grouped.size())
	summary = summary.reset_index().rename(columns={key: 'key'})

	if min_movies > 1:
		summary = summary[summary['n_movies'] >= min_movies].reset_index(drop=True)

	summary['outlier'] = outlier.flag(summary) if outlier else False
	logger.debug(f"[Aggregation] Grouped by '{key}': {len(summary)} groups, {int(summary['outlier'].sum())} outliers")
	return summary


def run_report(table: pd.DataFrame, spec: ReportSpec) -> pd.DataFrame:
	"""Run one preset report."""
	summary = summarize_groups(table, spec.key, spec.fields, spec.outlier, spec.min_movies)
	logger.info(f"[Aggregation] Report '{spec.name}': {len(summary)} groups")
	return summary


def run_reports(table: pd.DataFrame, specs: Optional[Dict[str, ReportSpec]] = None) -> Dict[str, pd.DataFrame]:
	"""Run every preset report (or the given ones) and return name -> summary table."""
	specs = specs or REPORTS
	return {name: run_report(table, spec) for name, spec in specs.items()}


def summary_records(summary: pd.DataFrame, secondary: Optional[str] = None) -> List[GroupSummary]:
	"""Convert a summary table into GroupSummary records."""
	records = []
	for row in summary.to_dict('records'):
		records.append(GroupSummary(
			key=row['key'],
			n_movies=int(row['n_movies']),
			mean_score=float(row['mean_imdb_score']),
			mean_secondary=float(row[secondary]) if secondary else None,
			outlier=bool(row['outlier']),
		))
	return records


def attach_group_summary(records: pd.DataFrame, summary: pd.DataFrame, key: str) -> pd.DataFrame:
	"""
	Join a group summary back onto the records it was computed from.
	Summary columns are prefixed with 'group_' so they never collide with record columns.
	"""
	prefixed = summary.rename(columns={name: f"group_{name}" for name in summary.columns if name != 'key'})
	return join_on_key(records, prefixed, left_key=key, right_key='key')


def contingency_table(table: pd.DataFrame, row: str, column: str) -> pd.DataFrame:
	"""Cross-tabulated record counts of two categorical columns (mosaic chart input)."""
	return pd.crosstab(table[row], table[column])

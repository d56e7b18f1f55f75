"""
Data loading module.
Reads the movie metadata and monthly price-index CSV files into typed pandas tables.
"""

# Standard libs for CSV parsing, typing, and paths
import csv  # row-by-row delimited parsing
from typing import Dict, List, Optional, Tuple  # type hints
from pathlib import Path  # filesystem-safe paths

import numpy as np  # NaN marker for missing values
import pandas as pd  # in-memory tables

# Column schema and load summary shared across the project
from .models import MOVIE_COLUMNS, STRING, FLOAT, DATE, LoadReport
from .errors import ConfigurationError, MalformedRowError

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Handles loading of the two flat input tables.
	Malformed rows are skipped and counted; everything else is loaded whole or not at all.
	"""

	# Cell values that mean "no value" in the scraped data
	MISSING_MARKERS = {'', 'na', 'n/a', 'nan', 'null', 'none'}

	def __init__(self, delimiter: str = ','):
		"""Initialize the loader with the field delimiter used by both files."""
		self.delimiter = delimiter  # ',' for the public CSV exports

	def load_movies(self, filepath: str) -> Tuple[pd.DataFrame, LoadReport]:
		"""
		Load the movie metadata table.
		Every column in MOVIE_COLUMNS must be present; extra columns are kept for the cleaning stage.
		"""
		return self._load(filepath, MOVIE_COLUMNS)

	def load_price_index(
		self,
		filepath: str,
		date_column: str = 'DATE',
		value_column: str = 'CPIAUCSL',
	) -> Tuple[pd.DataFrame, LoadReport]:
		"""Load the monthly price-index table (one date column, one numeric index column)."""
		return self._load(filepath, {date_column: DATE, value_column: FLOAT})

	def _load(self, filepath: str, schema: Dict[str, str]) -> Tuple[pd.DataFrame, LoadReport]:
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading {filepath}...")  # log action
		report = LoadReport(path=str(filepath))  # per-file summary
		header, rows = self._read_rows(filepath, report)  # raw string cells
		self._validate_header(filepath, header, schema)  # fail before building the table

		table = pd.DataFrame(rows, columns=header, dtype=object)  # all cells still strings/NaN
		table = self._apply_types(table, schema)  # declared and inferred column types
		report.rows_loaded = len(table)

		if report.skipped:
			logger.warning(
				f"[DataLoader] Skipped {report.skipped} malformed rows in {filepath.name} (lines {report.skipped_rows[:10]})"
			)
		logger.info(f"[DataLoader] Loaded {report.rows_loaded} rows x {len(header)} columns from {filepath.name}")  # summary
		return table, report

	def _read_rows(self, filepath: Path, report: LoadReport) -> Tuple[List[str], List[List]]:
		"""
		Read the header and every well-formed row.
		Rows whose field count differs from the header are skipped and recorded on the report.
		"""
		rows = []  # accumulator for parsed rows
		with open(filepath, 'r', encoding='utf-8-sig', newline='') as f:
			reader = csv.reader(f, delimiter=self.delimiter)
			header = next(reader, None)  # first row names the fields
			if not header:
				raise ConfigurationError(f"{filepath} is empty or has no header row")
			header = [name.strip() for name in header]  # tolerate padded names

			for fields in reader:
				if not fields:  # blank line
					continue
				if len(fields) != len(header):  # wrong field count
					error = MalformedRowError(reader.line_num, len(header), len(fields))
					logger.debug(f"[DataLoader] Skipping malformed row | {error}")  # diagnostic
					report.skipped_rows.append(error.line_number)
					continue  # move on
				rows.append([self._clean_cell(value) for value in fields])  # collect

		return header, rows

	def _validate_header(self, filepath: Path, header: List[str], schema: Dict[str, str]):
		"""Check once, at load time, that every declared column is present exactly once."""
		duplicates = sorted({name for name in header if header.count(name) > 1})
		if duplicates:
			raise ConfigurationError(f"{filepath} has duplicated columns: {duplicates}")
		missing = [name for name in schema if name not in header]
		if missing:
			raise ConfigurationError(f"{filepath} is missing required columns: {missing}")

	def _clean_cell(self, value: str):
		"""Trim whitespace (including the non-breaking spaces in scraped titles); map missing markers to NaN."""
		value = value.strip()
		if value.lower() in self.MISSING_MARKERS:
			return np.nan
		return value

	def _apply_types(self, table: pd.DataFrame, schema: Dict[str, str]) -> pd.DataFrame:
		"""
		Coerce declared columns to their type; values that do not parse become missing.
		Undeclared columns become numeric only when every present value parses.
		"""
		typed = {}  # column name -> typed series
		for name in table.columns:
			column = table[name]
			kind = schema.get(name)
			if kind == FLOAT:
				typed[name] = pd.to_numeric(column, errors='coerce').astype(float)
			elif kind == DATE:
				typed[name] = pd.to_datetime(column, errors='coerce')
			elif kind == STRING:
				typed[name] = column
			else:
				typed[name] = self._infer_column(column)
		return pd.DataFrame(typed, index=table.index)

	def _infer_column(self, column: pd.Series) -> pd.Series:
		numeric = pd.to_numeric(column, errors='coerce')
		if numeric.isna().sum() == column.isna().sum():  # nothing was lost in conversion
			return numeric.astype(float)
		return column

	def count_missing(self, table: pd.DataFrame, columns: Optional[List[str]] = None) -> Dict[str, int]:
		"""Return the number of missing values per column, skipping columns that have none."""
		counts = table[columns or list(table.columns)].isna().sum()  # per-column totals
		return {name: int(n) for name, n in counts.items() if n}  # only columns with gaps

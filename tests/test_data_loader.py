"""
Tests for DataLoader: typing, malformed rows, missing markers and header validation.
Run: pytest tests/test_data_loader.py
"""

import math

import pytest

from imdb_report.data_loader import DataLoader
from imdb_report.errors import ConfigurationError
from imdb_report.models import MOVIE_COLUMNS


def test_load_movies_types_and_counts(movies_csv):
	table, report = DataLoader().load_movies(str(movies_csv))

	assert len(table) == 80
	assert report.rows_loaded == 80
	assert report.skipped == 0
	assert set(MOVIE_COLUMNS) <= set(table.columns)
	assert table['budget'].dtype == float
	assert table['title_year'].dtype == float
	assert table['language'].iloc[0] == 'English'  # undeclared text column stays text


def test_titles_are_stripped(movies_csv):
	table, _ = DataLoader().load_movies(str(movies_csv))
	assert table['movie_title'].iloc[0] == 'Movie 0'  # trailing non-breaking space removed


def test_malformed_rows_are_skipped_and_counted(tmp_path, movie_header, movie_rows, csv_writer):
	rows = movie_rows(n=5)
	rows[1] = rows[1][:-3]  # too few fields
	rows[3] = rows[3] + ['extra']  # too many fields
	path = csv_writer(tmp_path / 'movies.csv', movie_header, rows)

	table, report = DataLoader().load_movies(str(path))

	assert len(table) == 3
	assert report.skipped == 2
	assert report.skipped_rows == [3, 5]  # header is line 1
	assert list(table['movie_title']) == ['Movie 0', 'Movie 2', 'Movie 4']


def test_missing_markers_become_nan(tmp_path, movie_header, movie_rows, csv_writer):
	rows = movie_rows(n=3)
	rows[0][movie_header.index('budget')] = ''
	rows[1][movie_header.index('gross')] = 'NA'
	rows[2][movie_header.index('duration')] = 'unknown'  # unparseable numeric
	path = csv_writer(tmp_path / 'movies.csv', movie_header, rows)

	table, report = DataLoader().load_movies(str(path))

	assert report.skipped == 0
	assert math.isnan(table['budget'].iloc[0])
	assert math.isnan(table['gross'].iloc[1])
	assert math.isnan(table['duration'].iloc[2])
	assert DataLoader().count_missing(table) == {'budget': 1, 'gross': 1, 'duration': 1}


def test_missing_required_column_is_a_configuration_error(tmp_path, movie_header, csv_writer):
	header = [name for name in movie_header if name != 'imdb_score']
	path = csv_writer(tmp_path / 'movies.csv', header, [])
	with pytest.raises(ConfigurationError, match='imdb_score'):
		DataLoader().load_movies(str(path))


def test_duplicated_header_is_a_configuration_error(tmp_path, movie_header, csv_writer):
	path = csv_writer(tmp_path / 'movies.csv', movie_header + ['budget'], [])
	with pytest.raises(ConfigurationError, match='duplicated'):
		DataLoader().load_movies(str(path))


def test_empty_file_is_a_configuration_error(tmp_path):
	path = tmp_path / 'empty.csv'
	path.write_text('')
	with pytest.raises(ConfigurationError):
		DataLoader().load_price_index(str(path))


def test_missing_file():
	with pytest.raises(FileNotFoundError):
		DataLoader().load_movies('does/not/exist.csv')


def test_load_price_index(cpi_csv):
	table, report = DataLoader().load_price_index(str(cpi_csv))
	assert report.rows_loaded == 48
	assert str(table['DATE'].dtype).startswith('datetime64')
	assert table['DATE'].iloc[0].year == 2015
	assert table['CPIAUCSL'].dtype == float


def test_price_index_custom_columns(tmp_path, csv_writer):
	path = csv_writer(tmp_path / 'index.csv', ['month', 'level'], [['2018-01-01', '100'], ['2018-02-01', '102']])
	table, _ = DataLoader().load_price_index(str(path), date_column='month', value_column='level')
	assert list(table['level']) == [100.0, 102.0]


def test_byte_order_mark_before_header_is_ignored(tmp_path, movies_csv):
	path = tmp_path / 'movies_bom.csv'
	path.write_bytes(b'\xef\xbb\xbf' + movies_csv.read_bytes())  # spreadsheet-style UTF-8 export

	table, report = DataLoader().load_movies(str(path))

	assert report.rows_loaded == 80
	assert table.columns[0] == 'color'
	assert table['color'].iloc[0] == 'Color'

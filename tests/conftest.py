"""
Shared fixtures: small synthetic movie and price-index files written to a temp directory.
"""

import csv
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from imdb_report.config import PipelineConfig

GENRES = ['Action|Adventure', 'Comedy|Romance', 'Drama', 'Horror|Thriller', 'Animation|Family|Comedy']
ACTORS = ['Tom Hanks', 'Meryl Streep', 'Keanu Reeves', 'Eddie Murphy', 'Sigourney Weaver', 'Denzel Washington']
DIRECTORS = ['Wes Craven', 'Nora Ephron', 'Ridley Scott', 'Kathryn Bigelow']

PREDICTORS = ['duration', 'num_voted_users', 'adjusted_budget_z']

MOVIE_HEADER = [
	'color', 'director_name', 'num_critic_for_reviews', 'duration', 'director_facebook_likes',
	'actor_1_facebook_likes', 'gross', 'genres', 'actor_1_name', 'movie_title', 'num_voted_users',
	'cast_total_facebook_likes', 'facenumber_in_poster', 'language', 'budget', 'title_year',
	'imdb_score', 'movie_facebook_likes',
]


def write_csv(path: Path, header, rows) -> Path:
	with open(path, 'w', encoding='utf-8', newline='') as f:
		writer = csv.writer(f)
		writer.writerow(header)
		writer.writerows(rows)
	return path


def synthetic_movies(n: int = 80, seed: int = 7, years=(2015, 2016, 2017, 2018)):
	"""Complete movie rows whose score depends on votes and duration."""
	rng = np.random.RandomState(seed)
	rows = []
	for i in range(n):
		votes = int(rng.randint(1000, 500000))
		duration = int(rng.randint(80, 180))
		budget = float(rng.randint(1, 200)) * 1e6
		gross = budget * float(rng.uniform(0.2, 3.0))
		score = round(min(9.5, max(1.5, 3.0 + votes / 150000 + duration / 90 + rng.normal(0, 0.4))), 1)
		rows.append({
			'color': 'Color',
			'director_name': DIRECTORS[i % len(DIRECTORS)],
			'num_critic_for_reviews': int(rng.randint(10, 600)),
			'duration': duration,
			'director_facebook_likes': int(rng.randint(0, 20000)),
			'actor_1_facebook_likes': int(rng.choice([800, 12000, 40000, 150000])),
			'gross': round(gross),
			'genres': GENRES[i % len(GENRES)],
			'actor_1_name': ACTORS[i % len(ACTORS)],
			'movie_title': f"Movie {i}\xa0",
			'num_voted_users': votes,
			'cast_total_facebook_likes': int(rng.randint(100, 200000)),
			'facenumber_in_poster': int(rng.randint(0, 8)),
			'language': 'English',
			'budget': round(budget),
			'title_year': years[i % len(years)],
			'imdb_score': score,
			'movie_facebook_likes': int(rng.randint(0, 100000)),
		})
	return rows


def movie_row_values(row):
	return [row[name] for name in MOVIE_HEADER]


def monthly_index(yearly_levels):
	"""Twelve monthly rows per year, averaging exactly to the given level."""
	rows = []
	for year, level in yearly_levels.items():
		for month in range(1, 13):
			offset = (month - 6.5) / 10.0  # symmetric around the yearly level
			rows.append([f"{year}-{month:02d}-01", round(level + offset, 4)])
	return rows


def training_frame(n: int = 120, seed: int = 0) -> pd.DataFrame:
	"""Modeling-ready records whose score is linear in the three predictors."""
	rng = np.random.RandomState(seed)
	duration = rng.uniform(80, 180, n)
	votes = rng.uniform(1e3, 5e5, n)
	budget_z = rng.normal(0, 1, n)
	score = 1.0 + 0.02 * duration + 6e-6 * votes + 0.1 * budget_z + rng.normal(0, 0.05, n)
	return pd.DataFrame({
		'movie_title': [f"Movie {i}" for i in range(n)],
		'duration': duration,
		'num_voted_users': votes,
		'adjusted_budget_z': budget_z,
		'imdb_score': score,
	})


# Builders exposed as fixtures so test modules never import each other

@pytest.fixture
def movie_header():
	return list(MOVIE_HEADER)


@pytest.fixture
def movie_rows():
	"""Factory: synthetic movie rows as CSV value lists, with optional constant column overrides."""
	def build(n: int = 80, seed: int = 7, **constant):
		rows = synthetic_movies(n=n, seed=seed)
		for row in rows:
			row.update(constant)
		return [movie_row_values(row) for row in rows]
	return build


@pytest.fixture
def csv_writer():
	return write_csv


@pytest.fixture
def index_rows():
	return monthly_index


@pytest.fixture
def predictors():
	return list(PREDICTORS)


@pytest.fixture
def training_table():
	return training_frame


@pytest.fixture
def movies_csv(tmp_path):
	rows = synthetic_movies()
	return write_csv(tmp_path / 'movie_metadata.csv', MOVIE_HEADER, [movie_row_values(r) for r in rows])


@pytest.fixture
def cpi_csv(tmp_path):
	levels = {2015: 237.0, 2016: 240.0, 2017: 245.1, 2018: 251.1}
	return write_csv(tmp_path / 'cpi.csv', ['DATE', 'CPIAUCSL'], monthly_index(levels))


@pytest.fixture
def config(movies_csv, cpi_csv):
	return PipelineConfig(
		movies_path=movies_csv,
		price_index_path=cpi_csv,
		train_size=60,
		n_trees=15,
		seed=3,
	)

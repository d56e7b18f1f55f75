"""
Tests for rating tier, face tier and primary genre derivation.
"""

import numpy as np
import pandas as pd
import pytest

from imdb_report.categories import (
	AVERAGE, BAD, GREAT, MANY_FACES, NO_FACES, SOME_FACES,
	categorize, face_tier, primary_genre, rating_tier,
)


@pytest.mark.parametrize('score,tier', [
	(9.3, GREAT), (8.0, GREAT), (7.99, AVERAGE), (5.0, AVERAGE), (4.99, BAD), (1.0, BAD),
])
def test_rating_tier(score, tier):
	assert rating_tier(score) == tier


def test_rating_tiers_are_total_and_exclusive():
	for score in np.arange(0.0, 10.01, 0.05):
		tiers = [t for t, rule in [(GREAT, score >= 8), (AVERAGE, 5 <= score < 8), (BAD, score < 5)] if rule]
		assert tiers == [rating_tier(score)]


@pytest.mark.parametrize('count,tier', [
	(0, NO_FACES), (1, SOME_FACES), (4, SOME_FACES), (5, MANY_FACES), (12, MANY_FACES),
])
def test_face_tier(count, tier):
	assert face_tier(count) == tier


def test_missing_inputs_give_missing_labels():
	assert rating_tier(float('nan')) is None
	assert face_tier(float('nan')) is None
	assert face_tier(-1) is None
	assert primary_genre(None) is None


def test_primary_genre():
	assert primary_genre('Action|Adventure|Fantasy') == 'Action'
	assert primary_genre('Documentary') == 'Documentary'
	assert primary_genre(' Drama |Romance') == 'Drama'


def test_categorize_adds_labels_without_touching_input():
	table = pd.DataFrame({
		'imdb_score': [8.5, 6.1, 3.2],
		'facenumber_in_poster': [0.0, 5.0, 2.0],
		'genres': ['Drama', 'Comedy|Romance', 'Horror|Thriller'],
	})
	result = categorize(table)

	assert list(result['rating_tier']) == [GREAT, AVERAGE, BAD]
	assert list(result['face_tier']) == [NO_FACES, MANY_FACES, SOME_FACES]
	assert list(result['primary_genre']) == ['Drama', 'Comedy', 'Horror']
	assert 'rating_tier' not in table.columns


def test_categorize_twice_is_stable():
	table = pd.DataFrame({
		'imdb_score': [8.0, 5.0, 4.9],
		'facenumber_in_poster': [5.0, 0.0, 3.0],
		'genres': ['Action|Adventure', 'Drama', 'Comedy'],
	})
	once = categorize(table)
	twice = categorize(once)
	pd.testing.assert_frame_equal(once, twice)

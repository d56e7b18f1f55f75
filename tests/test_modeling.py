"""
Tests for the ordinal split, the variance guard and both model fits.
"""

import numpy as np
import pandas as pd
import pytest

from imdb_report.errors import DegenerateInputError
from imdb_report.modeling import check_variance, fit_forest, fit_linear_model, split_ordinal


def test_split_is_ordinal(training_table):
	table = training_table(10)
	train, holdout = split_ordinal(table, 7)
	assert list(train['movie_title']) == [f"Movie {i}" for i in range(7)]
	assert list(holdout['movie_title']) == ['Movie 7', 'Movie 8', 'Movie 9']
	assert list(holdout.index) == [0, 1, 2]


@pytest.mark.parametrize('size', [0, 10, 11])
def test_split_bounds(size, training_table):
	with pytest.raises(ValueError):
		split_ordinal(training_table(10), size)


def test_check_variance_names_constant_predictors(training_table, predictors):
	table = training_table(20).assign(duration=100.0)
	with pytest.raises(DegenerateInputError) as info:
		check_variance(table, predictors)
	assert info.value.predictors == ['duration']


def test_linear_model_recovers_coefficients(training_table, predictors):
	report = fit_linear_model(training_table(), predictors)

	assert list(report.coefficients.index) == ['Intercept'] + predictors
	assert list(report.coefficients.columns) == ['coefficient', 'std_error', 't_value', 'p_value']
	assert report.coefficients.loc['duration', 'coefficient'] == pytest.approx(0.02, abs=2e-3)
	assert report.coefficients.loc['duration', 'p_value'] < 1e-6
	assert report.r_squared > 0.95
	assert report.f_statistic > 100
	assert report.n_observations == 120
	assert set(predictors) <= set(report.anova.index)


def test_linear_model_skips_incomplete_rows(training_table, predictors):
	table = training_table()
	table.loc[[3, 4], 'num_voted_users'] = np.nan
	assert fit_linear_model(table, predictors).n_observations == 118


def test_linear_model_rejects_constant_predictor(training_table, predictors):
	table = training_table().assign(num_voted_users=5000.0)
	with pytest.raises(DegenerateInputError):
		fit_linear_model(table, predictors)


def test_forest_rejects_constant_duration(training_table, predictors):
	table = training_table().assign(duration=120.0)
	with pytest.raises(DegenerateInputError, match='duration'):
		fit_forest(table, predictors, n_trees=5)


def test_forest_report(training_table, predictors):
	report = fit_forest(training_table(), predictors, n_trees=20, seed=4)

	assert report.n_trees == 20
	assert report.n_observations == 120
	assert set(report.importance.index) == set(predictors)
	assert list(report.importance.columns) == ['inc_mse', 'pct_inc_mse', 'inc_node_purity']
	assert report.importance['inc_node_purity'].sum() == pytest.approx(1.0)
	assert report.importance.index[0] in ('duration', 'num_voted_users')  # the strong signals
	assert list(report.error_curve['n_trees']) == list(range(1, 21))
	assert report.error_curve['oob_mse'].iloc[-1] < report.error_curve['oob_mse'].iloc[0]


def test_forest_is_deterministic_for_a_seed(training_table, predictors):
	table = training_table()
	first = fit_forest(table, predictors, n_trees=10, seed=11)
	second = fit_forest(table, predictors, n_trees=10, seed=11)
	np.testing.assert_array_equal(first.predict(table), second.predict(table))
	pd.testing.assert_frame_equal(first.importance, second.importance)

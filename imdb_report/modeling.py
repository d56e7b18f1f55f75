"""
Model fitting module.
Splits the prepared table into a training and a held-out partition, then fits
an ordinary least squares model (statsmodels) and a random forest (scikit-learn).
"""

from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from sklearn.ensemble import RandomForestRegressor
from sklearn.inspection import permutation_importance

from loguru import logger

from .cleaning import drop_incomplete
from .errors import DegenerateInputError
from .models import LinearModelReport, ForestModelReport


def split_ordinal(table: pd.DataFrame, train_size: int) -> Tuple[pd.DataFrame, pd.DataFrame]:
	"""
	First `train_size` records train, the remaining records are held out.
	The split follows row order; there is no shuffle.
	"""
	if not 0 < train_size < len(table):
		raise ValueError(f"train_size must be between 1 and {len(table) - 1}, got {train_size}")
	train = table.iloc[:train_size].reset_index(drop=True)
	holdout = table.iloc[train_size:].reset_index(drop=True)
	logger.info(f"[Modeling] Ordinal split: {len(train)} training / {len(holdout)} held-out records")
	return train, holdout


def check_variance(train: pd.DataFrame, predictors: Sequence[str]):
	"""Raise DegenerateInputError naming every predictor that is constant (or empty) in `train`."""
	degenerate = [name for name in predictors if train[name].dropna().nunique() < 2]
	if degenerate:
		raise DegenerateInputError(degenerate)


def _training_rows(train: pd.DataFrame, predictors: Sequence[str], target: str) -> pd.DataFrame:
	missing = [name for name in list(predictors) + [target] if name not in train.columns]
	if missing:
		raise ValueError(f"training table has no columns {missing}")
	rows = drop_incomplete(train, list(predictors) + [target])
	if len(rows) != len(train):
		logger.info(f"[Modeling] Using {len(rows)} of {len(train)} training records (others miss a predictor or target)")
	check_variance(rows, predictors)
	return rows


def fit_linear_model(train: pd.DataFrame, predictors: Sequence[str], target: str = 'imdb_score') -> LinearModelReport:
	"""
	Ordinary least squares of `target` on `predictors`.
	Reports coefficient, standard error, t statistic and p value per term,
	the sequential ANOVA table and the overall F statistic.
	"""
	predictors = list(predictors)
	rows = _training_rows(train, predictors, target)

	formula = f"{target} ~ {' + '.join(predictors)}"
	results = smf.ols(formula, data=rows).fit()
	coefficients = pd.DataFrame({
		'coefficient': results.params,
		'std_error': results.bse,
		't_value': results.tvalues,
		'p_value': results.pvalues,
	})
	anova = sm.stats.anova_lm(results, typ=1)

	logger.info(
		f"[Modeling] OLS '{formula}' | n={int(results.nobs)} R2={results.rsquared:.3f} F={results.fvalue:.2f} (p={results.f_pvalue:.3g})"
	)
	return LinearModelReport(
		predictors=predictors,
		target=target,
		coefficients=coefficients,
		anova=anova,
		f_statistic=float(results.fvalue),
		f_pvalue=float(results.f_pvalue),
		r_squared=float(results.rsquared),
		n_observations=int(results.nobs),
		results=results,
	)


def fit_forest(
	train: pd.DataFrame,
	predictors: Sequence[str],
	target: str = 'imdb_score',
	n_trees: int = 500,
	seed: int = 1,
	max_features: float = 1 / 3,
	n_repeats: int = 5,
) -> ForestModelReport:
	"""
	Fit a seeded random forest regressor.

	Each tree sees a bootstrap resample of the training rows and a third of the
	predictors per split. Importance is reported two ways: the increase in MSE when
	a predictor is permuted (inc_mse, and pct_inc_mse relative to the unpermuted MSE)
	and the total impurity decrease (inc_node_purity).
	"""
	predictors = list(predictors)
	rows = _training_rows(train, predictors, target)
	features = rows[predictors].to_numpy(dtype=float)
	labels = rows[target].to_numpy(dtype=float)

	logger.info(f"[Modeling] Fitting random forest | trees={n_trees} seed={seed} n={len(rows)} predictors={predictors}")
	model = RandomForestRegressor(
		n_estimators=n_trees,
		max_features=max_features,
		bootstrap=True,
		random_state=seed,
	)
	model.fit(features, labels)

	baseline_mse = float(np.mean((labels - model.predict(features)) ** 2))
	permuted = permutation_importance(
		model,
		features,
		labels,
		scoring='neg_mean_squared_error',
		n_repeats=n_repeats,
		random_state=seed,
	)
	importance = pd.DataFrame({
		'inc_mse': permuted.importances_mean,
		'pct_inc_mse': 100.0 * permuted.importances_mean / baseline_mse if baseline_mse > 0 else np.nan,
		'inc_node_purity': model.feature_importances_,
	}, index=pd.Index(predictors, name='predictor')).sort_values('inc_mse', ascending=False)

	error_curve = oob_error_curve(model, features, labels)
	if len(error_curve):
		logger.info(f"[Modeling] Forest OOB MSE after {n_trees} trees: {error_curve['oob_mse'].iloc[-1]:.4f}")

	return ForestModelReport(
		predictors=predictors,
		target=target,
		model=model,
		importance=importance,
		error_curve=error_curve,
		n_trees=n_trees,
		seed=seed,
		n_observations=len(rows),
	)


def oob_error_curve(model: RandomForestRegressor, features: np.ndarray, labels: np.ndarray) -> pd.DataFrame:
	"""
	Out-of-bag MSE as trees are added: after tree k, each record is predicted by the
	mean of the first k trees that did not see it. Records without such a tree are skipped.
	"""
	n = len(labels)
	sums = np.zeros(n)
	counts = np.zeros(n, dtype=int)
	points: List[Tuple[int, float, int]] = []

	for k, (tree, in_bag) in enumerate(zip(model.estimators_, model.estimators_samples_), start=1):
		oob = np.ones(n, dtype=bool)
		oob[in_bag] = False
		if oob.any():
			sums[oob] += tree.predict(features[oob])
			counts[oob] += 1
		covered = counts > 0
		if covered.any():
			mse = float(np.mean((labels[covered] - sums[covered] / counts[covered]) ** 2))
		else:
			mse = np.nan
		points.append((k, mse, int(covered.sum())))

	return pd.DataFrame(points, columns=['n_trees', 'oob_mse', 'n_covered'])

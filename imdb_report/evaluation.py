"""
Prediction and evaluation module.
Applies the fitted forest to the held-out partition and scores each record.
"""

from typing import List

import numpy as np
import pandas as pd

from loguru import logger

from .models import ErrorSummary, ForestModelReport, PredictionResult


def squared_error(actual: float, predicted: float) -> float:
	"""(actual - predicted) ** 2; NaN when either side is undefined."""
	return (actual - predicted) ** 2


def predict_holdout(forest: ForestModelReport, holdout: pd.DataFrame, id_column: str = 'movie_title') -> pd.DataFrame:
	"""
	Predict every held-out record with the already fitted forest.
	Records missing a predictor get NaN prediction and squared error instead of being dropped.
	Returns columns record_id, predicted, actual, squared_error in holdout order.
	"""
	predicted = np.full(len(holdout), np.nan)
	scorable = holdout[forest.predictors].notna().all(axis=1).to_numpy()
	if scorable.any():
		predicted[scorable] = forest.predict(holdout.loc[scorable])

	actual = holdout[forest.target].to_numpy(dtype=float)
	results = pd.DataFrame({
		'record_id': holdout[id_column].to_numpy(),
		'predicted': predicted,
		'actual': actual,
		'squared_error': squared_error(actual, predicted),
	})
	logger.info(f"[Evaluation] Predicted {int(scorable.sum())} of {len(holdout)} held-out records")
	return results


def prediction_records(results: pd.DataFrame) -> List[PredictionResult]:
	return [PredictionResult(**row) for row in results.to_dict('records')]


def summarize_errors(results: pd.DataFrame) -> ErrorSummary:
	"""Aggregate squared error over records that have a defined prediction."""
	scored = results['squared_error'].dropna()
	mse = float(scored.mean()) if len(scored) else np.nan
	summary = ErrorSummary(
		n_scored=len(scored),
		n_excluded=len(results) - len(scored),
		mse=mse,
		rmse=float(np.sqrt(mse)),
	)
	logger.info(f"[Evaluation] Held-out MSE={summary.mse:.4f} RMSE={summary.rmse:.4f} over {summary.n_scored} records")
	return summary

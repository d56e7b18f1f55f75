"""
Run the IMDB score report.

This script:
1) Loads data/movie_metadata.csv and data/cpi.csv
2) Cleans, inflation-adjusts, standardizes and categorizes the movies
3) Prints the group reports and both model summaries
4) Saves the charts to reports/ (or IMDB_REPORT_FIGURES_DIR)

Usage:
    python -m scripts.run_report

Settings come from IMDB_REPORT_* environment variables (see imdb_report/config.py).
"""

import os  # log level override
import sys  # exit code and log sink
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from imdb_report.config import PipelineConfig  # validated settings
from imdb_report.aggregation import summary_records  # group rows as records
from imdb_report.errors import ReportError  # pipeline failures
from imdb_report.evaluation import prediction_records  # held-out rows as records
from imdb_report.inflation import factors_as_records  # yearly factors as records
from imdb_report.pipeline import ReportPipeline  # stage orchestration
from imdb_report.plots import render_all, save_figures  # chart sink


def main() -> int:
	# Console sink at the requested level
	logger.remove()
	logger.add(sys.stderr, level=os.getenv('IMDB_REPORT_LOG_LEVEL', 'INFO'))

	logger.info("=" * 60)
	logger.info("IMDB Score Report")
	logger.info("=" * 60)

	root = Path(__file__).resolve().parents[1]  # project root
	config = PipelineConfig.from_env(root)
	if config.figures_dir is None:
		config.figures_dir = root / 'reports'  # default chart directory

	try:
		result = ReportPipeline(config).run()
	except ReportError as e:
		logger.error(f"Report failed: {e}")
		return 1

	for factor in factors_as_records(result.inflation):
		logger.debug(f"[Report] {factor.year}: mean index {factor.mean_index:.2f}, factor {factor.adjustment:.4f}")

	# Group reports, highest mean score first
	for name, summary in result.reports.items():
		top = summary.sort_values('mean_imdb_score', ascending=False).head(10)
		logger.info(f"\nTop {name} groups by mean score:\n{top.to_string(index=False)}")
		flagged = [group.key for group in summary_records(summary) if group.outlier]
		if flagged:
			logger.info(f"Outlier {name} groups: {flagged[:20]}")

	if result.linear is not None:
		logger.info(f"\nLinear model (n={result.linear.n_observations}, R2={result.linear.r_squared:.3f}):")
		logger.info(f"\n{result.linear.coefficients.to_string()}")
		logger.info(f"\nANOVA:\n{result.linear.anova.to_string()}")
		logger.info(f"F={result.linear.f_statistic:.2f} p={result.linear.f_pvalue:.3g}")
	if result.forest is not None:
		logger.info(f"\nForest importance:\n{result.forest.importance.to_string()}")
	if result.errors is not None:
		logger.info(f"Held-out MSE={result.errors.mse:.4f} over {result.errors.n_scored} movies")
		worst = sorted(prediction_records(result.predictions.dropna()), key=lambda r: r.squared_error, reverse=True)
		for record in worst[:5]:
			logger.info(f"  {record.record_id}: predicted {record.predicted:.2f}, actual {record.actual:.1f}")
	if result.modeling_error:
		logger.warning(f"Models were not fitted: {result.modeling_error}")

	written = save_figures(render_all(result), config.figures_dir)
	logger.info(f"\nAll done! {len(written)} charts in {config.figures_dir}")
	logger.info("=" * 60)
	return 0


if __name__ == '__main__':
	sys.exit(main())  # invoke report

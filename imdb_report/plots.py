"""
Chart rendering.
Turns finished tables into matplotlib figures; nothing here feeds back into the pipeline.
"""

from pathlib import Path
from typing import Dict, List

import matplotlib
matplotlib.use('Agg')  # headless rendering for scripts and tests
import matplotlib.pyplot as plt
import seaborn as sns
from statsmodels.graphics.mosaicplot import mosaic

import pandas as pd

from loguru import logger

from .aggregation import contingency_table
from .categories import FACE_TIERS, RATING_TIERS
from .models import FACE_TIER, PRIMARY_GENRE, RATING_TIER, ForestModelReport, PipelineResult


def violin_scores_by_tier(table: pd.DataFrame):
	"""Score distribution per rating tier."""
	fig, ax = plt.subplots(figsize=(8, 5))
	order = [tier for tier in RATING_TIERS if tier in set(table[RATING_TIER])]
	sns.violinplot(data=table, x=RATING_TIER, y='imdb_score', order=order, ax=ax)
	ax.set_title('IMDB score by rating tier')
	return fig


def mosaic_tiers(table: pd.DataFrame):
	"""Rating tier against poster-face tier, tile area proportional to record count."""
	fig, ax = plt.subplots(figsize=(8, 6))
	counts = contingency_table(table, RATING_TIER, FACE_TIER)
	tiles = {
		(rating, faces): int(counts.loc[rating, faces])
		for rating in RATING_TIERS if rating in counts.index
		for faces in FACE_TIERS if faces in counts.columns
	}  # tiles in tier order
	mosaic(tiles, ax=ax, title='Rating tier vs faces on poster', labelizer=lambda key: '')
	return fig


def scatter_actors(actor_summary: pd.DataFrame):
	"""Mean actor popularity against mean score; outlier actors are labelled."""
	fig, ax = plt.subplots(figsize=(9, 6))
	sns.scatterplot(data=actor_summary, x='mean_actor_1_facebook_likes', y='mean_imdb_score', hue='outlier', ax=ax)
	for row in actor_summary[actor_summary['outlier']].itertuples(index=False):
		ax.annotate(str(row.key), (row.mean_actor_1_facebook_likes, row.mean_imdb_score), fontsize=7)
	ax.set_xlabel('mean facebook likes of primary actor')
	ax.set_ylabel('mean IMDB score')
	return fig


def box_scores_by_genre(table: pd.DataFrame):
	fig, ax = plt.subplots(figsize=(11, 5))
	order = table.groupby(PRIMARY_GENRE)['imdb_score'].median().sort_values(ascending=False).index
	sns.boxplot(data=table, x=PRIMARY_GENRE, y='imdb_score', order=list(order), ax=ax)
	ax.tick_params(axis='x', rotation=45)
	ax.set_title('IMDB score by primary genre')
	return fig


def bar_importance(forest: ForestModelReport):
	fig, ax = plt.subplots(figsize=(8, 5))
	importance = forest.importance.reset_index()
	sns.barplot(data=importance, x='pct_inc_mse', y='predictor', ax=ax)
	ax.set_xlabel('% increase in MSE when permuted')
	ax.set_title('Random forest predictor importance')
	return fig


def line_error_curve(forest: ForestModelReport):
	fig, ax = plt.subplots(figsize=(8, 4))
	ax.plot(forest.error_curve['n_trees'], forest.error_curve['oob_mse'])
	ax.set_xlabel('trees')
	ax.set_ylabel('out-of-bag MSE')
	ax.set_title('Forest error by tree count')
	return fig


def render_all(result: PipelineResult) -> Dict[str, plt.Figure]:
	"""Render every chart the run has data for, keyed by a file-friendly name."""
	figures = {
		'score_violin': violin_scores_by_tier(result.categorized),
		'tier_mosaic': mosaic_tiers(result.categorized),
		'genre_box': box_scores_by_genre(result.categorized),
	}
	if 'actor' in result.reports:
		figures['actor_scatter'] = scatter_actors(result.reports['actor'])
	if result.forest is not None:
		figures['forest_importance'] = bar_importance(result.forest)
		figures['forest_error'] = line_error_curve(result.forest)
	logger.info(f"[Plots] Rendered {len(figures)} charts")
	return figures


def save_figures(figures: Dict[str, plt.Figure], directory) -> List[Path]:
	"""Write each figure as <name>.png under `directory` and close it."""
	directory = Path(directory)
	directory.mkdir(parents=True, exist_ok=True)
	written = []
	for name, fig in figures.items():
		path = directory / f"{name}.png"
		fig.savefig(path, bbox_inches='tight')
		plt.close(fig)
		written.append(path)
	logger.info(f"[Plots] Saved {len(written)} charts to {directory}")
	return written

"""
Streamlit viewer for the IMDB score report.
Runs the pipeline locally on data/movie_metadata.csv and data/cpi.csv and renders the
group reports, model summaries and charts.

Run UI:                streamlit run streamlit_app.py
"""

# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Path utilities to find the data files
from pathlib import Path  # path handling
# Typing to make function signatures clearer
from typing import Optional  # indicates values can be None

from imdb_report.config import PipelineConfig  # validated settings
from imdb_report.errors import ReportError  # pipeline failures
from imdb_report.models import PipelineResult  # run output
from imdb_report.pipeline import ReportPipeline  # stage orchestration
from imdb_report import plots  # chart rendering

ROOT = Path(__file__).resolve().parent  # project root

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="IMDB Score Report", layout="wide")  # wide layout

# Main page title
st.title("🎬 What makes a movie score well on IMDB?")  # friendly header


# Cache runs so moving between tabs does not refit the forest
@st.cache_resource(show_spinner=True)
def run_pipeline(reference_year: int, train_size: int, n_trees: int, seed: int) -> Optional[PipelineResult]:
	"""Run the whole report with the sidebar settings."""
	try:
		config = PipelineConfig.from_env(
			ROOT, reference_year=reference_year, train_size=train_size, n_trees=n_trees, seed=seed
		)
		return ReportPipeline(config).run()
	except ReportError as e:
		# Show an error in the UI so users know which stage failed
		st.error(f"Report failed: {e}")
		return None


# Sidebar contains configuration controls
with st.sidebar:
	st.header("Settings")  # section label
	reference_year = st.number_input("Reference year (money in this year's dollars)", value=2018, step=1)
	train_size = st.number_input("Training records (first N)", min_value=1, value=2000, step=100)
	n_trees = st.slider("Forest size", min_value=10, max_value=1000, value=500, step=10)
	seed = st.number_input("Random seed", value=1, step=1)

result = run_pipeline(int(reference_year), int(train_size), int(n_trees), int(seed))
if result is None:
	st.stop()

# Load summary
for report in result.load_reports:
	st.caption(f"{Path(report.path).name}: {report.rows_loaded} rows loaded, {report.skipped} malformed rows skipped")
st.caption(f"{len(result.cleaned)} of {len(result.movies)} movies have every field filled in")

tab_explore, tab_groups, tab_models = st.tabs(["Explore", "Groups", "Models"])

with tab_explore:
	c1, c2 = st.columns(2)
	with c1:
		st.pyplot(plots.violin_scores_by_tier(result.categorized))
	with c2:
		st.pyplot(plots.mosaic_tiers(result.categorized))
	st.pyplot(plots.box_scores_by_genre(result.categorized))

with tab_groups:
	name = st.selectbox("Group by", list(result.reports))
	summary = result.reports[name]
	st.dataframe(summary.sort_values('mean_imdb_score', ascending=False), width='stretch')
	if name == 'actor':
		st.pyplot(plots.scatter_actors(summary))
		flagged = result.actor_movies[result.actor_movies['group_outlier'] == True]
		if len(flagged):
			st.caption("Movies of outlier actors")
			st.dataframe(flagged[['movie_title', 'actor_1_name', 'imdb_score', 'group_mean_imdb_score']], width='stretch')

with tab_models:
	if result.modeling_error:
		st.warning(f"Models were not fitted: {result.modeling_error}")
	if result.linear is not None:
		st.subheader("Linear model")
		st.write(f"R² = {result.linear.r_squared:.3f}, F = {result.linear.f_statistic:.2f} (p = {result.linear.f_pvalue:.3g})")
		st.dataframe(result.linear.coefficients)
		st.dataframe(result.linear.anova)
	if result.forest is not None:
		st.subheader("Random forest")
		c1, c2 = st.columns(2)
		with c1:
			st.pyplot(plots.bar_importance(result.forest))
		with c2:
			st.pyplot(plots.line_error_curve(result.forest))
	if result.errors is not None:
		st.metric("Held-out MSE", f"{result.errors.mse:.3f}", help=f"{result.errors.n_scored} movies scored")
		st.dataframe(result.predictions.sort_values('squared_error', ascending=False).head(20))

"""
Categorical derivation stage.
Per-record bucketing of score and poster faces, and primary-genre extraction.
"""

import math
from typing import Optional

import pandas as pd

from .models import RATING_TIER, FACE_TIER, PRIMARY_GENRE

GREAT = 'great'
AVERAGE = 'average'
BAD = 'bad'

NO_FACES = 'none'
SOME_FACES = 'some'
MANY_FACES = 'many'

RATING_TIERS = [BAD, AVERAGE, GREAT]  # display order
FACE_TIERS = [NO_FACES, SOME_FACES, MANY_FACES]

GENRE_DELIMITER = '|'


def _missing(value) -> bool:
	return value is None or (isinstance(value, float) and math.isnan(value))


def rating_tier(score) -> Optional[str]:
	"""great: score >= 8, average: 5 <= score < 8, bad: score < 5."""
	if _missing(score):
		return None
	if score >= 8:
		return GREAT
	if score >= 5:
		return AVERAGE
	return BAD


def face_tier(count) -> Optional[str]:
	"""
	none: 0 faces, some: 1-4 faces, many: 5 or more.
	Exactly five faces counts as many.
	"""
	if _missing(count) or count < 0:
		return None
	if count == 0:
		return NO_FACES
	if count < 5:
		return SOME_FACES
	return MANY_FACES


def primary_genre(genres) -> Optional[str]:
	"""First entry of a '|'-separated genre list; the whole string when there is no delimiter."""
	if _missing(genres):
		return None
	first = str(genres).split(GENRE_DELIMITER, 1)[0].strip()
	return first or None


def categorize(table: pd.DataFrame) -> pd.DataFrame:
	"""
	Return a copy of `table` with rating_tier, face_tier and primary_genre columns.
	Labels depend only on the source columns, so running this twice gives the same labels.
	"""
	categorized = table.copy()
	categorized[RATING_TIER] = table['imdb_score'].map(rating_tier)
	categorized[FACE_TIER] = table['facenumber_in_poster'].map(face_tier)
	categorized[PRIMARY_GENRE] = table['genres'].map(primary_genre)
	return categorized

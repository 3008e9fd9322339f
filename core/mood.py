"""
Mood match: expression scores -> mood -> movie picks.
"""
from __future__ import annotations
from typing import Dict, List
import logging

from core.models import Movie, MoodResult

logger = logging.getLogger(__name__)

# DeepFace emotion labels -> moods shown to the user
EXPRESSION_TO_MOOD = {
    "happy": "happy",
    "sad": "sad",
    "angry": "angry",
    "surprise": "surprised",
    "fear": "anxious",
    "disgust": "grumpy",
    "neutral": "calm",
}

MOODS = ["happy", "sad", "angry", "surprised", "anxious", "grumpy", "calm"]

MOVIES: Dict[str, List[Movie]] = {
    "happy": [
        Movie(title="Paddington 2", year=2017, genre="Comedy"),
        Movie(title="La La Land", year=2016, genre="Musical"),
        Movie(title="The Grand Budapest Hotel", year=2014, genre="Comedy"),
    ],
    "sad": [
        Movie(title="Inside Out", year=2015, genre="Animation"),
        Movie(title="The Intouchables", year=2011, genre="Drama"),
        Movie(title="Little Miss Sunshine", year=2006, genre="Comedy"),
    ],
    "angry": [
        Movie(title="Mad Max: Fury Road", year=2015, genre="Action"),
        Movie(title="John Wick", year=2014, genre="Action"),
        Movie(title="Kill Bill: Vol. 1", year=2003, genre="Action"),
    ],
    "surprised": [
        Movie(title="Inception", year=2010, genre="Sci-Fi"),
        Movie(title="Knives Out", year=2019, genre="Mystery"),
        Movie(title="The Prestige", year=2006, genre="Thriller"),
    ],
    "anxious": [
        Movie(title="My Neighbor Totoro", year=1988, genre="Animation"),
        Movie(title="The Secret Life of Walter Mitty", year=2013, genre="Adventure"),
        Movie(title="Amelie", year=2001, genre="Romance"),
    ],
    "grumpy": [
        Movie(title="Groundhog Day", year=1993, genre="Comedy"),
        Movie(title="Up", year=2009, genre="Animation"),
        Movie(title="As Good as It Gets", year=1997, genre="Comedy"),
    ],
    "calm": [
        Movie(title="Spirited Away", year=2001, genre="Animation"),
        Movie(title="The Shawshank Redemption", year=1994, genre="Drama"),
        Movie(title="Lost in Translation", year=2003, genre="Drama"),
    ],
}


def resolve_mood(scores: Dict[str, float]) -> str:
    """
    Map the top-scoring known expression to a mood.

    Raises:
        ValueError: no known expression in scores.
    """
    known = {k.lower(): float(v) for k, v in (scores or {}).items() if k.lower() in EXPRESSION_TO_MOOD}
    if not known:
        raise ValueError(f"No recognizable expression in scores: {sorted(scores or {})}")
    label = max(known, key=known.get)
    return EXPRESSION_TO_MOOD[label]


def recommend_movies(mood: str) -> List[Movie]:
    key = (mood or "").strip().lower()
    if key not in MOVIES:
        raise ValueError(f"Unknown mood: {mood}")
    return list(MOVIES[key])


def mood_from_expressions(scores: Dict[str, float]) -> MoodResult:
    mood = resolve_mood(scores)
    logger.debug(f"[mood] expressions={scores} -> mood={mood}")
    return MoodResult(
        mood=mood,
        source="camera",
        expressions=dict(scores),
        movies=recommend_movies(mood),
        message=f"You look {mood}. Here is what to watch.",
    )


def manual_mood(mood: str) -> MoodResult:
    key = (mood or "").strip().lower()
    movies = recommend_movies(key)
    logger.debug(f"[mood] manual pick mood={key}")
    return MoodResult(
        mood=key,
        source="manual",
        movies=movies,
        message=f"Feeling {key}? Here is what to watch.",
    )

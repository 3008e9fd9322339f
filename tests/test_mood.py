
import pytest
from core.mood import (EXPRESSION_TO_MOOD, MOODS, MOVIES, manual_mood, mood_from_expressions,
                       recommend_movies, resolve_mood)

def test_every_mood_has_movies():
    assert set(EXPRESSION_TO_MOOD.values()) == set(MOODS) == set(MOVIES)
    assert all(len(MOVIES[m]) >= 3 for m in MOODS)

def test_resolve_mood_picks_top_expression():
    assert resolve_mood({"happy": 0.1, "fear": 0.7, "neutral": 0.2}) == "anxious"
    assert resolve_mood({"Neutral": 0.9, "unknown": 5.0}) == "calm"
    with pytest.raises(ValueError):
        resolve_mood({})
    with pytest.raises(ValueError):
        resolve_mood({"contempt": 1.0})

def test_mood_from_expressions():
    res = mood_from_expressions({"surprise": 0.6, "happy": 0.4})
    assert res.mood == "surprised" and res.source == "camera"
    assert res.expressions["surprise"] == 0.6
    assert res.movies == MOVIES["surprised"]

def test_manual_mood():
    res = manual_mood("  Calm ")
    assert res.mood == "calm" and res.source == "manual"
    assert res.expressions == {}
    with pytest.raises(ValueError):
        manual_mood("hangry")
    with pytest.raises(ValueError):
        recommend_movies("")
